"""
Multi-tenant MongoDB stores of identity users and roles.
"""
from identity_store.config import (
    MultiTenancyOptions,
    Settings,
    StoreOptions,
    StoreProviderOptions,
    TenantStoreOptions,
    get_settings,
)
from identity_store.core.errors import (
    IdentityError,
    IdentityResult,
    IdentityStoreError,
    MultiTenancyNotConfiguredError,
    StoreConfigurationError,
    StoreDisposedError,
    StoreError,
    StoreErrorCode,
)
from identity_store.core.tenancy import MultiTenancyHandling, format_name, resolve_store_options
from identity_store.models import MongoClaim, MongoRole, MongoUser, MongoUserLogin, MongoUserToken
from identity_store.services import (
    MongoRoleStore,
    MongoUserStore,
    RoleStoreProvider,
    UserStoreProvider,
)

__version__ = "0.1.0"

__all__ = [
    "MultiTenancyOptions",
    "Settings",
    "StoreOptions",
    "StoreProviderOptions",
    "TenantStoreOptions",
    "get_settings",
    "IdentityError",
    "IdentityResult",
    "IdentityStoreError",
    "MultiTenancyNotConfiguredError",
    "StoreConfigurationError",
    "StoreDisposedError",
    "StoreError",
    "StoreErrorCode",
    "MultiTenancyHandling",
    "format_name",
    "resolve_store_options",
    "MongoClaim",
    "MongoRole",
    "MongoUser",
    "MongoUserLogin",
    "MongoUserToken",
    "MongoRoleStore",
    "MongoUserStore",
    "RoleStoreProvider",
    "UserStoreProvider",
]
