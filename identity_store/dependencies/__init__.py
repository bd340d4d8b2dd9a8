"""
Dependencies for dependency injection in routes.
"""
from identity_store.dependencies.stores import (
    get_user_store_provider,
    get_role_store_provider,
    get_tenant_user_store,
    get_tenant_role_store,
    TenantUserStore,
    TenantRoleStore,
)

__all__ = [
    "get_user_store_provider",
    "get_role_store_provider",
    "get_tenant_user_store",
    "get_tenant_role_store",
    "TenantUserStore",
    "TenantRoleStore",
]
