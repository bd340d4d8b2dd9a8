"""
Per-tenant factories of identity stores.
"""
import logging
from typing import Generic, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorClient

from identity_store.config import StoreProviderOptions, TenantStoreOptions
from identity_store.core.tenancy import resolve_store_options
from identity_store.services.base_store import MongoStoreBase
from identity_store.services.role_store import MongoRoleStore
from identity_store.services.user_store import MongoUserStore

StoreT = TypeVar("StoreT", bound=MongoStoreBase)


class MongoStoreProviderBase(Generic[StoreT]):
    """
    Builds stores bound to the options of a tenant.

    The provider only holds immutable options: every call to get_store()
    resolves new options and returns an independent store.
    """

    store_type: type[StoreT]

    def __init__(
        self,
        options: StoreProviderOptions,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Initialize the provider.

        Args:
            options: Base store options and multi-tenancy configuration
            client: MongoDB client shared by the stores (defaults to the
                shared client of the connection string)
        """
        self.options = options
        self.client = client

    def get_store_options(self, tenant_id: Optional[str]) -> TenantStoreOptions:
        """
        Resolve the options of the stores of a tenant.

        Raises:
            MultiTenancyNotConfiguredError: If multi-tenancy is not configured
        """
        return resolve_store_options(self.options.store, self.options.multi_tenancy, tenant_id)

    def create_logger(self) -> logging.Logger:
        return logging.getLogger(self.store_type.__module__)

    def get_store(self, tenant_id: Optional[str]) -> StoreT:
        """Get a new store for the given tenant."""
        options = self.get_store_options(tenant_id)
        return self.store_type(options, logger=self.create_logger(), client=self.client)


class UserStoreProvider(MongoStoreProviderBase[MongoUserStore]):
    """Provides user stores scoped to a tenant."""
    store_type = MongoUserStore


class RoleStoreProvider(MongoStoreProviderBase[MongoRoleStore]):
    """Provides role stores scoped to a tenant."""
    store_type = MongoRoleStore
