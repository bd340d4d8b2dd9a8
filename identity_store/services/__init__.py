"""
Service layer - Tenant-aware identity stores and their providers.
"""
from identity_store.services.user_store import MongoUserStore
from identity_store.services.role_store import MongoRoleStore
from identity_store.services.store_provider import UserStoreProvider, RoleStoreProvider

__all__ = [
    "MongoUserStore",
    "MongoRoleStore",
    "UserStoreProvider",
    "RoleStoreProvider",
]
