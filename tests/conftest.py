"""
Global test fixtures for the identity stores.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Store options for every multi-tenancy handling mode
- User and role factories
"""

from typing import Callable, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from identity_store.config import (
    MultiTenancyOptions,
    StoreOptions,
    StoreProviderOptions,
    TenantStoreOptions,
)
from identity_store.core.tenancy import MultiTenancyHandling
from identity_store.models import MongoRole, MongoUser
from identity_store.services import (
    MongoRoleStore,
    MongoUserStore,
    RoleStoreProvider,
    UserStoreProvider,
)

CONNECTION_STRING = "mongodb://localhost:27017"
DATABASE_NAME = "identity"


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def mock_identity_db(mock_async_mongo_client):
    """Provide mock identity database."""
    return mock_async_mongo_client[DATABASE_NAME]


# =============================================================================
# Options Fixtures
# =============================================================================

@pytest.fixture
def store_options() -> StoreOptions:
    """Base store options."""
    return StoreOptions(
        connection_string=CONNECTION_STRING,
        database_name=DATABASE_NAME,
        users_collection="users",
        roles_collection="roles",
    )


@pytest.fixture
def provider_options_factory(store_options) -> Callable[..., StoreProviderOptions]:
    """
    Build provider options for a handling mode.

    Usage:
        def test_something(provider_options_factory):
            options = provider_options_factory(MultiTenancyHandling.TENANT_FIELD)
    """
    def _factory(handling: Optional[MultiTenancyHandling], **kwargs) -> StoreProviderOptions:
        multi_tenancy = None
        if handling is not None:
            multi_tenancy = MultiTenancyOptions(handling=handling, **kwargs)
        return StoreProviderOptions(store=store_options, multi_tenancy=multi_tenancy)

    return _factory


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def user_store(store_options, mock_async_mongo_client) -> MongoUserStore:
    """User store without tenant, bound to the mock client."""
    store = MongoUserStore(TenantStoreOptions.from_options(store_options), client=mock_async_mongo_client)
    yield store
    store.dispose()


@pytest.fixture
def role_store(store_options, mock_async_mongo_client) -> MongoRoleStore:
    """Role store without tenant, bound to the mock client."""
    store = MongoRoleStore(TenantStoreOptions.from_options(store_options), client=mock_async_mongo_client)
    yield store
    store.dispose()


@pytest.fixture
def user_store_provider_factory(provider_options_factory, mock_async_mongo_client):
    """Build user store providers bound to the mock client."""
    def _factory(handling: Optional[MultiTenancyHandling], **kwargs) -> UserStoreProvider:
        return UserStoreProvider(provider_options_factory(handling, **kwargs), client=mock_async_mongo_client)

    return _factory


@pytest.fixture
def role_store_provider_factory(provider_options_factory, mock_async_mongo_client):
    """Build role store providers bound to the mock client."""
    def _factory(handling: Optional[MultiTenancyHandling], **kwargs) -> RoleStoreProvider:
        return RoleStoreProvider(provider_options_factory(handling, **kwargs), client=mock_async_mongo_client)

    return _factory


# =============================================================================
# Entity Fixtures
# =============================================================================

@pytest.fixture
def make_user() -> Callable[..., MongoUser]:
    """Factory of users with normalized name and email."""
    def _make(name: str = "testUser", email: str = "test@example.com", **kwargs) -> MongoUser:
        return MongoUser(
            name=name,
            normalized_name=name.upper(),
            email=email,
            normalized_email=email.upper(),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_role() -> Callable[..., MongoRole]:
    """Factory of roles with normalized name."""
    def _make(name: str = "admin", **kwargs) -> MongoRole:
        return MongoRole(name=name, normalized_name=name.upper(), **kwargs)

    return _make


@pytest_asyncio.fixture
async def insert_user(mock_identity_db):
    """
    Insert a user document directly in the users collection.

    Returns the inserted user, with its id set.
    """
    async def _insert(user: MongoUser, collection: str = "users", db=None) -> MongoUser:
        target = db if db is not None else mock_identity_db
        object_id = ObjectId()
        document = user.to_document()
        document["_id"] = object_id
        await target[collection].insert_one(document)
        user.id = str(object_id)
        return user

    return _insert


@pytest_asyncio.fixture
async def insert_role(mock_identity_db):
    """Insert a role document directly in the roles collection."""
    async def _insert(role: MongoRole, collection: str = "roles", db=None) -> MongoRole:
        target = db if db is not None else mock_identity_db
        object_id = ObjectId()
        document = role.to_document()
        document["_id"] = object_id
        await target[collection].insert_one(document)
        role.id = str(object_id)
        return role

    return _insert
