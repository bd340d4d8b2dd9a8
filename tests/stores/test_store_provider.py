"""
Tests for the user and role store providers.
"""

import logging

import pytest

from identity_store.config import MultiTenancyOptions, StoreOptions, StoreProviderOptions
from identity_store.core.errors import MultiTenancyNotConfiguredError, StoreConfigurationError
from identity_store.core.tenancy import MultiTenancyHandling
from identity_store.services import MongoRoleStore, MongoUserStore, RoleStoreProvider, UserStoreProvider


class TestUserStoreProvider:
    """Tests for UserStoreProvider."""

    def test_get_store_returns_user_store(self, user_store_provider_factory):
        provider = user_store_provider_factory(MultiTenancyHandling.TENANT_FIELD)

        store = provider.get_store("acme")

        assert isinstance(store, MongoUserStore)
        assert store.options.tenant_id == "acme"
        assert store.collection_name == "users"

    def test_each_call_returns_independent_store(self, user_store_provider_factory):
        """Disposing a store should not affect the others."""
        provider = user_store_provider_factory(MultiTenancyHandling.TENANT_FIELD)

        first = provider.get_store("acme")
        second = provider.get_store("acme")
        first.dispose()

        assert first is not second
        assert second.disposed is False
        assert first.options == second.options

    def test_not_configured_raises(self, user_store_provider_factory):
        provider = user_store_provider_factory(None)

        with pytest.raises(MultiTenancyNotConfiguredError):
            provider.get_store("acme")

    def test_none_handling_ignores_tenant(self, user_store_provider_factory):
        provider = user_store_provider_factory(MultiTenancyHandling.NONE)

        store = provider.get_store("acme")

        assert store.options.has_tenant_set is False
        assert store.database_name == "identity"
        assert store.collection_name == "users"

    @pytest.mark.parametrize("tenant_id", [None, ""])
    def test_blank_tenant_rejected(self, user_store_provider_factory, tenant_id):
        provider = user_store_provider_factory(MultiTenancyHandling.TENANT_DATABASE)

        with pytest.raises(ValueError):
            provider.get_store(tenant_id)

    def test_tenant_database_store(self, user_store_provider_factory):
        store = user_store_provider_factory(MultiTenancyHandling.TENANT_DATABASE).get_store("acme")

        assert store.database_name == "acme_identity"
        assert store.collection_name == "users"

    def test_tenant_collection_store(self, user_store_provider_factory):
        store = user_store_provider_factory(
            MultiTenancyHandling.TENANT_COLLECTION,
            collection_format="{collection}_of_{tenant}",
        ).get_store("acme")

        assert store.database_name == "identity"
        assert store.collection_name == "users_of_acme"

    def test_store_logger_named_after_store_module(self, user_store_provider_factory):
        store = user_store_provider_factory(MultiTenancyHandling.NONE).get_store(None)

        assert isinstance(store.logger, logging.Logger)
        assert store.logger.name == MongoUserStore.__module__


class TestRoleStoreProvider:
    """Tests for RoleStoreProvider."""

    def test_get_store_returns_role_store(self, role_store_provider_factory):
        store = role_store_provider_factory(MultiTenancyHandling.TENANT_COLLECTION).get_store("acme")

        assert isinstance(store, MongoRoleStore)
        assert store.collection_name == "acme_roles"

    def test_not_configured_raises(self, role_store_provider_factory):
        with pytest.raises(MultiTenancyNotConfiguredError):
            role_store_provider_factory(None).get_store("acme")


class TestStoreConfiguration:
    """Stores built from incomplete options."""

    @pytest.mark.asyncio
    async def test_missing_database_name(self, mock_async_mongo_client, make_user):
        options = StoreProviderOptions(
            store=StoreOptions(connection_string="mongodb://localhost:27017"),
            multi_tenancy=MultiTenancyOptions(handling=MultiTenancyHandling.NONE),
        )
        provider = UserStoreProvider(options, client=mock_async_mongo_client)
        store = provider.get_store(None)

        with pytest.raises(StoreConfigurationError):
            await store.find_by_name("TESTUSER")
        with pytest.raises(StoreConfigurationError):
            await store.create(make_user())

    @pytest.mark.asyncio
    async def test_missing_connection_string(self):
        options = StoreProviderOptions(
            store=StoreOptions(database_name="identity"),
            multi_tenancy=MultiTenancyOptions(handling=MultiTenancyHandling.NONE),
        )
        store = RoleStoreProvider(options).get_store(None)

        with pytest.raises(StoreConfigurationError):
            await store.list_roles()

