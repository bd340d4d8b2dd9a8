"""
Tests for store options and settings loaded from the environment.
"""

import pytest
from pydantic import ValidationError

from identity_store.config import (
    MultiTenancyOptions,
    Settings,
    StoreOptions,
    TenantStoreOptions,
)
from identity_store.core.tenancy import MultiTenancyHandling


class TestStoreOptions:
    """Tests for the option models."""

    def test_collection_defaults(self):
        """Collections should default to users and roles."""
        options = StoreOptions(connection_string="mongodb://localhost", database_name="testdb")

        assert options.users_collection == "users"
        assert options.roles_collection == "roles"
        assert options.use_server_api_v1 is False

    def test_options_are_frozen(self):
        """Options are immutable values."""
        options = StoreOptions(connection_string="mongodb://localhost", database_name="testdb")

        with pytest.raises(ValidationError):
            options.database_name = "other"

    def test_tenant_options_from_options(self):
        """Tenant options should copy every base setting."""
        options = StoreOptions(
            connection_string="mongodb://localhost",
            database_name="testdb",
            users_collection="people",
            roles_collection="groups",
        )

        tenant_options = TenantStoreOptions.from_options(options, tenant_id="acme")

        assert tenant_options.connection_string == "mongodb://localhost"
        assert tenant_options.database_name == "testdb"
        assert tenant_options.users_collection == "people"
        assert tenant_options.roles_collection == "groups"
        assert tenant_options.tenant_id == "acme"
        assert tenant_options.has_tenant_set is True

    @pytest.mark.parametrize("tenant_id", [None, "", "  "])
    def test_has_tenant_set_false_for_blank_tenant(self, tenant_id):
        options = TenantStoreOptions(tenant_id=tenant_id)

        assert options.has_tenant_set is False

    def test_multi_tenancy_defaults(self):
        """Multi-tenancy should be disabled with the default formats."""
        options = MultiTenancyOptions()

        assert options.handling == MultiTenancyHandling.NONE
        assert options.database_format == "{tenant}_{database}"
        assert options.collection_format == "{tenant}_{collection}"

    def test_handling_parsed_from_string(self):
        options = MultiTenancyOptions(handling="tenant_collection")

        assert options.handling == MultiTenancyHandling.TENANT_COLLECTION


class TestSettings:
    """Tests for Settings built from environment variables."""

    def test_settings_from_environment(self, monkeypatch):
        """Settings should read the MongoDB options from the environment."""
        monkeypatch.setenv("MONGO_URI", "mongodb://127.0.0.1:2749")
        monkeypatch.setenv("MONGO_DATABASE", "testdb")
        monkeypatch.setenv("USERS_COLLECTION", "app_users")

        settings = Settings(_env_file=None)
        options = settings.store_options()

        assert options.connection_string == "mongodb://127.0.0.1:2749"
        assert options.database_name == "testdb"
        assert options.users_collection == "app_users"
        assert options.roles_collection == "roles"

    def test_multi_tenancy_not_configured_by_default(self, monkeypatch):
        """Without a handling setting, multi-tenancy is not configured."""
        monkeypatch.delenv("MULTI_TENANCY_HANDLING", raising=False)

        settings = Settings(_env_file=None)

        assert settings.store_provider_options().multi_tenancy is None

    def test_multi_tenancy_from_environment(self, monkeypatch):
        """Handling and formats should be read from the environment."""
        monkeypatch.setenv("MONGO_URI", "mongodb://127.0.0.1:2749")
        monkeypatch.setenv("MONGO_DATABASE", "testdb")
        monkeypatch.setenv("MULTI_TENANCY_HANDLING", "tenant_database")
        monkeypatch.setenv("DATABASE_FORMAT", "{database}_{tenant}")

        provider_options = Settings(_env_file=None).store_provider_options()

        assert provider_options.store.database_name == "testdb"
        assert provider_options.multi_tenancy is not None
        assert provider_options.multi_tenancy.handling == MultiTenancyHandling.TENANT_DATABASE
        assert provider_options.multi_tenancy.database_format == "{database}_{tenant}"
        assert provider_options.multi_tenancy.collection_format == "{tenant}_{collection}"

    def test_invalid_handling_rejected(self, monkeypatch):
        monkeypatch.setenv("MULTI_TENANCY_HANDLING", "per_shard")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
