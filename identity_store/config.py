"""
Store options and application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from identity_store.core.tenancy import (
    DEFAULT_COLLECTION_FORMAT,
    DEFAULT_DATABASE_FORMAT,
    MultiTenancyHandling,
)


class StoreOptions(BaseModel):
    """Connection, database and collection settings of the identity stores."""
    model_config = ConfigDict(frozen=True)

    connection_string: Optional[str] = Field(None, description="MongoDB connection string")
    database_name: Optional[str] = Field(None, description="Name of the identity database")
    users_collection: str = Field(default="users", description="Collection of users")
    roles_collection: str = Field(default="roles", description="Collection of roles")
    use_server_api_v1: bool = Field(
        default=False,
        description="Pin the MongoDB Stable API version 1 on the client",
    )


class TenantStoreOptions(StoreOptions):
    """Store options optionally bound to the tenant owning the entities."""
    tenant_id: Optional[str] = Field(None, description="Tenant used to filter entities")

    @property
    def has_tenant_set(self) -> bool:
        return bool(self.tenant_id and self.tenant_id.strip())

    @classmethod
    def from_options(cls, options: StoreOptions, tenant_id: Optional[str] = None) -> "TenantStoreOptions":
        values = StoreOptions.model_fields.keys()
        return cls(tenant_id=tenant_id, **{name: getattr(options, name) for name in values})


class MultiTenancyOptions(BaseModel):
    """How the data of tenants is segregated."""
    model_config = ConfigDict(frozen=True)

    handling: MultiTenancyHandling = Field(default=MultiTenancyHandling.NONE)
    database_format: str = Field(
        default=DEFAULT_DATABASE_FORMAT,
        description="Template of tenant database names ({tenant}, {database})",
    )
    collection_format: str = Field(
        default=DEFAULT_COLLECTION_FORMAT,
        description="Template of tenant collection names ({tenant}, {collection})",
    )


class StoreProviderOptions(BaseModel):
    """Base store options together with the multi-tenancy configuration."""
    model_config = ConfigDict(frozen=True)

    store: StoreOptions = Field(default_factory=StoreOptions)
    multi_tenancy: Optional[MultiTenancyOptions] = Field(
        None,
        description="Multi-tenancy configuration (None when not configured)",
    )


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB
    mongo_uri: Optional[str] = None
    mongo_database: Optional[str] = None
    users_collection: str = "users"
    roles_collection: str = "roles"
    use_server_api_v1: bool = False

    # Multi-tenancy (unset means not configured)
    multi_tenancy_handling: Optional[MultiTenancyHandling] = None
    database_format: str = DEFAULT_DATABASE_FORMAT
    collection_format: str = DEFAULT_COLLECTION_FORMAT

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def store_options(self) -> StoreOptions:
        """Build the base store options."""
        return StoreOptions(
            connection_string=self.mongo_uri,
            database_name=self.mongo_database,
            users_collection=self.users_collection,
            roles_collection=self.roles_collection,
            use_server_api_v1=self.use_server_api_v1,
        )

    def store_provider_options(self) -> StoreProviderOptions:
        """Build the options of the tenant store providers."""
        multi_tenancy = None
        if self.multi_tenancy_handling is not None:
            multi_tenancy = MultiTenancyOptions(
                handling=self.multi_tenancy_handling,
                database_format=self.database_format,
                collection_format=self.collection_format,
            )

        return StoreProviderOptions(
            store=self.store_options(),
            multi_tenancy=multi_tenancy,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
