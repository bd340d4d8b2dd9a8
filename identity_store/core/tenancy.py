"""
Multi-tenancy handling modes and derivation of tenant-scoped store options.

Given the base store options and a tenant identifier, the resolver produces
the options a store must be bound to:

- none: options are returned unchanged
- tenant_field: every entity carries the tenant id and queries filter on it
- tenant_database: each tenant gets its own database
- tenant_collection: each tenant gets its own users/roles collections
"""
import re
from enum import Enum
from typing import TYPE_CHECKING, Optional

from identity_store.core.errors import MultiTenancyNotConfiguredError, StoreConfigurationError

if TYPE_CHECKING:
    from identity_store.config import (
        MultiTenancyOptions,
        StoreOptions,
        TenantStoreOptions,
    )


class MultiTenancyHandling(str, Enum):
    """Strategies used to segregate the data of tenants."""
    NONE = "none"
    TENANT_FIELD = "tenant_field"
    TENANT_DATABASE = "tenant_database"
    TENANT_COLLECTION = "tenant_collection"


DEFAULT_DATABASE_FORMAT = "{tenant}_{database}"
DEFAULT_COLLECTION_FORMAT = "{tenant}_{collection}"

_PLACEHOLDER = re.compile(r"\{(tenant|database|collection)\}")


def format_name(template: str, **values: str) -> str:
    """
    Substitute the {tenant}, {database} and {collection} placeholders.

    All placeholders are replaced in a single pass, so a value containing
    a placeholder token is inserted literally and never substituted again.
    Placeholders without a value are left as they are.

    Args:
        template: Name template, e.g. "{tenant}_{database}"
        **values: Values keyed by placeholder name

    Returns:
        The formatted name
    """
    def _replace(match: re.Match) -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else value

    return _PLACEHOLDER.sub(_replace, template)


def resolve_store_options(
    options: "StoreOptions",
    multi_tenancy: Optional["MultiTenancyOptions"],
    tenant_id: Optional[str],
) -> "TenantStoreOptions":
    """
    Derive the options of a store scoped to the given tenant.

    Resolution never touches the database and never mutates its inputs.

    Args:
        options: Base store options
        multi_tenancy: Multi-tenancy configuration
        tenant_id: Identifier of the tenant

    Returns:
        A new TenantStoreOptions value

    Raises:
        MultiTenancyNotConfiguredError: If multi_tenancy is None
        ValueError: If tenant_id is blank and a tenant mode is configured
        StoreConfigurationError: If databases are per tenant and the base
            database name is not set
    """
    from identity_store.config import TenantStoreOptions

    if multi_tenancy is None:
        raise MultiTenancyNotConfiguredError("The multi-tenancy options were not set")

    handling = MultiTenancyHandling(multi_tenancy.handling)
    base = TenantStoreOptions.from_options(options)

    if handling == MultiTenancyHandling.NONE:
        return base

    if not tenant_id or not tenant_id.strip():
        raise ValueError(f"A tenant identifier is required when multi-tenancy is handled by {handling.value}")

    if handling == MultiTenancyHandling.TENANT_FIELD:
        return base.model_copy(update={"tenant_id": tenant_id})

    if handling == MultiTenancyHandling.TENANT_DATABASE:
        if not options.database_name or not options.database_name.strip():
            raise StoreConfigurationError("The database name was not configured")

        database_name = format_name(
            multi_tenancy.database_format,
            tenant=tenant_id,
            database=options.database_name,
        )
        return base.model_copy(update={"database_name": database_name})

    if handling == MultiTenancyHandling.TENANT_COLLECTION:
        users_collection = format_name(
            multi_tenancy.collection_format,
            tenant=tenant_id,
            collection=options.users_collection,
        )
        roles_collection = format_name(
            multi_tenancy.collection_format,
            tenant=tenant_id,
            collection=options.roles_collection,
        )
        return base.model_copy(update={
            "users_collection": users_collection,
            "roles_collection": roles_collection,
        })

    raise ValueError(f"Unsupported multi-tenancy handling: {handling}")
