"""
FastAPI dependencies providing identity stores scoped to the tenant of a request.
"""
from functools import lru_cache
from typing import Annotated, AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException, status

from identity_store.config import get_settings
from identity_store.core.errors import StoreConfigurationError
from identity_store.services.role_store import MongoRoleStore
from identity_store.services.store_provider import RoleStoreProvider, UserStoreProvider
from identity_store.services.user_store import MongoUserStore


@lru_cache
def get_user_store_provider() -> UserStoreProvider:
    """Get the user store provider configured from the settings."""
    return UserStoreProvider(get_settings().store_provider_options())


@lru_cache
def get_role_store_provider() -> RoleStoreProvider:
    """Get the role store provider configured from the settings."""
    return RoleStoreProvider(get_settings().store_provider_options())


async def get_tenant_user_store(
    provider: Annotated[UserStoreProvider, Depends(get_user_store_provider)],
    x_tenant_id: Annotated[Optional[str], Header(description="Identifier of the tenant")] = None,
) -> AsyncIterator[MongoUserStore]:
    """
    Dependency yielding a user store scoped to the X-Tenant-Id header.

    The store is disposed once the request completes.

    Raises:
        HTTPException 400: If the tenant header is required and missing
        HTTPException 500: If multi-tenancy is not configured
    """
    store = _get_store(provider, x_tenant_id)
    try:
        yield store
    finally:
        store.dispose()


async def get_tenant_role_store(
    provider: Annotated[RoleStoreProvider, Depends(get_role_store_provider)],
    x_tenant_id: Annotated[Optional[str], Header(description="Identifier of the tenant")] = None,
) -> AsyncIterator[MongoRoleStore]:
    """Dependency yielding a role store scoped to the X-Tenant-Id header."""
    store = _get_store(provider, x_tenant_id)
    try:
        yield store
    finally:
        store.dispose()


def _get_store(provider, tenant_id: Optional[str]):
    try:
        return provider.get_store(tenant_id)
    except StoreConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


# Type aliases for cleaner route signatures
TenantUserStore = Annotated[MongoUserStore, Depends(get_tenant_user_store)]
TenantRoleStore = Annotated[MongoRoleStore, Depends(get_tenant_role_store)]
