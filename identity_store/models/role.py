"""
Role model for the identity roles collection.
"""
from typing import Optional

from pydantic import Field

from identity_store.models.base import MongoEntity
from identity_store.models.claim import MongoClaim


class MongoRole(MongoEntity):
    """
    Role document model for the roles collection.

    In a multi-tenant context several tenants can define a role with the
    same name without seeing each other's.
    """
    name: Optional[str] = Field(None, description="Name of the role")
    normalized_name: Optional[str] = Field(None, description="Normalized role name used for lookups")
    claims: list[MongoClaim] = Field(default_factory=list)
