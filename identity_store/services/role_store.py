"""
MongoDB store of identity roles.
"""
import asyncio
from typing import Optional

from identity_store.core.errors import StoreErrorCode
from identity_store.models import MongoClaim, MongoRole
from identity_store.services.base_store import MongoStoreBase

CancelEvent = Optional[asyncio.Event]


class MongoRoleStore(MongoStoreBase[MongoRole]):
    """Store of roles in the roles collection."""

    entity_type = MongoRole
    entity_label = "role"
    not_found_code = StoreErrorCode.ROLE_NOT_FOUND
    not_modified_code = StoreErrorCode.ROLE_NOT_MODIFIED

    @property
    def collection_name(self) -> str:
        return self.options.roles_collection

    async def list_roles(self, cancel_event: CancelEvent = None) -> list[MongoRole]:
        """List all the roles visible to the store."""
        return await self.find_all_matching({}, cancel_event)

    async def get_role_id(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: role.id or None, cancel_event)

    async def get_role_name(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: role.name, cancel_event)

    async def set_role_name(self, role: MongoRole, role_name: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(role, "name", role_name), cancel_event)

    async def get_normalized_role_name(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: role.normalized_name, cancel_event)

    async def set_normalized_role_name(
        self,
        role: MongoRole,
        normalized_name: Optional[str],
        cancel_event: CancelEvent = None,
    ) -> None:
        await self._set(lambda: setattr(role, "normalized_name", normalized_name), cancel_event)

    # =========================================================================
    # Claims
    # =========================================================================

    async def get_claims(self, role: MongoRole, cancel_event: CancelEvent = None) -> list[MongoClaim]:
        return await self._get(lambda: list(role.claims), cancel_event)

    async def add_claim(self, role: MongoRole, claim: MongoClaim, cancel_event: CancelEvent = None) -> None:
        """Add a claim; a claim whose type is already present is ignored."""
        def _add() -> None:
            if not any(x.type == claim.type for x in role.claims):
                role.claims.append(claim.model_copy())

        await self._set(_add, cancel_event)

    async def remove_claim(self, role: MongoRole, claim: MongoClaim, cancel_event: CancelEvent = None) -> None:
        """Remove the claim with the type of the given one; absent claims are ignored."""
        def _remove() -> None:
            role.claims = [x for x in role.claims if x.type != claim.type]

        await self._set(_remove, cancel_event)
