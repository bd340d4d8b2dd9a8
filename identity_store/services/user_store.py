"""
MongoDB store of identity users.
"""
import asyncio
from datetime import datetime
from typing import Iterable, Optional

from identity_store.core.errors import StoreErrorCode
from identity_store.models import MongoClaim, MongoUser, MongoUserLogin, MongoUserToken
from identity_store.services.base_store import MongoStoreBase

CancelEvent = Optional[asyncio.Event]


class MongoUserStore(MongoStoreBase[MongoUser]):
    """
    Store of users in the users collection.

    Accessors only read or mutate the given user in memory: changes are
    persisted by a following call to update().
    """

    entity_type = MongoUser
    entity_label = "user"
    not_found_code = StoreErrorCode.USER_NOT_FOUND
    not_modified_code = StoreErrorCode.USER_NOT_MODIFIED

    @property
    def collection_name(self) -> str:
        return self.options.users_collection

    async def list_users(self, cancel_event: CancelEvent = None) -> list[MongoUser]:
        """List all the users visible to the store."""
        return await self.find_all_matching({}, cancel_event)

    # =========================================================================
    # Identity
    # =========================================================================

    async def get_user_id(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.id or None, cancel_event)

    async def get_user_name(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.name, cancel_event)

    async def set_user_name(self, user: MongoUser, user_name: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "name", user_name), cancel_event)

    async def get_normalized_user_name(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.normalized_name, cancel_event)

    async def set_normalized_user_name(
        self,
        user: MongoUser,
        normalized_name: Optional[str],
        cancel_event: CancelEvent = None,
    ) -> None:
        await self._set(lambda: setattr(user, "normalized_name", normalized_name), cancel_event)

    # =========================================================================
    # Password
    # =========================================================================

    async def set_password_hash(self, user: MongoUser, password_hash: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "password_hash", password_hash), cancel_event)

    async def get_password_hash(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.password_hash, cancel_event)

    async def has_password(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: bool(user.password_hash and user.password_hash.strip()), cancel_event)

    # =========================================================================
    # Email
    # =========================================================================

    async def set_email(self, user: MongoUser, email: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "email", email), cancel_event)

    async def get_email(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.email, cancel_event)

    async def get_email_confirmed(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: user.email_confirmed, cancel_event)

    async def set_email_confirmed(self, user: MongoUser, confirmed: bool, cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "email_confirmed", confirmed), cancel_event)

    async def find_by_email(self, normalized_email: str, cancel_event: CancelEvent = None) -> Optional[MongoUser]:
        self.trace(f"Trying to find a user for e-mail '{normalized_email}' in")

        return await self.find_one({"normalized_email": normalized_email}, cancel_event)

    async def get_normalized_email(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.normalized_email, cancel_event)

    async def set_normalized_email(
        self,
        user: MongoUser,
        normalized_email: Optional[str],
        cancel_event: CancelEvent = None,
    ) -> None:
        await self._set(lambda: setattr(user, "normalized_email", normalized_email), cancel_event)

    # =========================================================================
    # Phone number
    # =========================================================================

    async def set_phone_number(self, user: MongoUser, phone_number: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "phone", phone_number), cancel_event)

    async def get_phone_number(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.phone, cancel_event)

    async def get_phone_number_confirmed(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: user.phone_confirmed, cancel_event)

    async def set_phone_number_confirmed(self, user: MongoUser, confirmed: bool, cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "phone_confirmed", confirmed), cancel_event)

    # =========================================================================
    # Lockout
    # =========================================================================

    async def get_lockout_end_date(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[datetime]:
        return await self._get(lambda: user.lockout_end, cancel_event)

    async def set_lockout_end_date(
        self,
        user: MongoUser,
        lockout_end: Optional[datetime],
        cancel_event: CancelEvent = None,
    ) -> None:
        await self._set(lambda: setattr(user, "lockout_end", lockout_end), cancel_event)

    async def increment_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> int:
        def _increment() -> int:
            user.access_failed_count = (user.access_failed_count or 0) + 1
            return user.access_failed_count

        return await self._get(_increment, cancel_event)

    async def reset_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "access_failed_count", None), cancel_event)

    async def get_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> int:
        return await self._get(lambda: user.access_failed_count or 0, cancel_event)

    async def get_lockout_enabled(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: user.lockout_enabled, cancel_event)

    async def set_lockout_enabled(self, user: MongoUser, enabled: bool, cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "lockout_enabled", enabled), cancel_event)

    # =========================================================================
    # Logins
    # =========================================================================

    async def add_login(self, user: MongoUser, login: MongoUserLogin, cancel_event: CancelEvent = None) -> None:
        """Link an external login; a login with the same provider and key is kept as is."""
        def _add() -> None:
            if not any(x.provider == login.provider and x.login_key == login.login_key for x in user.logins):
                user.logins.append(login.model_copy())

        await self._set(_add, cancel_event)

    async def remove_login(
        self,
        user: MongoUser,
        provider: str,
        login_key: str,
        cancel_event: CancelEvent = None,
    ) -> None:
        def _remove() -> None:
            user.logins = [
                x for x in user.logins
                if not (x.provider == provider and x.login_key == login_key)
            ]

        await self._set(_remove, cancel_event)

    async def get_logins(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[MongoUserLogin]:
        return await self._get(lambda: list(user.logins), cancel_event)

    async def find_by_login(
        self,
        provider: str,
        login_key: str,
        cancel_event: CancelEvent = None,
    ) -> Optional[MongoUser]:
        self.trace(f"Trying to find a user for the login '{provider}' in")

        filter = {"logins": {"$elemMatch": {"provider": provider, "login_key": login_key}}}
        return await self.find_one(filter, cancel_event)

    # =========================================================================
    # Tokens
    # =========================================================================

    async def set_token(
        self,
        user: MongoUser,
        provider: str,
        name: str,
        value: Optional[str],
        cancel_event: CancelEvent = None,
    ) -> None:
        """Set the value of a token, replacing the one with the same provider and name."""
        def _set_token() -> None:
            tokens = [x for x in user.tokens if not (x.provider == provider and x.token_name == name)]
            tokens.append(MongoUserToken(provider=provider, token_name=name, token=value))
            user.tokens = tokens

        await self._set(_set_token, cancel_event)

    async def remove_token(self, user: MongoUser, provider: str, name: str, cancel_event: CancelEvent = None) -> None:
        def _remove() -> None:
            user.tokens = [x for x in user.tokens if not (x.provider == provider and x.token_name == name)]

        await self._set(_remove, cancel_event)

    async def get_token(self, user: MongoUser, provider: str, name: str, cancel_event: CancelEvent = None) -> Optional[str]:
        def _find() -> Optional[str]:
            for token in user.tokens:
                if token.provider == provider and token.token_name == name:
                    return token.token
            return None

        return await self._get(_find, cancel_event)

    # =========================================================================
    # Roles
    # =========================================================================

    async def add_to_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> None:
        def _add() -> None:
            if role_name not in user.roles:
                user.roles.append(role_name)

        await self._set(_add, cancel_event)

    async def remove_from_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> None:
        def _remove() -> None:
            if role_name in user.roles:
                user.roles.remove(role_name)

        await self._set(_remove, cancel_event)

    async def get_roles(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[str]:
        return await self._get(lambda: list(user.roles), cancel_event)

    async def is_in_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: role_name in user.roles, cancel_event)

    async def get_users_in_role(self, role_name: str, cancel_event: CancelEvent = None) -> list[MongoUser]:
        self.trace(f"Trying to retrieve all users with role '{role_name}' in")

        return await self.find_all_matching({"roles": role_name}, cancel_event)

    # =========================================================================
    # Security stamp
    # =========================================================================

    async def set_security_stamp(self, user: MongoUser, stamp: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "security_stamp", stamp), cancel_event)

    async def get_security_stamp(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.security_stamp, cancel_event)

    # =========================================================================
    # Two factors
    # =========================================================================

    async def set_two_factor_enabled(self, user: MongoUser, enabled: bool, cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "two_factor_enabled", enabled), cancel_event)

    async def get_two_factor_enabled(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool:
        return await self._get(lambda: user.two_factor_enabled, cancel_event)

    async def replace_codes(self, user: MongoUser, recovery_codes: Iterable[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "recovery_codes", list(recovery_codes)), cancel_event)

    async def redeem_code(self, user: MongoUser, code: str, cancel_event: CancelEvent = None) -> bool:
        """Consume a recovery code; returns False if the code is unknown."""
        def _redeem() -> bool:
            if code in user.recovery_codes:
                user.recovery_codes.remove(code)
                return True
            return False

        return await self._get(_redeem, cancel_event)

    async def count_codes(self, user: MongoUser, cancel_event: CancelEvent = None) -> int:
        return await self._get(lambda: len(user.recovery_codes), cancel_event)

    async def set_authenticator_key(self, user: MongoUser, key: Optional[str], cancel_event: CancelEvent = None) -> None:
        await self._set(lambda: setattr(user, "authenticator_key", key), cancel_event)

    async def get_authenticator_key(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]:
        return await self._get(lambda: user.authenticator_key, cancel_event)

    # =========================================================================
    # Claims
    # =========================================================================

    async def get_claims(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[MongoClaim]:
        return await self._get(lambda: list(user.claims), cancel_event)

    async def add_claims(self, user: MongoUser, claims: Iterable[MongoClaim], cancel_event: CancelEvent = None) -> None:
        """Add claims; a claim whose type is already present is ignored."""
        def _add() -> None:
            for claim in claims:
                if not any(x.type == claim.type for x in user.claims):
                    user.claims.append(claim.model_copy())

        await self._set(_add, cancel_event)

    async def replace_claim(
        self,
        user: MongoUser,
        claim: MongoClaim,
        new_claim: MongoClaim,
        cancel_event: CancelEvent = None,
    ) -> None:
        def _replace() -> None:
            claims = [x for x in user.claims if x.type != claim.type]
            claims.append(new_claim.model_copy())
            user.claims = claims

        await self._set(_replace, cancel_event)

    async def remove_claims(self, user: MongoUser, claims: Iterable[MongoClaim], cancel_event: CancelEvent = None) -> None:
        def _remove() -> None:
            types = {claim.type for claim in claims}
            user.claims = [x for x in user.claims if x.type not in types]

        await self._set(_remove, cancel_event)

    async def get_users_for_claim(self, claim: MongoClaim, cancel_event: CancelEvent = None) -> list[MongoUser]:
        self.trace(f"Trying to find all users for claim '{claim.type}' with value '{claim.value}' in")

        filter = {"claims": {"$elemMatch": {"type": claim.type, "value": claim.value}}}
        return await self.find_all_matching(filter, cancel_event)
