"""
Capability protocols implemented by the identity stores.

An identity manager orchestrates validation, hashing and token issuance on
top of these primitives. Each protocol groups the accessors of one concern,
so a consumer can depend on the narrowest capability it needs.
"""
import asyncio
from datetime import datetime
from typing import Iterable, Optional, Protocol, TypeVar, runtime_checkable

from identity_store.core.errors import IdentityResult
from identity_store.models import MongoClaim, MongoRole, MongoUser, MongoUserLogin

EntityT = TypeVar("EntityT")
CancelEvent = Optional[asyncio.Event]


@runtime_checkable
class EntityStoreProtocol(Protocol[EntityT]):
    """Persistence of one entity type."""

    async def create(self, entity: EntityT, cancel_event: CancelEvent = None) -> IdentityResult: ...

    async def update(self, entity: EntityT, cancel_event: CancelEvent = None) -> IdentityResult: ...

    async def delete(self, entity: EntityT, cancel_event: CancelEvent = None) -> IdentityResult: ...

    async def find_by_id(self, entity_id: str, cancel_event: CancelEvent = None) -> Optional[EntityT]: ...

    async def find_by_name(self, normalized_name: str, cancel_event: CancelEvent = None) -> Optional[EntityT]: ...

    def dispose(self) -> None: ...


# =============================================================================
# User capabilities
# =============================================================================

@runtime_checkable
class UserStoreProtocol(EntityStoreProtocol[MongoUser], Protocol):
    async def get_user_id(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def get_user_name(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def set_user_name(self, user: MongoUser, user_name: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_normalized_user_name(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def set_normalized_user_name(self, user: MongoUser, normalized_name: Optional[str], cancel_event: CancelEvent = None) -> None: ...


@runtime_checkable
class UserPasswordStoreProtocol(Protocol):
    async def set_password_hash(self, user: MongoUser, password_hash: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_password_hash(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def has_password(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool: ...


@runtime_checkable
class UserEmailStoreProtocol(Protocol):
    async def set_email(self, user: MongoUser, email: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_email(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def get_email_confirmed(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool: ...

    async def set_email_confirmed(self, user: MongoUser, confirmed: bool, cancel_event: CancelEvent = None) -> None: ...

    async def find_by_email(self, normalized_email: str, cancel_event: CancelEvent = None) -> Optional[MongoUser]: ...

    async def get_normalized_email(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def set_normalized_email(self, user: MongoUser, normalized_email: Optional[str], cancel_event: CancelEvent = None) -> None: ...


@runtime_checkable
class UserPhoneNumberStoreProtocol(Protocol):
    async def set_phone_number(self, user: MongoUser, phone_number: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_phone_number(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def get_phone_number_confirmed(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool: ...

    async def set_phone_number_confirmed(self, user: MongoUser, confirmed: bool, cancel_event: CancelEvent = None) -> None: ...


@runtime_checkable
class UserLockoutStoreProtocol(Protocol):
    async def get_lockout_end_date(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[datetime]: ...

    async def set_lockout_end_date(self, user: MongoUser, lockout_end: Optional[datetime], cancel_event: CancelEvent = None) -> None: ...

    async def increment_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> int: ...

    async def reset_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> None: ...

    async def get_access_failed_count(self, user: MongoUser, cancel_event: CancelEvent = None) -> int: ...

    async def get_lockout_enabled(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool: ...

    async def set_lockout_enabled(self, user: MongoUser, enabled: bool, cancel_event: CancelEvent = None) -> None: ...


@runtime_checkable
class UserLoginStoreProtocol(Protocol):
    async def add_login(self, user: MongoUser, login: MongoUserLogin, cancel_event: CancelEvent = None) -> None: ...

    async def remove_login(self, user: MongoUser, provider: str, login_key: str, cancel_event: CancelEvent = None) -> None: ...

    async def get_logins(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[MongoUserLogin]: ...

    async def find_by_login(self, provider: str, login_key: str, cancel_event: CancelEvent = None) -> Optional[MongoUser]: ...


@runtime_checkable
class UserRoleStoreProtocol(Protocol):
    async def add_to_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> None: ...

    async def remove_from_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> None: ...

    async def get_roles(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[str]: ...

    async def is_in_role(self, user: MongoUser, role_name: str, cancel_event: CancelEvent = None) -> bool: ...

    async def get_users_in_role(self, role_name: str, cancel_event: CancelEvent = None) -> list[MongoUser]: ...


@runtime_checkable
class UserSecurityStampStoreProtocol(Protocol):
    async def set_security_stamp(self, user: MongoUser, stamp: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_security_stamp(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...


@runtime_checkable
class UserTwoFactorStoreProtocol(Protocol):
    async def set_two_factor_enabled(self, user: MongoUser, enabled: bool, cancel_event: CancelEvent = None) -> None: ...

    async def get_two_factor_enabled(self, user: MongoUser, cancel_event: CancelEvent = None) -> bool: ...

    async def replace_codes(self, user: MongoUser, recovery_codes: Iterable[str], cancel_event: CancelEvent = None) -> None: ...

    async def redeem_code(self, user: MongoUser, code: str, cancel_event: CancelEvent = None) -> bool: ...

    async def count_codes(self, user: MongoUser, cancel_event: CancelEvent = None) -> int: ...

    async def set_authenticator_key(self, user: MongoUser, key: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_authenticator_key(self, user: MongoUser, cancel_event: CancelEvent = None) -> Optional[str]: ...


@runtime_checkable
class UserClaimStoreProtocol(Protocol):
    async def get_claims(self, user: MongoUser, cancel_event: CancelEvent = None) -> list[MongoClaim]: ...

    async def add_claims(self, user: MongoUser, claims: Iterable[MongoClaim], cancel_event: CancelEvent = None) -> None: ...

    async def replace_claim(self, user: MongoUser, claim: MongoClaim, new_claim: MongoClaim, cancel_event: CancelEvent = None) -> None: ...

    async def remove_claims(self, user: MongoUser, claims: Iterable[MongoClaim], cancel_event: CancelEvent = None) -> None: ...

    async def get_users_for_claim(self, claim: MongoClaim, cancel_event: CancelEvent = None) -> list[MongoUser]: ...


@runtime_checkable
class UserTokenStoreProtocol(Protocol):
    async def set_token(self, user: MongoUser, provider: str, name: str, value: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def remove_token(self, user: MongoUser, provider: str, name: str, cancel_event: CancelEvent = None) -> None: ...

    async def get_token(self, user: MongoUser, provider: str, name: str, cancel_event: CancelEvent = None) -> Optional[str]: ...


# =============================================================================
# Role capabilities
# =============================================================================

@runtime_checkable
class RoleStoreProtocol(EntityStoreProtocol[MongoRole], Protocol):
    async def get_role_id(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def get_role_name(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def set_role_name(self, role: MongoRole, role_name: Optional[str], cancel_event: CancelEvent = None) -> None: ...

    async def get_normalized_role_name(self, role: MongoRole, cancel_event: CancelEvent = None) -> Optional[str]: ...

    async def set_normalized_role_name(self, role: MongoRole, normalized_name: Optional[str], cancel_event: CancelEvent = None) -> None: ...


@runtime_checkable
class RoleClaimStoreProtocol(Protocol):
    async def get_claims(self, role: MongoRole, cancel_event: CancelEvent = None) -> list[MongoClaim]: ...

    async def add_claim(self, role: MongoRole, claim: MongoClaim, cancel_event: CancelEvent = None) -> None: ...

    async def remove_claim(self, role: MongoRole, claim: MongoClaim, cancel_event: CancelEvent = None) -> None: ...
