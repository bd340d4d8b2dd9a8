"""
User model for the identity users collection.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from identity_store.models.base import MongoEntity
from identity_store.models.claim import MongoClaim, MongoUserLogin, MongoUserToken


class MongoUser(MongoEntity):
    """
    User document model for the users collection.
    """
    name: Optional[str] = Field(None, description="User name")
    normalized_name: Optional[str] = Field(None, description="Normalized user name used for lookups")
    email: Optional[str] = Field(None, description="Email address")
    normalized_email: Optional[str] = Field(None, description="Normalized email used for lookups")
    email_confirmed: bool = False
    password_hash: Optional[str] = Field(None, description="Hash of the user password")
    phone: Optional[str] = None
    phone_confirmed: bool = False

    lockout_enabled: bool = False
    lockout_end: Optional[datetime] = Field(None, description="Account locked until this timestamp")
    access_failed_count: Optional[int] = Field(
        None,
        description="Number of consecutive failed access attempts",
    )

    two_factor_enabled: bool = False
    security_stamp: Optional[str] = None
    recovery_codes: list[str] = Field(default_factory=list)
    authenticator_key: Optional[str] = None

    logins: list[MongoUserLogin] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list, description="Names of the roles of the user")
    claims: list[MongoClaim] = Field(default_factory=list)
    tokens: list[MongoUserToken] = Field(default_factory=list)
