"""
Error codes, operation results and exceptions raised by the identity stores.
"""
from enum import Enum

from pydantic import BaseModel, Field


class StoreErrorCode(str, Enum):
    """Stable error codes reported in failed results."""
    UNKNOWN_ERROR = "MONGO-0100"
    USER_NOT_FOUND = "MONGO-0301"
    USER_NOT_MODIFIED = "MONGO-0302"
    ROLE_NOT_FOUND = "MONGO-0401"
    ROLE_NOT_MODIFIED = "MONGO-0402"


class IdentityError(BaseModel):
    """A single failure reported by a store operation."""
    code: StoreErrorCode = Field(..., description="Stable error code")
    description: str = Field(..., description="Human readable description")


class IdentityResult(BaseModel):
    """
    Outcome of a write operation (create, update, delete).

    Routine outcomes like "not found" are reported here instead of being
    raised, so callers can branch on them.
    """
    succeeded: bool = Field(..., description="Whether the operation succeeded")
    errors: list[IdentityError] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, code: StoreErrorCode, description: str) -> "IdentityResult":
        return cls(
            succeeded=False,
            errors=[IdentityError(code=code, description=description)],
        )

    @property
    def error_codes(self) -> list[StoreErrorCode]:
        return [error.code for error in self.errors]


class IdentityStoreError(Exception):
    """Base exception for all identity store errors."""


class StoreConfigurationError(IdentityStoreError):
    """Raised when the store options are incomplete or inconsistent."""


class MultiTenancyNotConfiguredError(StoreConfigurationError):
    """Raised when a tenant store is requested but multi-tenancy was never configured."""


class StoreDisposedError(IdentityStoreError):
    """Raised when a disposed store is accessed."""


class StoreError(IdentityStoreError):
    """Raised when the storage system fails during a lookup."""
