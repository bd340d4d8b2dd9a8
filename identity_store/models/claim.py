"""
Claims, external logins and authentication tokens embedded in identity entities.
"""
from typing import Optional

from pydantic import BaseModel, Field


class MongoClaim(BaseModel):
    """
    A claim attached to a user or a role.

    When value_type is not set the value is implied to be a string.
    """
    type: str = Field(..., description="Type of the claim")
    value: Optional[str] = Field(None, description="Value of the claim")
    value_type: Optional[str] = Field(None, description="Type of the claim value")


class MongoUserLogin(BaseModel):
    """An external login provider linked to a user."""
    provider: str = Field(..., description="Login provider, e.g. 'google'")
    login_key: str = Field(..., description="Key of the user at the provider")
    provider_display_name: Optional[str] = None


class MongoUserToken(BaseModel):
    """An authentication token issued to a user by a provider."""
    provider: str = Field(..., description="Provider issuing the token")
    token_name: str = Field(..., description="Name of the token")
    token: Optional[str] = Field(None, description="Token value")
