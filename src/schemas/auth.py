"""Authentication schema definitions.

This module defines token claims and the bodies exchanged by the auth routes.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.others import ApiModel
from schemas.user import UserResponse


class TokenClaims(BaseModel):
    """Identity claims carried by a session token."""

    sub: str = Field(min_length=1, description="The id of the user the token was issued to.")
    username: str
    email: str
    role: str
    iat: Optional[int] = None
    exp: int

    @property
    def user_id(self) -> str:
        return self.sub


class AuthResponse(ApiModel):
    token: str
    expires_at: datetime
    user: UserResponse


class TokenRequest(ApiModel):
    token: str = Field(min_length=1)


class TokenValidationResponse(ApiModel):
    is_valid: bool
    user_id: str
    username: str
    email: str
    role: str
    expires_at: datetime
