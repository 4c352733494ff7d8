"""User schema definitions.

This module defines the User data model and the request/response bodies used
by the auth and user routes.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import EmailStr, Field, StringConstraints

from schemas.others import ApiModel, HttpUrlString

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"

Username = Annotated[
    str, StringConstraints(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
]


class UserRole(str, Enum):
    """Roles a user account can hold."""

    USER = "User"
    ADMIN = "Admin"
    EDITOR = "Editor"

    @classmethod
    def parse(cls, value: str) -> Optional["UserRole"]:
        """Resolve a role name case-insensitively; None if unknown."""
        for role in cls:
            if role.value.casefold() == value.strip().casefold():
                return role
        return None


class User(ApiModel):
    """A stored user account, including the password digest."""

    id: str
    username: str
    email: str
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.USER
    is_active: bool = True
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None


class UserResponse(ApiModel):
    """Public view of a user account. Never carries the password digest."""

    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class CreateUserRequest(ApiModel):
    username: Username
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.USER
    profile_image_url: Optional[HttpUrlString] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    date_of_birth: Optional[datetime] = None


class UpdateUserRequest(ApiModel):
    """Partial update. Fields left as None (or empty strings) are not changed."""

    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    profile_image_url: Optional[HttpUrlString] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    date_of_birth: Optional[datetime] = None


class LoginRequest(ApiModel):
    username_or_email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=100)
