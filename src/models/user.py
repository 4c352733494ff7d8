"""User document model.

This module defines the shape of documents stored in the users collection
and the indexes the collection needs.
"""

from datetime import datetime
from typing import Optional, TypedDict

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, IndexModel


class UserDocument(TypedDict, total=False):
    """User document as stored in MongoDB."""

    _id: ObjectId
    username: str
    usernameNormalized: str  # casefolded username, unique
    email: str
    emailNormalized: str  # casefolded email, unique
    passwordHash: str
    firstName: str
    lastName: str
    role: str  # 'User', 'Admin' or 'Editor'
    isActive: bool
    profileImageUrl: Optional[str]
    bio: Optional[str]
    dateOfBirth: Optional[datetime]
    createdAt: datetime
    updatedAt: datetime
    lastLoginAt: Optional[datetime]


USER_INDEXES = [
    IndexModel([("usernameNormalized", ASCENDING)], name="user_username_uq", unique=True),
    IndexModel([("emailNormalized", ASCENDING)], name="user_email_uq", unique=True),
    IndexModel([("createdAt", DESCENDING)], name="user_created_at"),
]


def normalize_key(value: str) -> str:
    """Normalize a username or email for case-insensitive comparison."""
    return value.strip().casefold()
