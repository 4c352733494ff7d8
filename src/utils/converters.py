"""Conversions between stored documents and schema objects."""

import logging
from datetime import datetime
from typing import Optional

import pytz

from models.news import NewsDocument
from models.user import UserDocument
from schemas.news import News
from schemas.user import User, UserRole

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from MongoDB."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def document_to_user(doc: UserDocument) -> User:
    return User(
        id=str(doc["_id"]),
        username=doc["username"],
        email=doc["email"],
        password_hash=doc.get("passwordHash", ""),
        first_name=doc.get("firstName", ""),
        last_name=doc.get("lastName", ""),
        role=_stored_role(doc),
        is_active=doc.get("isActive", True),
        profile_image_url=doc.get("profileImageUrl"),
        bio=doc.get("bio"),
        date_of_birth=as_utc(doc.get("dateOfBirth")),
        created_at=as_utc(doc["createdAt"]),
        updated_at=as_utc(doc["updatedAt"]),
        last_login_at=as_utc(doc.get("lastLoginAt")),
    )


def document_to_news(doc: NewsDocument) -> News:
    user_id = doc.get("userId")
    return News(
        id=str(doc["_id"]),
        title=doc["title"],
        content=doc["content"],
        author=doc.get("author", ""),
        user_id=str(user_id) if user_id is not None else None,
        published_date=as_utc(doc["publishedDate"]),
        category=doc.get("category", ""),
        tags=list(doc.get("tags") or []),
        is_published=doc.get("isPublished", True),
        summary=doc.get("summary", ""),
        image_url=doc.get("imageUrl"),
        created_at=as_utc(doc["createdAt"]),
        updated_at=as_utc(doc["updatedAt"]),
    )


def _stored_role(doc: UserDocument) -> UserRole:
    """Read the stored role, reading unknown values as the default role."""
    stored = doc.get("role")
    role = UserRole.parse(stored or "")
    if role is None:
        logger.warning(
            "User %s has unknown role %r; treating it as %s",
            doc.get("_id"), stored, UserRole.USER.value,
        )
        return UserRole.USER
    return role
