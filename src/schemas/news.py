"""News schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from schemas.others import ApiModel, HttpUrlString

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


class News(ApiModel):
    """A stored news article."""

    id: str
    title: str
    content: str
    author: str
    user_id: Optional[str] = None
    published_date: datetime
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    is_published: bool = True
    summary: str = ""
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CreateNewsRequest(ApiModel):
    title: str = Field(min_length=5, max_length=200)
    content: str = Field(min_length=10, max_length=10000)
    author: str = Field(min_length=1, max_length=100)
    user_id: Optional[str] = Field(
        default=None,
        pattern=OBJECT_ID_PATTERN,
        description="Owning user id. Defaults to the authenticated caller.",
    )
    category: str = Field(default="", max_length=100)
    tags: List[str] = Field(default_factory=list)
    is_published: bool = True
    summary: str = Field(default="", max_length=500)
    image_url: Optional[HttpUrlString] = None
    published_date: Optional[datetime] = Field(
        default=None,
        description="Publication date. Defaults to the creation time.",
    )


class UpdateNewsRequest(ApiModel):
    """Partial update. Fields left as None (or empty strings) are not changed."""

    title: Optional[str] = Field(default=None, min_length=5, max_length=200)
    content: Optional[str] = Field(default=None, min_length=10, max_length=10000)
    author: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
    summary: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[HttpUrlString] = None
    published_date: Optional[datetime] = None
