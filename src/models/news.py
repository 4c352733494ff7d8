"""News document model.

This module defines the shape of documents stored in the news collection.
"""

from datetime import datetime
from typing import List, Optional, TypedDict

from bson import ObjectId
from pymongo import DESCENDING, IndexModel


class NewsDocument(TypedDict, total=False):
    """News article document as stored in MongoDB."""

    _id: ObjectId
    title: str
    content: str
    author: str
    userId: Optional[ObjectId]
    publishedDate: datetime
    category: str
    tags: List[str]
    isPublished: bool
    summary: str
    imageUrl: Optional[str]
    createdAt: datetime
    updatedAt: datetime


NEWS_INDEXES = [
    IndexModel([("createdAt", DESCENDING)], name="news_created_at"),
    IndexModel(
        [("isPublished", DESCENDING), ("publishedDate", DESCENDING)],
        name="news_published",
    ),
    IndexModel([("category", DESCENDING)], name="news_category"),
]
