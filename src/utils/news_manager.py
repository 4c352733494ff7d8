"""News article management utilities."""

import logging
import re
from typing import List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from config import NEWS_COLLECTION
from models.news import NewsDocument
from schemas.news import CreateNewsRequest, News, UpdateNewsRequest
from utils.converters import document_to_news, utc_now

logger = logging.getLogger(__name__)


class NewsManager:
    """Manages news article persistence using pymongo."""

    def __init__(self, db: Database):
        self.collection = db[NEWS_COLLECTION]

    def list_news(self) -> List[News]:
        """List all articles, newest first."""
        cursor = self.collection.find().sort("createdAt", DESCENDING)
        return [document_to_news(doc) for doc in cursor]

    def get_news_by_id(self, news_id: str) -> Optional[News]:
        if not ObjectId.is_valid(news_id):
            return None
        doc = self.collection.find_one({"_id": ObjectId(news_id)})
        return document_to_news(doc) if doc else None

    def list_news_by_category(self, category: str) -> List[News]:
        """List articles in a category (exact match, ignoring case)."""
        pattern = re.compile(f"^{re.escape(category)}$", re.IGNORECASE)
        cursor = self.collection.find({"category": pattern}).sort("createdAt", DESCENDING)
        return [document_to_news(doc) for doc in cursor]

    def list_published_news(self) -> List[News]:
        """List published articles, most recently published first."""
        cursor = self.collection.find({"isPublished": True}).sort("publishedDate", DESCENDING)
        return [document_to_news(doc) for doc in cursor]

    def search_news(self, search_term: str) -> List[News]:
        """Case-insensitive substring search over title, content, summary and tags.

        Args:
            search_term: Literal text to look for. It is escaped, never
                interpreted as a regular expression.

        Returns:
            Matching articles, newest first.
        """
        pattern = re.compile(re.escape(search_term), re.IGNORECASE)
        cursor = self.collection.find(
            {
                "$or": [
                    {"title": pattern},
                    {"content": pattern},
                    {"summary": pattern},
                    {"tags": pattern},
                ]
            }
        ).sort("createdAt", DESCENDING)
        return [document_to_news(doc) for doc in cursor]

    def create_news(self, req: CreateNewsRequest, user_id: Optional[str] = None) -> News:
        """Create a news article.

        Args:
            req: Validated article data.
            user_id: Owner used when the request does not name one.

        Returns:
            Created News object.
        """
        now = utc_now()
        owner_id = req.user_id or user_id
        doc: NewsDocument = {
            "title": req.title,
            "content": req.content,
            "author": req.author,
            "userId": ObjectId(owner_id) if owner_id and ObjectId.is_valid(owner_id) else None,
            "publishedDate": req.published_date or now,
            "category": req.category,
            "tags": list(req.tags),
            "isPublished": req.is_published,
            "summary": req.summary,
            "imageUrl": req.image_url,
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        logger.info("Created news: %s (id=%s)", req.title, result.inserted_id)
        return self.get_news_by_id(str(result.inserted_id))

    def update_news(self, news_id: str, req: UpdateNewsRequest) -> Optional[News]:
        """Apply a partial update.

        Only fields that are provided and non-empty overwrite stored values.
        An explicit empty tag list does clear the tags.

        Returns:
            Updated News object, or None if the article does not exist.
        """
        if not ObjectId.is_valid(news_id):
            return None

        updates = {}
        if req.title:
            updates["title"] = req.title
        if req.content:
            updates["content"] = req.content
        if req.author:
            updates["author"] = req.author
        if req.category:
            updates["category"] = req.category
        if req.tags is not None:
            updates["tags"] = list(req.tags)
        if req.is_published is not None:
            updates["isPublished"] = req.is_published
        if req.summary:
            updates["summary"] = req.summary
        if req.image_url is not None:
            updates["imageUrl"] = req.image_url
        if req.published_date is not None:
            updates["publishedDate"] = req.published_date
        updates["updatedAt"] = utc_now()

        doc = self.collection.find_one_and_update(
            {"_id": ObjectId(news_id)},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        logger.info("Updated news: %s", news_id)
        return document_to_news(doc)

    def delete_news(self, news_id: str) -> bool:
        if not ObjectId.is_valid(news_id):
            return False
        result = self.collection.delete_one({"_id": ObjectId(news_id)})
        if result.deleted_count:
            logger.info("Deleted news: %s", news_id)
        return result.deleted_count > 0
