"""Database connection management.

This module handles the MongoDB connection using pymongo. The client connects
lazily, so importing this module never blocks on the network.
"""

import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import OperationFailure

from config import MONGODB_DATABASE, MONGODB_URI, NEWS_COLLECTION, USERS_COLLECTION
from models.news import NEWS_INDEXES
from models.user import USER_INDEXES, normalize_key

logger = logging.getLogger(__name__)

client: MongoClient = MongoClient(MONGODB_URI)


def backfill_user_keys(db: Database) -> int:
    """Add normalized lookup keys to user documents that lack them.

    Documents written before the keys existed only carry ``username`` and
    ``email``. Lookups, login and the unique indexes all go through the
    normalized keys, so they must be filled in before the indexes are built.

    Args:
        db: Database holding the users collection.

    Returns:
        Number of documents updated.
    """
    collection = db[USERS_COLLECTION]
    missing = collection.find(
        {
            "$or": [
                {"usernameNormalized": {"$exists": False}},
                {"emailNormalized": {"$exists": False}},
            ]
        },
        {"username": 1, "email": 1},
    )
    updated = 0
    for doc in list(missing):
        collection.update_one(
            {"_id": doc["_id"]},
            {
                "$set": {
                    "usernameNormalized": normalize_key(doc.get("username") or ""),
                    "emailNormalized": normalize_key(doc.get("email") or ""),
                }
            },
        )
        updated += 1
    if updated:
        logger.info("Backfilled lookup keys on %d user(s)", updated)
    return updated


def init_db(db: Database) -> None:
    """Prepare existing documents and create the indexes the collections rely on.

    The unique indexes on the normalized username and email are what actually
    guarantees uniqueness; availability checks done by the API are advisory.

    Args:
        db: Database to initialize.

    Raises:
        OperationFailure: If stored users already collide on a username or
            email that differs only by case.
    """
    backfill_user_keys(db)
    try:
        db[USERS_COLLECTION].create_indexes(USER_INDEXES)
    except OperationFailure:
        logger.error(
            "Cannot build unique user indexes: stored users share a username or "
            "email ignoring case. Resolve the duplicates and restart."
        )
        raise
    db[NEWS_COLLECTION].create_indexes(NEWS_INDEXES)
    logger.info("Indexes ensured on database: %s", db.name)


def get_db() -> Database:
    """Dependency for getting the application database."""
    return client[MONGODB_DATABASE]


def close_db() -> None:
    client.close()
