"""User management utilities.

This module provides user persistence on top of the MongoDB users collection,
including lookups, partial updates, availability checks and credential
authentication.
"""

import logging
import re
from typing import List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import USERS_COLLECTION
from models.user import UserDocument, normalize_key
from schemas.user import CreateUserRequest, UpdateUserRequest, User, UserRole
from utils.converters import document_to_user, utc_now
from utils.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    """Exception raised when a username or email is already taken."""

    pass


class UserManager:
    """Manages user data persistence and operations using pymongo."""

    def __init__(self, db: Database, password_hasher: PasswordHasher):
        """Initialize UserManager.

        Args:
            db: MongoDB database handle.
            password_hasher: Hasher used for stored password digests.
        """
        self.collection = db[USERS_COLLECTION]
        self.password_hasher = password_hasher

    def list_users(self) -> List[User]:
        """List all users, newest first."""
        cursor = self.collection.find().sort("createdAt", DESCENDING)
        return [document_to_user(doc) for doc in cursor]

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by id.

        Args:
            user_id: Hex ObjectId string.

        Returns:
            User object if found, None otherwise (including malformed ids).
        """
        if not ObjectId.is_valid(user_id):
            return None
        doc = self.collection.find_one({"_id": ObjectId(user_id)})
        return document_to_user(doc) if doc else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username, ignoring case."""
        doc = self.collection.find_one({"usernameNormalized": normalize_key(username)})
        return document_to_user(doc) if doc else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, ignoring case."""
        doc = self.collection.find_one({"emailNormalized": normalize_key(email)})
        return document_to_user(doc) if doc else None

    def is_username_available(self, username: str) -> bool:
        return self.get_user_by_username(username) is None

    def is_email_available(self, email: str) -> bool:
        return self.get_user_by_email(email) is None

    def create_user(self, req: CreateUserRequest) -> User:
        """Create a new user.

        Args:
            req: Validated registration data.

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If the username or email is already taken.
        """
        now = utc_now()
        doc: UserDocument = {
            "username": req.username,
            "usernameNormalized": normalize_key(req.username),
            "email": req.email,
            "emailNormalized": normalize_key(req.email),
            "passwordHash": self.password_hasher.hash_password(req.password),
            "firstName": req.first_name,
            "lastName": req.last_name,
            "role": req.role.value,
            "isActive": True,
            "profileImageUrl": req.profile_image_url,
            "bio": req.bio,
            "dateOfBirth": req.date_of_birth,
            "createdAt": now,
            "updatedAt": now,
            "lastLoginAt": None,
        }

        # Two requests can both pass the availability check; the unique
        # indexes decide which one wins.
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError(
                _conflict_message(e, req.username, req.email)
            ) from e

        logger.info("Created user: %s", req.username)
        return self.get_user_by_id(str(result.inserted_id))

    def update_user(self, user_id: str, req: UpdateUserRequest) -> Optional[User]:
        """Apply a partial update.

        Only fields that are provided and non-empty overwrite stored values.
        The updated time is always refreshed.

        Args:
            user_id: Id of the user to update.
            req: Fields to change.

        Returns:
            Updated User object, or None if the user does not exist.

        Raises:
            UserAlreadyExistsError: If the new username or email is taken.
        """
        if not ObjectId.is_valid(user_id):
            return None

        updates = {}
        if req.username:
            updates["username"] = req.username
            updates["usernameNormalized"] = normalize_key(req.username)
        if req.email:
            updates["email"] = req.email
            updates["emailNormalized"] = normalize_key(req.email)
        if req.first_name:
            updates["firstName"] = req.first_name
        if req.last_name:
            updates["lastName"] = req.last_name
        if req.role is not None:
            updates["role"] = req.role.value
        if req.is_active is not None:
            updates["isActive"] = req.is_active
        if req.profile_image_url is not None:
            updates["profileImageUrl"] = req.profile_image_url
        if req.bio is not None:
            updates["bio"] = req.bio
        if req.date_of_birth is not None:
            updates["dateOfBirth"] = req.date_of_birth
        updates["updatedAt"] = utc_now()

        try:
            doc = self.collection.find_one_and_update(
                {"_id": ObjectId(user_id)},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError(
                _conflict_message(e, req.username, req.email)
            ) from e

        if doc is None:
            return None
        logger.info("Updated user: %s (fields: %s)", user_id, ", ".join(sorted(updates)))
        return document_to_user(doc)

    def delete_user(self, user_id: str) -> bool:
        """Delete a user.

        Returns:
            True if a user was deleted, False if none matched.
        """
        if not ObjectId.is_valid(user_id):
            return False
        result = self.collection.delete_one({"_id": ObjectId(user_id)})
        if result.deleted_count:
            logger.info("Deleted user: %s", user_id)
        return result.deleted_count > 0

    def authenticate(self, username_or_email: str, password: str) -> Optional[User]:
        """Check credentials and record the login.

        Args:
            username_or_email: Username or email, matched ignoring case.
            password: Plain text password.

        Returns:
            The user with its last login time stamped, or None if the user
            does not exist, is inactive, or the password does not match.
        """
        key = normalize_key(username_or_email)
        doc = self.collection.find_one(
            {"$or": [{"usernameNormalized": key}, {"emailNormalized": key}]}
        )
        if doc is None or not doc.get("isActive", True):
            logger.info("Authentication failed for: %s", username_or_email)
            return None
        if not self.password_hasher.verify_password(password, doc.get("passwordHash", "")):
            logger.info("Authentication failed for: %s", username_or_email)
            return None

        doc = self.collection.find_one_and_update(
            {"_id": doc["_id"]},
            {"$set": {"lastLoginAt": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            # Deleted between the lookup and the update.
            return None
        logger.info("User logged in: %s", doc["username"])
        return document_to_user(doc)

    def list_users_by_role(self, role: UserRole) -> List[User]:
        """List users holding a role, newest first."""
        cursor = self.collection.find({"role": role.value}).sort("createdAt", DESCENDING)
        return [document_to_user(doc) for doc in cursor]

    def search_users(self, search_term: str) -> List[User]:
        """Case-insensitive substring search over username, names and email."""
        pattern = re.compile(re.escape(search_term), re.IGNORECASE)
        cursor = self.collection.find(
            {
                "$or": [
                    {"username": pattern},
                    {"firstName": pattern},
                    {"lastName": pattern},
                    {"email": pattern},
                ]
            }
        ).sort("createdAt", DESCENDING)
        return [document_to_user(doc) for doc in cursor]


def _conflict_message(
    error: DuplicateKeyError, username: Optional[str], email: Optional[str]
) -> str:
    detail = str(error)
    if username and "username" in detail.lower():
        return f"Username '{username}' is already taken"
    if email and "email" in detail.lower():
        return f"Email '{email}' is already registered"
    return "Username or email is already in use"
