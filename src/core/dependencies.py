"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Secrets and tuning values from config are passed explicitly into each
component.
"""

from typing import Annotated

from fastapi import Depends
from pymongo.database import Database

import config
from core.database import get_db
from utils import jwt_manager
from utils import news_manager
from utils import password_hasher
from utils import user_manager


def get_password_hasher() -> password_hasher.PasswordHasher:
    """Get PasswordHasher configured from the environment.

    Returns:
        PasswordHasher instance.
    """
    return password_hasher.PasswordHasher(
        salt=config.PASSWORD_SALT,
        scheme=config.PASSWORD_HASH_SCHEME,
        rounds=config.BCRYPT_ROUNDS,
    )


PasswordHasherDep = Annotated[
    password_hasher.PasswordHasher, Depends(get_password_hasher)
]


def get_jwt_manager() -> jwt_manager.JwtManager:
    """Get JwtManager configured from the environment.

    Returns:
        JwtManager instance.
    """
    return jwt_manager.JwtManager(
        secret_key=config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        expire_minutes=config.JWT_EXPIRE_MINUTES,
        issuer=config.JWT_ISSUER,
        audience=config.JWT_AUDIENCE,
    )


def get_user_manager(
    hasher: PasswordHasherDep,
    db: Database = Depends(get_db),
) -> user_manager.UserManager:
    """Get UserManager instance bound to the application database.

    Args:
        hasher: Password hasher.
        db: Database handle.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db, hasher)


def get_news_manager(db: Database = Depends(get_db)) -> news_manager.NewsManager:
    """Get NewsManager instance bound to the application database."""
    return news_manager.NewsManager(db)


# Type aliases for dependency injection
JwtManagerDep = Annotated[
    jwt_manager.JwtManager, Depends(get_jwt_manager)
]
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
NewsManagerDep = Annotated[
    news_manager.NewsManager, Depends(get_news_manager)
]
