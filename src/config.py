"""Configuration module for the News API.

This module provides centralized configuration management, including API
server settings, MongoDB connection details, token signing parameters and
password hashing parameters. All configuration values can be overridden via
environment variables.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- MongoDB Configuration ---

MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "news_api")
USERS_COLLECTION: str = os.getenv("USERS_COLLECTION", "users")
NEWS_COLLECTION: str = os.getenv("NEWS_COLLECTION", "news")

# --- Authentication Configuration ---

# Secret used to sign session tokens. No default. Without
# it tokens cannot be issued and every token fails validation.
JWT_SECRET_KEY: Optional[str] = os.getenv("JWT_SECRET_KEY") or None
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "60"))
JWT_ISSUER: Optional[str] = os.getenv("JWT_ISSUER", "news-api") or None
JWT_AUDIENCE: Optional[str] = os.getenv("JWT_AUDIENCE", "news-api-clients") or None

# --- Password Hashing Configuration ---

# "sha256" reproduces the digests of the existing credential store
# (base64 of SHA-256 over password + salt). "bcrypt" uses a per-user salt.
PASSWORD_HASH_SCHEME: str = os.getenv("PASSWORD_HASH_SCHEME", "sha256").lower()
PASSWORD_SALT: str = os.getenv("PASSWORD_SALT", "NewsApiSalt")
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
