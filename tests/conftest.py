import os

# Configuration is read at import time, so the environment must be ready
# before any application module is imported.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-news-api-suite")
os.environ.setdefault("PASSWORD_HASH_SCHEME", "sha256")

import mongomock
import pytest
from fastapi.testclient import TestClient

from core.database import get_db, init_db
from schemas.news import CreateNewsRequest
from schemas.user import CreateUserRequest
from utils.jwt_manager import JwtManager
from utils.news_manager import NewsManager
from utils.password_hasher import PasswordHasher
from utils.user_manager import UserManager
from payloads import news_payload, user_payload

TEST_DB = "news_api_test"


@pytest.fixture()
def mongo_db():
    """In-memory database with the production indexes."""
    client = mongomock.MongoClient()
    db = client[TEST_DB]
    init_db(db)
    try:
        yield db
    finally:
        client.close()


@pytest.fixture()
def password_hasher() -> PasswordHasher:
    return PasswordHasher(salt="NewsApiSalt")


@pytest.fixture()
def jwt_manager() -> JwtManager:
    return JwtManager(
        secret_key="unit-test-secret",
        expire_minutes=30,
        issuer="news-api",
        audience="news-api-clients",
    )


@pytest.fixture()
def user_manager(mongo_db, password_hasher) -> UserManager:
    return UserManager(mongo_db, password_hasher)


@pytest.fixture()
def news_manager(mongo_db) -> NewsManager:
    return NewsManager(mongo_db)


@pytest.fixture()
def make_user(user_manager):
    """Create a user directly through the manager."""

    def _make(**overrides):
        return user_manager.create_user(CreateUserRequest.model_validate(user_payload(**overrides)))

    return _make


@pytest.fixture()
def make_news(news_manager):
    def _make(**overrides):
        return news_manager.create_news(CreateNewsRequest.model_validate(news_payload(**overrides)))

    return _make


@pytest.fixture()
def client(mongo_db):
    """TestClient wired to the in-memory database."""
    from app import app

    app.dependency_overrides[get_db] = lambda: mongo_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def registered(client) -> dict:
    """Register the default user through the API and return the auth response."""
    response = client.post("/api/auth/register", json=user_payload())
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def auth_headers(registered) -> dict:
    return {"Authorization": f"Bearer {registered['token']}"}
