from datetime import datetime, timedelta

import pytz
from bson import ObjectId
from fastapi.testclient import TestClient
from jose import jwt

import config
from payloads import user_payload


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_register_login_and_profile(client):
    register = client.post("/api/auth/register", json=user_payload())
    assert register.status_code == 201
    body = register.json()
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["firstName"] == "Alice"
    assert body["user"]["role"] == "User"
    assert "passwordHash" not in body["user"]

    login = client.post(
        "/api/auth/login",
        json={"usernameOrEmail": "alice@x.com", "password": "secret1"},
    )
    assert login.status_code == 200
    session = login.json()
    assert session["user"]["lastLoginAt"] is not None
    assert "passwordHash" not in session["user"]

    expires_at = datetime.fromisoformat(session["expiresAt"].replace("Z", "+00:00"))
    assert expires_at > datetime.now(pytz.utc)

    profile = client.get("/api/auth/profile", headers=_bearer(session["token"]))
    assert profile.status_code == 200
    assert profile.json()["id"] == body["user"]["id"]


def test_login_by_username_ignores_case(client, registered):
    response = client.post(
        "/api/auth/login", json={"usernameOrEmail": "ALICE", "password": "secret1"}
    )
    assert response.status_code == 200


def test_login_with_wrong_password_is_unauthorized(client, registered):
    response = client.post(
        "/api/auth/login", json={"usernameOrEmail": "alice", "password": "nope-nope"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username/email or password"


def test_register_duplicate_email_ignoring_case(client, registered):
    response = client.post(
        "/api/auth/register", json=user_payload(username="alice2", email="ALICE@X.COM")
    )
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"]


def test_register_duplicate_username(client, registered):
    response = client.post(
        "/api/auth/register", json=user_payload(email="other@x.com")
    )
    assert response.status_code == 400
    assert "already taken" in response.json()["detail"]


def test_register_validation_errors_are_bad_request(client):
    response = client.post(
        "/api/auth/register",
        json=user_payload(username="a!", email="not-an-email", password="123"),
    )
    assert response.status_code == 400
    fields = {error["loc"][-1] for error in response.json()["detail"]}
    assert {"username", "email", "password"} <= fields


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401


def test_profile_rejects_garbage_token(client):
    response = client.get("/api/auth/profile", headers=_bearer("garbage"))
    assert response.status_code == 401


def test_profile_of_deleted_user_is_not_found(client, registered, mongo_db):
    mongo_db[config.USERS_COLLECTION].delete_many({})
    response = client.get("/api/auth/profile", headers=_bearer(registered["token"]))
    assert response.status_code == 404


def test_update_profile(client, auth_headers):
    response = client.put(
        "/api/auth/profile",
        json={"firstName": "Alicia", "bio": "Curiouser and curiouser"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["firstName"] == "Alicia"
    assert response.json()["lastName"] == "Liddell"
    assert response.json()["bio"] == "Curiouser and curiouser"


def test_update_profile_to_taken_username(client, auth_headers):
    client.post("/api/auth/register", json=user_payload(username="bob", email="bob@x.com"))
    response = client.put(
        "/api/auth/profile", json={"username": "Bob"}, headers=auth_headers
    )
    assert response.status_code == 400


def test_update_profile_keeps_own_username(client, auth_headers):
    response = client.put(
        "/api/auth/profile", json={"username": "alice"}, headers=auth_headers
    )
    assert response.status_code == 200


def test_validate_token(client, registered):
    response = client.post("/api/auth/validate-token", json={"token": registered["token"]})
    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is True
    assert body["userId"] == registered["user"]["id"]
    assert body["username"] == "alice"
    assert body["role"] == "User"


def test_validate_token_rejects_garbage(client):
    response = client.post("/api/auth/validate-token", json={"token": "garbage"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid token"


def test_validate_token_reports_expiry(client):
    past = datetime.now(pytz.utc) - timedelta(hours=1)
    token = jwt.encode(
        {
            "sub": str(ObjectId()),
            "username": "alice",
            "email": "alice@x.com",
            "role": "User",
            "exp": int(past.timestamp()),
            "iss": config.JWT_ISSUER,
            "aud": config.JWT_AUDIENCE,
        },
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
    )
    response = client.post("/api/auth/validate-token", json={"token": token})
    assert response.status_code == 400
    assert response.json()["detail"] == "Token has expired"


def test_refresh_issues_token_for_same_user(client, registered):
    response = client.post("/api/auth/refresh", headers=_bearer(registered["token"]))
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == registered["user"]["id"]

    profile = client.get("/api/auth/profile", headers=_bearer(body["token"]))
    assert profile.status_code == 200


def test_refresh_rejects_deactivated_user(client, registered, mongo_db):
    mongo_db[config.USERS_COLLECTION].update_one(
        {"_id": ObjectId(registered["user"]["id"])}, {"$set": {"isActive": False}}
    )
    response = client.post("/api/auth/refresh", headers=_bearer(registered["token"]))
    assert response.status_code == 401
    assert response.json()["detail"] == "User account is deactivated"


def test_deactivated_user_cannot_login(client, registered, mongo_db):
    mongo_db[config.USERS_COLLECTION].update_one(
        {"_id": ObjectId(registered["user"]["id"])}, {"$set": {"isActive": False}}
    )
    response = client.post(
        "/api/auth/login", json={"usernameOrEmail": "alice", "password": "secret1"}
    )
    assert response.status_code == 401


def test_logout(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_logout_requires_token(client):
    assert client.post("/api/auth/logout").status_code == 401


def test_unexpected_errors_become_internal_server_error(client, monkeypatch):
    from app import app
    from utils.user_manager import UserManager

    def explode(self, identifier, password):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(UserManager, "authenticate", explode)
    response = TestClient(app, raise_server_exceptions=False).post(
        "/api/auth/login", json={"usernameOrEmail": "alice", "password": "secret1"}
    )
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
