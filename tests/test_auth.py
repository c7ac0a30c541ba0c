from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.security import create_access_token, decode_token, verify_password
from app.models.user import User


def _signup(client: TestClient, email: str, password: str = "StrongPass1", name: str = "Signup User"):
    return client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )


def _login(client: TestClient, email: str, password: str = "StrongPass1"):
    return client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )


def test_signup_success(client: TestClient, db_session: Session):
    response = _signup(client, "Register@Example.com")

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["email"] == "register@example.com"
    assert payload["data"]["is_admin"] is False
    assert "password_hash" not in payload["data"]

    user = db_session.query(User).filter(User.email == "register@example.com").one()
    assert user.password_hash != "StrongPass1"
    assert verify_password("StrongPass1", user.password_hash)


def test_signup_duplicate_email(client: TestClient, db_session: Session):
    assert _signup(client, "dupe@example.com").status_code == 201

    response = _signup(client, "DUPE@example.com")

    assert response.status_code == 409
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Email already registered"
    assert db_session.query(User).filter(User.email == "dupe@example.com").count() == 1


def test_signup_rejects_unknown_fields(client: TestClient):
    response = client.post(
        "/api/auth/signup",
        json={"name": "Sneaky", "email": "sneaky@example.com", "password": "pw", "is_admin": True},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["message"] == "Validation failed"
    assert all("input" not in error for error in payload["errors"])


def test_login_success(client: TestClient):
    assert _signup(client, "login@example.com").status_code == 201

    response = _login(client, "login@example.com")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["token_type"] == "bearer"
    assert payload["data"]["expires_in"] == 24 * 60 * 60
    assert payload["data"]["user"]["email"] == "login@example.com"

    claims = decode_token(payload["data"]["token"])
    assert claims["email"] == "login@example.com"
    assert claims["is_admin"] is False
    assert claims["sub"] == str(payload["data"]["user"]["id"])


def test_login_wrong_password(client: TestClient):
    assert _signup(client, "wrongpass@example.com").status_code == 201

    response = _login(client, "wrongpass@example.com", "WrongPass1")

    assert response.status_code == 401
    payload = response.json()
    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["message"] == "Invalid email or password"


def test_login_unknown_email_matches_wrong_password(client: TestClient):
    response = _login(client, "nobody@example.com")

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_profile_requires_credential(client: TestClient):
    response = client.get("/api/user/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authenticated"


def test_profile_with_valid_credential(client: TestClient, create_user, auth_headers):
    user = create_user("profile@example.com", name="Profile User")

    response = client.get("/api/user/profile", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Profile User"


def test_expired_credential_rejected(client: TestClient, create_user):
    user = create_user("expired@example.com")
    token = create_access_token(
        data={"sub": str(user.id), "email": user.email, "is_admin": False},
        expires_delta=timedelta(minutes=-1),
    )

    response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_tampered_credential_rejected(client: TestClient, create_user, auth_headers):
    user = create_user("tampered@example.com")
    token = auth_headers(user)["Authorization"].removeprefix("Bearer ")

    response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {token}x"})

    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


def test_non_bearer_scheme_rejected(client: TestClient):
    response = client.get("/api/user/profile", headers={"Authorization": "Basic abc123"})

    assert response.status_code == 401
