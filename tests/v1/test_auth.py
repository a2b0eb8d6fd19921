# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from fastapi import status

from huddle.core.settings import settings
from huddle.models import AuthSession


def _signup(client, **overrides):
    payload = {
        "email": "dana@company.com",
        "password": "password123",
        "name": "Dana Scully",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/signup", json=payload)


class TestSignup:
    def test_signup_sets_http_only_cookie(self, client) -> None:
        response = _signup(client)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert set(data) == {"user_id", "expires_at"}

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.session_cookie_name}=")
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()
        # The token is never part of the JSON body.
        token = response.cookies.get(settings.session_cookie_name)
        assert token and token not in response.text

    def test_cookie_authenticates_follow_up_requests(self, client) -> None:
        _signup(client)
        response = client.get("/api/v1/auth/me")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "dana@company.com"

    def test_duplicate_email(self, client, alice) -> None:
        response = _signup(client, email="alice@company.com")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == "DUPLICATE_EMAIL"

    def test_invite_code(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "invite_code", "ABC")

        wrong = _signup(client, email="alice@company.com", inviteCode="WRONG")
        assert wrong.status_code == status.HTTP_403_FORBIDDEN
        assert wrong.json() == {"detail": "Invalid invite code", "code": "INVALID_INVITE"}

        right = _signup(client, email="alice@company.com", inviteCode="ABC")
        assert right.status_code == status.HTTP_201_CREATED

    def test_wrong_invite_does_not_reveal_existing_email(self, client, alice, monkeypatch) -> None:
        monkeypatch.setattr(settings, "invite_code", "ABC")
        taken = _signup(client, email="alice@company.com", inviteCode="WRONG")
        free = _signup(client, email="fresh@company.com", inviteCode="WRONG")
        assert taken.status_code == free.status_code == status.HTTP_403_FORBIDDEN
        assert taken.json() == free.json()

    def test_validation_messages(self, client) -> None:
        response = _signup(client, email="dana@elsewhere.org")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Only @company.com emails are allowed"

        response = _signup(client, password="short")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_malformed_email_is_unprocessable(self, client) -> None:
        response = _signup(client, email="not-an-email")
        assert response.status_code == 422


class TestLogin:
    def test_login_success(self, client, alice) -> None:
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@company.com", "password": "password123"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user_id"] == alice.id
        assert response.cookies.get(settings.session_cookie_name)

    def test_wrong_password_and_unknown_email_look_the_same(self, client, alice) -> None:
        wrong = client.post(
            "/api/v1/auth/login",
            json={"email": "alice@company.com", "password": "wrong-password"},
        )
        unknown = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@company.com", "password": "wrong-password"},
        )
        assert wrong.status_code == unknown.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong.json() == unknown.json() == {
            "detail": "Invalid email or password",
            "code": "AUTH_ERROR",
        }
        assert "set-cookie" not in wrong.headers


class TestSession:
    def test_me_requires_authentication(self, client) -> None:
        response = client.get("/api/v1/auth/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["code"] == "UNAUTHENTICATED"

    def test_me_with_bearer_header(self, client, alice, auth_token) -> None:
        response = client.get("/api/v1/auth/me", headers=auth_token)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == alice.id
        assert data["last_seen_at"] is not None
        assert "password_hash" not in data

    def test_owner_sees_own_email_even_when_hidden(self, client, alice, auth_token, db_session) -> None:
        alice.show_email = False
        db_session.commit()
        assert client.get("/api/v1/auth/me", headers=auth_token).json()["email"] == "alice@company.com"

    def test_invalid_bearer_token(self, client, alice) -> None:
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout(self, client, alice, auth_token, db_session) -> None:
        response = client.post("/api/v1/auth/logout", headers=auth_token)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}
        assert db_session.query(AuthSession).count() == 0

        assert client.get("/api/v1/auth/me", headers=auth_token).status_code == 401
        # Logging out again is harmless.
        assert client.post("/api/v1/auth/logout", headers=auth_token).status_code == 200

    def test_logout_without_session(self, client) -> None:
        assert client.post("/api/v1/auth/logout").status_code == status.HTTP_200_OK
