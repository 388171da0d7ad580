"""Tests for session tokens, login endpoints and the route guard."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from webhook_studio.core.config import Settings, get_settings
from webhook_studio.core.security import (
    InvalidSessionToken,
    Role,
    Session,
    authenticate,
    decode_token,
    is_session_valid,
    issue_token,
    session_expires_at,
)
from webhook_studio.main import app

ISSUED = datetime(2024, 1, 1, tzinfo=timezone.utc)
SECRET = "unit-test-secret-long-enough-for-hs256"


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SESSION_SECRET=SECRET,
        session_ttl_seconds=3600,
        remember_me_ttl_seconds=7200,
    )


class TestSessionPolicy:
    """Pure session validity rules."""

    def test_plain_session_expires_after_ttl(self, settings: Settings) -> None:
        session = Session(email="a@b.c", role=Role.USER, issued_at=ISSUED)

        assert session_expires_at(session, settings) == ISSUED + timedelta(hours=1)
        assert is_session_valid(session, ISSUED + timedelta(minutes=59), settings)
        assert not is_session_valid(session, ISSUED + timedelta(hours=1), settings)

    def test_remember_me_extends_lifetime(self, settings: Settings) -> None:
        session = Session(email="a@b.c", role=Role.USER, issued_at=ISSUED, remember_me=True)

        assert is_session_valid(session, ISSUED + timedelta(minutes=90), settings)
        assert not is_session_valid(session, ISSUED + timedelta(hours=2), settings)

    def test_session_from_the_future_is_invalid(self, settings: Settings) -> None:
        session = Session(email="a@b.c", role=Role.USER, issued_at=ISSUED)

        assert not is_session_valid(session, ISSUED - timedelta(seconds=1), settings)

    @pytest.mark.parametrize(
        ("email", "password", "expected"),
        [
            ("admin@example.com", "admin123", Role.ADMIN),
            (" Admin@Example.com ", "admin123", Role.ADMIN),
            ("user@example.com", "user123", Role.USER),
            ("user@example.com", "admin123", None),
            ("nobody@example.com", "admin123", None),
        ],
    )
    def test_authenticate(self, settings: Settings, email: str, password: str, expected) -> None:
        assert authenticate(email, password, settings) == expected


class TestTokens:
    """Signed token encoding."""

    def test_token_round_trip(self, settings: Settings) -> None:
        session = Session(email="admin@example.com", role=Role.ADMIN, issued_at=ISSUED, remember_me=True)

        decoded = decode_token(issue_token(session, settings), settings, now=ISSUED + timedelta(minutes=1))

        assert decoded == session

    def test_tampered_token_rejected(self, settings: Settings) -> None:
        user = Session(email="user@example.com", role=Role.USER, issued_at=ISSUED)
        admin = Session(email="user@example.com", role=Role.ADMIN, issued_at=ISSUED)
        signing_input = issue_token(admin, settings).rsplit(".", 1)[0]
        forged = signing_input + "." + issue_token(user, settings).rsplit(".", 1)[1]

        with pytest.raises(InvalidSessionToken, match="signature"):
            decode_token(forged, settings, now=ISSUED)

    def test_token_signed_with_other_secret_rejected(self, settings: Settings) -> None:
        session = Session(email="user@example.com", role=Role.USER, issued_at=ISSUED)
        other = Settings(SESSION_SECRET="another-secret-long-enough-for-hs256")

        with pytest.raises(InvalidSessionToken):
            decode_token(issue_token(session, other), settings, now=ISSUED)

    def test_expired_token_rejected(self, settings: Settings) -> None:
        session = Session(email="user@example.com", role=Role.USER, issued_at=ISSUED)

        with pytest.raises(InvalidSessionToken, match="expired"):
            decode_token(issue_token(session, settings), settings, now=ISSUED + timedelta(days=1))

    def test_token_is_a_standard_jwt(self, settings: Settings) -> None:
        session = Session(email="user@example.com", role=Role.USER, issued_at=ISSUED)

        claims = jwt.decode(
            issue_token(session, settings), SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )

        assert claims["sub"] == "user@example.com"
        assert claims["role"] == "user"
        assert claims["iat"] == int(ISSUED.timestamp())
        assert claims["exp"] == int((ISSUED + timedelta(hours=1)).timestamp())

    def test_token_missing_claims_rejected(self, settings: Settings) -> None:
        token = jwt.encode({"sub": "user@example.com"}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidSessionToken, match="Malformed"):
            decode_token(token, settings, now=ISSUED)

    def test_unknown_role_rejected(self, settings: Settings) -> None:
        claims = {"sub": "a@b.c", "role": "root", "iat": ISSUED, "exp": ISSUED + timedelta(hours=1)}
        token = jwt.encode(claims, SECRET, algorithm="HS256")

        with pytest.raises(InvalidSessionToken):
            decode_token(token, settings, now=ISSUED)

    def test_token_with_other_algorithm_rejected(self, settings: Settings) -> None:
        claims = {"sub": "a@b.c", "role": "admin", "iat": ISSUED, "exp": ISSUED + timedelta(hours=1)}
        token = jwt.encode(claims, SECRET, algorithm="HS512")

        with pytest.raises(InvalidSessionToken):
            decode_token(token, settings, now=ISSUED)

    @pytest.mark.parametrize("token", ["", "no-dot-here", "abc.def", "!!!.???"])
    def test_malformed_token_rejected(self, settings: Settings, token: str) -> None:
        with pytest.raises(InvalidSessionToken):
            decode_token(token, settings, now=ISSUED)


class TestAuthEndpoints:
    """Login, session and logout endpoints."""

    def test_login_returns_token(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "admin123"})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["role"] == "admin"
        assert data["remember_me"] is False

    def test_login_bad_credentials(self, client: TestClient) -> None:
        response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_remember_me_session_lives_longer(self, client: TestClient) -> None:
        short = client.post(
            "/api/auth/login", json={"email": "user@example.com", "password": "user123"}
        ).json()
        long = client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": "user123", "remember_me": True},
        ).json()

        short_ttl = _parse(short["expires_at"]) - _parse(short["issued_at"])
        long_ttl = _parse(long["expires_at"]) - _parse(long["issued_at"])
        assert long_ttl > short_ttl

    def test_current_session(self, client: TestClient, user_headers) -> None:
        response = client.get("/api/auth/session", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "user@example.com"
        assert response.json()["role"] == "user"
        assert response.json()["token"] is None

    def test_invalid_token_is_unauthorized(self, client: TestClient) -> None:
        response = client.get("/api/auth/session", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401

    def test_logout(self, client: TestClient, user_headers) -> None:
        assert client.post("/api/auth/logout", headers=user_headers).status_code == 204

    def test_demo_auto_login_grants_admin(self, client: TestClient) -> None:
        app.dependency_overrides[get_settings] = lambda: Settings(demo_auto_login=True)

        response = client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
