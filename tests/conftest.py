"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import json
import os
from typing import Callable, Generator

# Settings are read once at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-at-least-32-bytes")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from webhook_studio.core.db import create_db_engine, get_session
from webhook_studio.models.base import Base
from webhook_studio.schemas.category import CategoryCreate
from webhook_studio.schemas.webhook import WebhookCreate, WebhookHeader
from webhook_studio.services.category_repository import CategoryRepository
from webhook_studio.services.webhook_repository import WebhookRepository


class RecordingTarget:
    """Fake webhook endpoint served through httpx.MockTransport."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


@pytest.fixture
def db_engine():
    """Create a fresh in-memory SQLite database per test."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session for testing."""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def target() -> RecordingTarget:
    """A fake endpoint answering 200 with a small JSON body."""
    return RecordingTarget()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with overridden database session."""
    from webhook_studio.main import app

    def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _login(client: TestClient, email: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    return _login(client, "admin@example.com", "admin123")


@pytest.fixture
def user_headers(client: TestClient) -> dict[str, str]:
    return _login(client, "user@example.com", "user123")


@pytest.fixture
def category(db_session: Session):
    return CategoryRepository(db_session).create(
        CategoryCreate(name="API Integrations", description="Webhooks for various API services")
    )


@pytest.fixture
def webhook(db_session: Session, category):
    """The example hook: one enabled and one disabled header, JSON default payload."""
    return WebhookRepository(db_session).create(
        WebhookCreate(
            category_id=category.id,
            name="Example Hook",
            url="https://example.com/hook",
            method="POST",
            headers=[
                WebhookHeader(key="X-Test", value="1", enabled=True),
                WebhookHeader(key="X-Off", value="2", enabled=False),
            ],
            default_payload=json.dumps({"x": 1}, separators=(",", ":")),
        )
    )
