"""Schemas for login and session endpoints."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    remember_me: bool = Field(default=False, description="Issue a long-lived session")


class SessionResponse(BaseModel):
    """Describes the current session; ``token`` is only set right after login."""

    token: str | None = None
    email: str
    role: str
    remember_me: bool = False
    issued_at: datetime
    expires_at: datetime
