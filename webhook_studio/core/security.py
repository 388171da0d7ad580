"""Session tokens and the route guard policy.

A session is an explicit value object. Its validity is a pure function of when
it was issued and whether remember-me was requested, so there is no server-side
session table and no periodic re-validation.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Capabilities a session can carry."""

    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Session:
    """An authenticated caller."""

    email: str
    role: Role
    issued_at: datetime
    remember_me: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class InvalidSessionToken(Exception):
    """The token is malformed, tampered with, or expired."""


def session_expires_at(session: Session, settings: Settings) -> datetime:
    ttl = settings.remember_me_ttl_seconds if session.remember_me else settings.session_ttl_seconds
    return session.issued_at + timedelta(seconds=ttl)


def is_session_valid(session: Session, now: datetime, settings: Settings) -> bool:
    return session.issued_at <= now < session_expires_at(session, settings)


def authenticate(email: str, password: str, settings: Settings) -> Role | None:
    """Check demo credentials and return the role they grant, if any."""
    accounts = (
        (settings.admin_email, settings.admin_password, Role.ADMIN),
        (settings.user_email, settings.user_password, Role.USER),
    )
    for account_email, account_password, role in accounts:
        if hmac.compare_digest(email.strip().lower(), account_email.lower()) and hmac.compare_digest(
            password, account_password
        ):
            return role
    return None


def issue_token(session: Session, settings: Settings) -> str:
    """Encode a session as a signed JWT."""
    claims = {
        "sub": session.email,
        "role": session.role.value,
        "iat": session.issued_at,
        "exp": session_expires_at(session, settings),
        "remember": session.remember_me,
    }
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def decode_token(token: str, settings: Settings, now: datetime | None = None) -> Session:
    """Verify a token and return the session it carries.

    The signature and claims are checked by PyJWT; expiry is decided by
    :func:`is_session_valid` against ``now`` so callers can supply the clock.

    Raises:
        InvalidSessionToken: If the signature does not match or the session expired
    """
    try:
        claims = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["sub", "role", "iat", "exp"], "verify_exp": False, "verify_iat": False},
        )
    except jwt.InvalidSignatureError as e:
        raise InvalidSessionToken("Invalid session token signature") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSessionToken(f"Malformed session token: {e}") from e

    try:
        session = Session(
            email=claims["sub"],
            role=Role(claims["role"]),
            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            remember_me=bool(claims.get("remember", False)),
        )
    except (ValueError, TypeError) as e:
        raise InvalidSessionToken("Malformed session token") from e

    if not is_session_valid(session, now or datetime.now(timezone.utc), settings):
        raise InvalidSessionToken("Session expired")
    return session


_bearer = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Session:
    """Resolve the caller's session from the bearer token.

    With ``demo_auto_login`` enabled, a request without a token is treated as
    the demo admin instead of being rejected.
    """
    if credentials is None:
        if settings.demo_auto_login:
            return Session(email=settings.admin_email, role=Role.ADMIN, issued_at=datetime.now(timezone.utc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_token(credentials.credentials, settings)
    except InvalidSessionToken as e:
        logger.info(f"Rejected session token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


class RouteGuard:
    """Capability check used as a FastAPI dependency on protected routes."""

    def __init__(self, *, require_admin: bool = False) -> None:
        self.require_admin = require_admin

    def __call__(self, session: Session = Depends(get_current_session)) -> Session:
        if self.require_admin and not session.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin privileges required",
            )
        return session


require_session = RouteGuard()
require_admin = RouteGuard(require_admin=True)
