"""Login and session endpoints."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from webhook_studio.core.config import Settings, get_settings
from webhook_studio.core.security import (
    Session,
    authenticate,
    issue_token,
    require_session,
    session_expires_at,
)
from webhook_studio.schemas.auth import LoginRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _describe(session: Session, settings: Settings, token: str | None = None) -> SessionResponse:
    return SessionResponse(
        token=token,
        email=session.email,
        role=session.role.value,
        remember_me=session.remember_me,
        issued_at=session.issued_at,
        expires_at=session_expires_at(session, settings),
    )


@router.post(
    "/login",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in with demo credentials",
)
async def login(credentials: LoginRequest, settings: Settings = Depends(get_settings)) -> SessionResponse:
    """
    Exchange credentials for a signed session token.

    Raises:
        HTTPException: 401 if the credentials are not recognised
    """
    role = authenticate(credentials.email, credentials.password, settings)
    if role is None:
        logger.info(f"Failed login attempt for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    session = Session(
        email=credentials.email.strip().lower(),
        role=role,
        issued_at=datetime.now(timezone.utc).replace(microsecond=0),
        remember_me=credentials.remember_me,
    )
    logger.info(f"Logged in {session.email} as {role.value}")
    return _describe(session, settings, token=issue_token(session, settings))


@router.get(
    "/session",
    response_model=SessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Describe the current session",
)
async def current_session(
    session: Session = Depends(require_session),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    return _describe(session, settings)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Log out",
    description="Tokens are stateless; clients drop theirs. Provided for symmetry with login.",
)
async def logout(session: Session = Depends(require_session)) -> None:
    logger.info(f"Logged out {session.email}")
