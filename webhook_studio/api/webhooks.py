"""Webhook configuration, execution and response history API endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from webhook_studio.core.config import get_settings
from webhook_studio.core.db import get_session
from webhook_studio.core.security import Session as AuthSession
from webhook_studio.core.security import require_admin, require_session
from webhook_studio.schemas.webhook import ExecuteWebhookRequest, WebhookCreate, WebhookRead, WebhookUpdate
from webhook_studio.schemas.webhook_response import WebhookResponseRecord
from webhook_studio.services.category_repository import CategoryRepository
from webhook_studio.services.errors import (
    StoreWriteError,
    WebhookTransportError,
    WebhookValidationError,
)
from webhook_studio.services.response_repository import ResponseRepository
from webhook_studio.services.webhook_executor import WebhookExecutor
from webhook_studio.services.webhook_repository import WebhookRepository

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_webhook_repository(session: Session = Depends(get_session)) -> WebhookRepository:
    """Dependency to get WebhookRepository instance."""
    return WebhookRepository(session)


def get_response_repository(session: Session = Depends(get_session)) -> ResponseRepository:
    """Dependency to get ResponseRepository instance."""
    return ResponseRepository(session)


def get_webhook_executor(
    responses: ResponseRepository = Depends(get_response_repository),
) -> WebhookExecutor:
    """Dependency to get a WebhookExecutor that records into the response store."""
    return WebhookExecutor(responses)


def _get_or_404(repository: WebhookRepository, webhook_id: str):
    webhook = repository.get_by_id(webhook_id)
    if webhook is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Webhook with ID {webhook_id} not found",
        )
    return webhook


def _ensure_category_exists(session: Session, category_id: str | None) -> None:
    if category_id is not None and CategoryRepository(session).get_by_id(category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found",
        )


@router.get(
    "",
    response_model=list[WebhookRead],
    status_code=status.HTTP_200_OK,
    summary="List webhooks",
    description="Retrieve all webhooks, optionally restricted to one category.",
)
async def list_webhooks(
    category_id: str | None = Query(default=None, description="Only webhooks of this category"),
    repository: WebhookRepository = Depends(get_webhook_repository),
    _: AuthSession = Depends(require_session),
) -> list[WebhookRead]:
    webhooks = repository.get_all(category_id=category_id)
    return [WebhookRead.model_validate(w) for w in webhooks]


@router.post(
    "",
    response_model=WebhookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new webhook",
)
async def create_webhook(
    webhook: WebhookCreate,
    session: Session = Depends(get_session),
    repository: WebhookRepository = Depends(get_webhook_repository),
    _: AuthSession = Depends(require_admin),
) -> WebhookRead:
    """
    Create a new webhook.

    Raises:
        HTTPException: 404 if the referenced category does not exist
    """
    _ensure_category_exists(session, webhook.category_id)
    try:
        created_webhook = repository.create(webhook)
        logger.info(f"Created webhook {created_webhook.id} ({created_webhook.name})")
        return WebhookRead.model_validate(created_webhook)
    except Exception as e:
        logger.exception(f"Unexpected error creating webhook: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create webhook",
        ) from e


@router.get(
    "/{webhook_id}",
    response_model=WebhookRead,
    status_code=status.HTTP_200_OK,
    summary="Get webhook by ID",
)
async def get_webhook(
    webhook_id: str,
    repository: WebhookRepository = Depends(get_webhook_repository),
    _: AuthSession = Depends(require_session),
) -> WebhookRead:
    return WebhookRead.model_validate(_get_or_404(repository, webhook_id))


@router.put(
    "/{webhook_id}",
    response_model=WebhookRead,
    status_code=status.HTTP_200_OK,
    summary="Update a webhook",
    description="Update a webhook by ID. Only the fields present in the body are changed.",
)
async def update_webhook(
    webhook_id: str,
    webhook: WebhookUpdate,
    session: Session = Depends(get_session),
    repository: WebhookRepository = Depends(get_webhook_repository),
    _: AuthSession = Depends(require_admin),
) -> WebhookRead:
    """
    Update a webhook by ID.

    Raises:
        HTTPException: 404 if the webhook or the new category is not found
    """
    if "category_id" in webhook.model_fields_set:
        _ensure_category_exists(session, webhook.category_id)
    try:
        updated_webhook = repository.update(webhook_id, webhook)
        if updated_webhook is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Webhook with ID {webhook_id} not found",
            )
        return WebhookRead.model_validate(updated_webhook)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error updating webhook {webhook_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update webhook",
        ) from e


@router.delete(
    "/{webhook_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a webhook by ID",
    description="Delete a webhook and every response recorded for it.",
)
async def delete_webhook(
    webhook_id: str,
    repository: WebhookRepository = Depends(get_webhook_repository),
    _: AuthSession = Depends(require_admin),
) -> None:
    deleted = repository.delete(webhook_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Webhook with ID {webhook_id} not found",
        )
    logger.info(f"Deleted webhook {webhook_id}")


@router.post(
    "/{webhook_id}/execute",
    response_model=WebhookResponseRecord,
    status_code=status.HTTP_200_OK,
    summary="Execute a webhook",
    description=(
        "Send the webhook request once, using the given payload or the stored default payload. "
        "Non-2xx answers from the target are returned as normal results."
    ),
)
async def execute_webhook(
    webhook_id: str,
    body: ExecuteWebhookRequest | None = None,
    repository: WebhookRepository = Depends(get_webhook_repository),
    executor: WebhookExecutor = Depends(get_webhook_executor),
    _: AuthSession = Depends(require_session),
) -> WebhookResponseRecord:
    """
    Execute a stored webhook and record its response.

    Raises:
        HTTPException: 404 if webhook not found, 400 if its URL or method is invalid,
            502 if the target could not be reached
    """
    webhook = _get_or_404(repository, webhook_id)
    payload = body.payload if body is not None else None

    try:
        return await executor.execute(webhook, payload)
    except WebhookValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Webhook execution failed: {e.message}",
        ) from e
    except WebhookTransportError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Webhook execution failed: {e.message}",
        ) from e


@router.get(
    "/{webhook_id}/responses",
    response_model=list[WebhookResponseRecord],
    status_code=status.HTTP_200_OK,
    summary="Get recorded responses",
    description="Recorded responses of a webhook, most recent first.",
)
async def list_webhook_responses(
    webhook_id: str,
    limit: int | None = Query(default=None, ge=1, le=100, description="Maximum number of responses"),
    repository: WebhookRepository = Depends(get_webhook_repository),
    responses: ResponseRepository = Depends(get_response_repository),
    _: AuthSession = Depends(require_session),
) -> list[WebhookResponseRecord]:
    _get_or_404(repository, webhook_id)
    records = responses.list_by_webhook(webhook_id, limit=limit or settings.response_history_limit)
    return [WebhookResponseRecord.model_validate(r) for r in records]


@router.get(
    "/{webhook_id}/responses/latest",
    response_model=WebhookResponseRecord,
    status_code=status.HTTP_200_OK,
    summary="Get the most recent response",
)
async def get_latest_webhook_response(
    webhook_id: str,
    repository: WebhookRepository = Depends(get_webhook_repository),
    responses: ResponseRepository = Depends(get_response_repository),
    _: AuthSession = Depends(require_session),
) -> WebhookResponseRecord:
    _get_or_404(repository, webhook_id)
    latest = responses.latest_for_webhook(webhook_id)
    if latest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Webhook with ID {webhook_id} has no recorded responses",
        )
    return WebhookResponseRecord.model_validate(latest)


@router.delete(
    "/{webhook_id}/responses",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear recorded responses",
)
async def clear_webhook_responses(
    webhook_id: str,
    repository: WebhookRepository = Depends(get_webhook_repository),
    responses: ResponseRepository = Depends(get_response_repository),
    _: AuthSession = Depends(require_session),
) -> None:
    _get_or_404(repository, webhook_id)
    try:
        responses.delete_by_webhook(webhook_id)
    except StoreWriteError as e:
        logger.exception(f"Failed to clear responses for webhook {webhook_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear responses",
        ) from e
