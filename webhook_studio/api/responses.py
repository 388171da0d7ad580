"""Cross-webhook response queries."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from webhook_studio.api.webhooks import get_response_repository
from webhook_studio.core.security import Session as AuthSession
from webhook_studio.core.security import require_session
from webhook_studio.schemas.webhook_response import WebhookResponseRecord
from webhook_studio.services.response_repository import ResponseRepository

router = APIRouter(prefix="/responses", tags=["responses"])


@router.get(
    "/latest",
    response_model=dict[str, WebhookResponseRecord],
    status_code=status.HTTP_200_OK,
    summary="Latest response per webhook",
    description="Map of webhook ID to its most recent recorded response.",
)
async def latest_responses(
    responses: ResponseRepository = Depends(get_response_repository),
    _: AuthSession = Depends(require_session),
) -> dict[str, WebhookResponseRecord]:
    return {
        webhook_id: WebhookResponseRecord.model_validate(record)
        for webhook_id, record in responses.latest_by_webhook().items()
    }
