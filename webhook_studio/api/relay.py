"""HTTP relay that executes a webhook request on behalf of a remote caller."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from webhook_studio.schemas.relay import RelayError, RelayRequest, RelayResponse
from webhook_studio.schemas.webhook import WebhookDefinition, WebhookHeader
from webhook_studio.services.errors import WebhookExecutionError
from webhook_studio.services.webhook_executor import WebhookExecutor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/relay", tags=["relay"])

RELAY_PATH = "/relay/execute-webhook"


def get_relay_executor() -> WebhookExecutor:
    """Dependency to get an executor that does not record responses."""
    return WebhookExecutor()


@router.post(
    "/execute-webhook",
    response_model=RelayResponse,
    status_code=status.HTTP_200_OK,
    responses={500: {"model": RelayError}},
    summary="Relay a webhook request",
    description=(
        "Send `{url, method, headers, payload}` from this server and return the normalized "
        "response. Every header given is applied. Nothing is recorded."
    ),
)
async def relay_execute_webhook(
    request: RelayRequest,
    executor: WebhookExecutor = Depends(get_relay_executor),
):
    definition = WebhookDefinition(
        url=request.url,
        method=request.method,
        headers=[WebhookHeader(key=key, value=value) for key, value in request.headers.items()],
        default_payload=request.payload or "",
    )
    try:
        normalized = await executor.dispatch(definition, request.payload)
    except WebhookExecutionError as e:
        logger.error(f"Relay execution failed: {e.message}")
        error = RelayError(error=e.message or "Unknown error occurred", details=repr(e))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.model_dump())

    return RelayResponse(
        status=normalized.status,
        status_text=normalized.status_text,
        headers=normalized.headers,
        data=normalized.body.value,
        timestamp=normalized.timestamp,
    )


async def relay_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer unparsable relay bodies with the relay error shape; other routes keep the 422."""
    if not request.url.path.endswith(RELAY_PATH):
        return await request_validation_exception_handler(request, exc)

    logger.error(f"Relay request rejected: {exc.errors()}")
    error = RelayError(error="Invalid relay request", details=str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.model_dump())
