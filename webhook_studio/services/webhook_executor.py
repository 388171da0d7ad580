"""Webhook execution engine: build, dispatch, normalize and record one request."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import httpx

from webhook_studio.core.config import Settings, get_settings
from webhook_studio.models.webhook import WebhookMethod
from webhook_studio.schemas.webhook import WebhookDefinition, normalize_webhook_url
from webhook_studio.schemas.webhook_response import (
    JsonBody,
    NormalizedResponse,
    TextBody,
    WebhookResponseRecord,
)
from webhook_studio.services.errors import StoreWriteError, WebhookTransportError, WebhookValidationError
from webhook_studio.services.response_repository import ResponseRepository

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"
ALLOWED_METHODS = frozenset(method.value for method in WebhookMethod)


@dataclass
class PreparedRequest:
    """The exact request an execution will send."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def assemble_headers(headers: list[Any]) -> dict[str, str]:
    """Start from the JSON content type and overlay enabled entries in order.

    Later entries replace earlier ones with the same name, compared
    case-insensitively; disabled entries are skipped entirely.
    """
    assembled: dict[str, str] = {"Content-Type": DEFAULT_CONTENT_TYPE}
    for header in headers:
        if not header.enabled or not header.key:
            continue
        for existing in [key for key in assembled if key.lower() == header.key.lower()]:
            del assembled[existing]
        assembled[header.key] = header.value
    return assembled


def decode_body(response: httpx.Response) -> JsonBody | TextBody:
    """Parse the body as JSON when the response declares it, else keep the text."""
    text = response.text
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type.lower():
        try:
            return JsonBody(value=json.loads(text))
        except ValueError:
            logger.warning("Response declared application/json but the body is not valid JSON; keeping raw text")
    return TextBody(value=text)


def normalize_response(response: httpx.Response, received_at: datetime | None = None) -> NormalizedResponse:
    return NormalizedResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=dict(response.headers.items()),
        body=decode_body(response),
        timestamp=received_at or datetime.now(timezone.utc),
    )


class WebhookExecutor:
    """Turns a webhook definition into exactly one outbound HTTP call.

    Each execution moves Idle -> Dispatching -> Succeeded | Failed. Nothing is
    retried and a dispatched request cannot be cancelled by the caller.
    """

    def __init__(
        self,
        responses: ResponseRepository | None = None,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            responses: Response store records are written to; executions are not
                recorded when omitted
            settings: Application settings (timeout, redirect policy)
            transport: Optional httpx transport, used to swap the network out
        """
        self._responses = responses
        self._settings = settings or get_settings()
        self._transport = transport

    def build_request(self, definition: Any, payload_override: str | None = None) -> PreparedRequest:
        """Validate a definition and assemble the request it describes.

        Raises:
            WebhookValidationError: If the URL, method or a header cannot be dispatched
        """
        definition = WebhookDefinition.model_validate(definition)

        try:
            url = normalize_webhook_url(definition.url)
        except ValueError as e:
            raise WebhookValidationError(str(e)) from e

        method = (definition.method or "").upper()
        if method not in ALLOWED_METHODS:
            raise WebhookValidationError(f"Unsupported HTTP method: {definition.method!r}")

        headers = assemble_headers(definition.headers)
        for key, value in headers.items():
            try:
                key.encode("ascii")
                value.encode("ascii")
            except UnicodeEncodeError as e:
                raise WebhookValidationError(f"Header {key!r} must contain only ASCII characters") from e

        payload = payload_override if payload_override is not None else definition.default_payload
        return PreparedRequest(
            method=method,
            url=url,
            headers=headers,
            body=None if method == WebhookMethod.GET.value else payload,
        )

    async def send(self, request: PreparedRequest) -> NormalizedResponse:
        """Send a prepared request once and normalize whatever comes back.

        Raises:
            WebhookTransportError: If no HTTP response was obtained
            WebhookValidationError: If the request cannot be encoded for the wire
        """
        logger.info(f"Dispatching {request.method} {request.url}")
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.webhook_timeout_seconds,
                follow_redirects=self._settings.webhook_follow_redirects,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body.encode("utf-8") if request.body is not None else None,
                )
                received_at = datetime.now(timezone.utc)
        except httpx.TimeoutException as e:
            message = f"Webhook request timed out after {self._settings.webhook_timeout_seconds}s"
            logger.error(f"{request.method} {request.url} failed: {message}")
            raise WebhookTransportError(message) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            message = f"Webhook request failed: {e}"
            logger.error(f"{request.method} {request.url} failed: {message}")
            raise WebhookTransportError(message) from e
        except ValueError as e:
            # UnicodeEncodeError from header encoding lands here
            message = f"Webhook request could not be encoded: {e}"
            logger.error(f"{request.method} {request.url} failed: {message}")
            raise WebhookValidationError(message) from e

        normalized = normalize_response(response, received_at)
        if normalized.is_success:
            logger.info(f"{request.method} {request.url} returned {normalized.status}")
        else:
            logger.warning(f"{request.method} {request.url} returned non-2xx status {normalized.status}")
        return normalized

    async def dispatch(self, definition: Any, payload_override: str | None = None) -> NormalizedResponse:
        """Build and send one request without recording it."""
        return await self.send(self.build_request(definition, payload_override))

    async def execute(self, webhook: Any, payload_override: str | None = None) -> WebhookResponseRecord:
        """Execute a stored webhook and record the response.

        Args:
            webhook: Stored webhook (ORM row or schema) with an ``id``
            payload_override: Body to send instead of the stored default payload

        Returns:
            The normalized response record, also when storing it failed

        Raises:
            WebhookValidationError: Before dispatch, for a bad URL, method or header
            WebhookTransportError: If the request could not be completed
        """
        normalized = await self.dispatch(webhook, payload_override)
        record = WebhookResponseRecord.from_normalized(str(uuid4()), str(webhook.id), normalized)

        if self._responses is not None:
            try:
                self._responses.insert(record)
            except StoreWriteError as e:
                # store failures never fail the execution
                logger.error(f"Could not record response {record.id} for webhook {record.webhook_id}: {e}", exc_info=True)
        return record
