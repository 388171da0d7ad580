"""Pydantic schemas for webhook resources."""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Annotated, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from webhook_studio.models.webhook import WebhookMethod

logger = logging.getLogger(__name__)

NonEmptyStr = Annotated[str, Field(min_length=1, max_length=255)]


def normalize_webhook_url(value: str) -> str:
    """Return the stripped URL if it parses as an absolute http(s) URL.

    Raises:
        ValueError: If the URL is empty, relative or uses another scheme
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("URL is required")
    try:
        parsed = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValueError(f"Invalid URL: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError("URL must be an absolute http:// or https:// URL")
    return value


def decode_json_list(raw: Any, field_name: str, entry_model: type[BaseModel] | None = None) -> list[Any]:
    """Decode a JSON-encoded text column into a list.

    Empty, malformed or non-list content decodes to an empty list. With
    ``entry_model`` set, entries that do not validate against it are dropped.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        parsed = raw
    else:
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing webhook {field_name}: {e}")
            return []
        if not isinstance(parsed, list):
            return []
    if entry_model is None:
        return parsed

    entries = []
    for index, item in enumerate(parsed):
        try:
            entries.append(entry_model.model_validate(item))
        except ValidationError as e:
            logger.error(f"Dropping invalid webhook {field_name} entry {index}: {e.error_count()} error(s)")
    return entries


class WebhookHeader(BaseModel):
    """A single request header entry; only enabled entries are sent."""

    key: str = Field(description="Header name")
    value: str = Field(default="", description="Header value")
    enabled: bool = Field(default=True, description="Whether the header is applied on execution")


class ExamplePayload(BaseModel):
    """A named payload the user can pick instead of the default one."""

    name: str = Field(description="Display name of the example")
    payload: str = Field(default="", description="Payload text, intended to be JSON but not validated")


class WebhookBase(BaseModel):
    """Shared attributes for webhook payloads."""

    category_id: str | None = Field(default=None, description="Owning category, if any")
    name: NonEmptyStr = Field(description="Display name of the webhook")
    description: str = Field(default="", description="Free-form description")
    url: str = Field(description="Absolute URL the request is sent to")
    method: WebhookMethod = Field(default=WebhookMethod.POST, description="HTTP method")
    headers: list[WebhookHeader] = Field(default_factory=list, description="Ordered header entries")
    default_payload: str = Field(default="", description="Body sent when no override is given")
    example_payloads: list[ExamplePayload] = Field(default_factory=list, description="Named example bodies")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: str) -> str:
        if isinstance(value, str):
            value = value.strip()
        return value

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """Validate that URL is an absolute HTTP/HTTPS URL."""
        return normalize_webhook_url(value)


class WebhookCreate(WebhookBase):
    """Payload used when creating a webhook."""

    pass


class WebhookUpdate(BaseModel):
    """Payload used when updating a webhook (all fields optional)."""

    category_id: str | None = Field(default=None, description="Owning category")
    name: NonEmptyStr | None = Field(default=None, description="Display name of the webhook")
    description: str | None = Field(default=None, description="Free-form description")
    url: str | None = Field(default=None, description="Absolute URL the request is sent to")
    method: WebhookMethod | None = Field(default=None, description="HTTP method")
    headers: list[WebhookHeader] | None = Field(default=None, description="Ordered header entries")
    default_payload: str | None = Field(default=None, description="Body sent when no override is given")
    example_payloads: list[ExamplePayload] | None = Field(default=None, description="Named example bodies")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            value = value.strip()
        return value

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return normalize_webhook_url(value)


class WebhookRead(BaseModel):
    """Webhook as returned by API endpoints, with header/payload text decoded."""

    id: str = Field(description="Database identifier")
    category_id: str | None = Field(default=None, description="Owning category, if any")
    name: str
    description: str = ""
    url: str
    method: WebhookMethod
    headers: list[WebhookHeader] = Field(default_factory=list)
    default_payload: str = ""
    example_payloads: list[ExamplePayload] = Field(default_factory=list)
    created_at: datetime = Field(description="Timestamp when the webhook was created")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("headers", mode="before")
    @classmethod
    def decode_headers(cls, value: Any) -> list[Any]:
        return decode_json_list(value, "headers", WebhookHeader)

    @field_validator("example_payloads", mode="before")
    @classmethod
    def decode_example_payloads(cls, value: Any) -> list[Any]:
        return decode_json_list(value, "example payloads", ExamplePayload)

    @field_validator("description", "default_payload", mode="before")
    @classmethod
    def none_to_empty(cls, value: str | None) -> str:
        return value or ""


class ExecuteWebhookRequest(BaseModel):
    """Body of an execute call; ``payload`` overrides the stored default payload."""

    payload: str | None = Field(default=None, description="Payload override sent verbatim as the body")


class WebhookDefinition(BaseModel):
    """The request-template part of a webhook, as consumed by the executor.

    Accepts ORM rows (header text is decoded) as well as plain dicts, so the
    relay can execute ad-hoc definitions that were never stored.
    """

    url: str = ""
    method: str = WebhookMethod.POST.value
    headers: list[WebhookHeader] = Field(default_factory=list)
    default_payload: str = ""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("headers", mode="before")
    @classmethod
    def decode_headers(cls, value: Any) -> list[Any]:
        return decode_json_list(value, "headers", WebhookHeader)

    @field_validator("method", mode="before")
    @classmethod
    def method_value(cls, value: Any) -> Any:
        if isinstance(value, WebhookMethod):
            return value.value
        return value

    @field_validator("default_payload", mode="before")
    @classmethod
    def none_to_empty(cls, value: str | None) -> str:
        return value or ""
