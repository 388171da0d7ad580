"""Wire schemas for the execute-webhook relay endpoint."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from webhook_studio.models.webhook import WebhookMethod


class RelayRequest(BaseModel):
    """Request relayed on behalf of a caller in another network context."""

    url: str = Field(default="", description="Target URL")
    method: str = Field(default=WebhookMethod.POST.value, description="HTTP method, validated by the executor")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers to send, all applied")
    payload: str | None = Field(default=None, description="Body sent verbatim for non-GET methods")


class RelayResponse(BaseModel):
    """Normalized response, keyed the way browser clients expect."""

    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(alias="statusText")
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None
    timestamp: datetime


class RelayError(BaseModel):
    """Error body returned by the relay on any failure."""

    error: str
    details: str
