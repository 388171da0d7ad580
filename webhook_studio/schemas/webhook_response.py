"""Pydantic schemas for recorded webhook responses."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from webhook_studio.models.webhook_response import ResponseDataFormat


class JsonBody(BaseModel):
    """Response body that was declared and parsed as JSON."""

    kind: Literal["json"] = "json"
    value: Any = None


class TextBody(BaseModel):
    """Response body kept as raw text."""

    kind: Literal["text"] = "text"
    value: str = ""


ResponseBody = Annotated[Union[JsonBody, TextBody], Field(discriminator="kind")]


class NormalizedResponse(BaseModel):
    """Transport-independent view of one HTTP response."""

    status: int = Field(description="HTTP status code")
    status_text: str = Field(default="", description="HTTP reason phrase")
    headers: dict[str, str] = Field(default_factory=dict, description="Flattened response headers")
    body: ResponseBody = Field(description="Decoded response body")
    timestamp: datetime = Field(description="When the response was received")

    @property
    def is_success(self) -> bool:
        """2xx status; used for display only, never for error handling."""
        return 200 <= self.status < 300


class WebhookResponseRecord(BaseModel):
    """A persisted execution result as returned by API endpoints."""

    id: str = Field(description="Database identifier")
    webhook_id: str = Field(description="Webhook that produced this response")
    status: int = Field(description="HTTP status code")
    status_text: str = Field(default="", description="HTTP reason phrase")
    headers: dict[str, str] = Field(default_factory=dict, description="Flattened response headers")
    data: Any = Field(default=None, description="Parsed JSON value or raw text")
    data_format: ResponseDataFormat = Field(default=ResponseDataFormat.TEXT, description="How data was decoded")
    timestamp: datetime = Field(description="When the response was received")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_normalized(cls, record_id: str, webhook_id: str, response: NormalizedResponse) -> "WebhookResponseRecord":
        return cls(
            id=record_id,
            webhook_id=webhook_id,
            status=response.status,
            status_text=response.status_text,
            headers=response.headers,
            data=response.body.value,
            data_format=ResponseDataFormat(response.body.kind),
            timestamp=response.timestamp,
        )

    @property
    def body(self) -> JsonBody | TextBody:
        if self.data_format == ResponseDataFormat.JSON:
            return JsonBody(value=self.data)
        return TextBody(value="" if self.data is None else str(self.data))
