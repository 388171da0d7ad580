"""Public schema exports."""

from .auth import LoginRequest, SessionResponse
from .category import CategoryCreate, CategoryRead, CategoryUpdate
from .relay import RelayError, RelayRequest, RelayResponse
from .webhook import (
    ExamplePayload,
    ExecuteWebhookRequest,
    WebhookCreate,
    WebhookDefinition,
    WebhookHeader,
    WebhookRead,
    WebhookUpdate,
)
from .webhook_response import JsonBody, NormalizedResponse, ResponseBody, TextBody, WebhookResponseRecord

__all__ = [
    "LoginRequest",
    "SessionResponse",
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "RelayError",
    "RelayRequest",
    "RelayResponse",
    "ExamplePayload",
    "ExecuteWebhookRequest",
    "WebhookCreate",
    "WebhookDefinition",
    "WebhookHeader",
    "WebhookRead",
    "WebhookUpdate",
    "JsonBody",
    "NormalizedResponse",
    "ResponseBody",
    "TextBody",
    "WebhookResponseRecord",
]
