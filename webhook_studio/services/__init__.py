"""Services module for business logic."""
from __future__ import annotations

from .category_repository import CategoryRepository
from .errors import (
    CategoryInUseError,
    StoreWriteError,
    WebhookExecutionError,
    WebhookTransportError,
    WebhookValidationError,
)
from .response_repository import ResponseRepository
from .webhook_executor import PreparedRequest, WebhookExecutor
from .webhook_repository import WebhookRepository

__all__ = [
    "CategoryRepository",
    "CategoryInUseError",
    "StoreWriteError",
    "WebhookExecutionError",
    "WebhookTransportError",
    "WebhookValidationError",
    "ResponseRepository",
    "PreparedRequest",
    "WebhookExecutor",
    "WebhookRepository",
]
