"""Exceptions raised by the service layer."""
from __future__ import annotations


class WebhookExecutionError(Exception):
    """An execution failed before a response could be recorded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WebhookValidationError(WebhookExecutionError):
    """The webhook definition cannot be dispatched (bad URL or method)."""


class WebhookTransportError(WebhookExecutionError):
    """The request could not be completed: DNS, connection, TLS or timeout."""


class StoreWriteError(Exception):
    """The response store rejected a write."""


class CategoryInUseError(Exception):
    """A category cannot be deleted while webhooks still reference it."""

    def __init__(self, category_id: str, webhook_count: int) -> None:
        super().__init__(f"Category {category_id} is used by {webhook_count} webhook(s)")
        self.category_id = category_id
        self.webhook_count = webhook_count
