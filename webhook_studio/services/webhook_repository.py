"""Webhook repository for database operations."""
from __future__ import annotations

import json
from typing import Any, Sequence

from sqlalchemy.orm import Session

from webhook_studio.models.webhook import Webhook
from webhook_studio.schemas.webhook import WebhookCreate, WebhookUpdate

# Columns that cannot be cleared through a partial update
_REQUIRED_FIELDS = {"name", "url", "method", "description", "default_payload", "headers", "example_payloads"}


def _encode_list(items: Sequence[Any]) -> str:
    """Serialize header / example payload entries to the stored JSON text."""
    return json.dumps([item.model_dump() if hasattr(item, "model_dump") else item for item in items])


class WebhookRepository:
    """Handles database operations for Webhook entities."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with a SQLAlchemy session.

        Args:
            session: Active database session for executing queries
        """
        self._session = session

    def create(self, webhook: WebhookCreate) -> Webhook:
        """Create a new webhook.

        Args:
            webhook: WebhookCreate schema with webhook data

        Returns:
            Created Webhook instance
        """
        db_webhook = Webhook(
            category_id=webhook.category_id,
            name=webhook.name,
            description=webhook.description,
            url=webhook.url,
            method=webhook.method.value,
            headers=_encode_list(webhook.headers),
            default_payload=webhook.default_payload,
            example_payloads=_encode_list(webhook.example_payloads),
        )
        self._session.add(db_webhook)
        self._session.commit()
        self._session.refresh(db_webhook)
        return db_webhook

    def get_by_id(self, webhook_id: str) -> Webhook | None:
        """Fetch a webhook by its database ID.

        Returns:
            Webhook instance if found, None otherwise
        """
        return self._session.get(Webhook, webhook_id)

    def get_all(self, category_id: str | None = None) -> Sequence[Webhook]:
        """Fetch all webhooks, optionally restricted to one category.

        Returns:
            Sequence of Webhook instances, oldest first
        """
        query = self._session.query(Webhook)
        if category_id is not None:
            query = query.filter(Webhook.category_id == category_id)
        return query.order_by(Webhook.created_at.asc(), Webhook.name.asc()).all()

    def count(self) -> int:
        return self._session.query(Webhook).count()

    def update(self, webhook_id: str, webhook: WebhookUpdate) -> Webhook | None:
        """Update a webhook by ID.

        Only fields explicitly present in the payload are touched; ``category_id``
        may be set to null to detach the webhook from its category.

        Returns:
            Updated Webhook instance if found, None otherwise
        """
        db_webhook = self.get_by_id(webhook_id)
        if db_webhook is None:
            return None

        for field in webhook.model_fields_set:
            value = getattr(webhook, field)
            if value is None and field in _REQUIRED_FIELDS:
                continue
            if field in ("headers", "example_payloads"):
                value = _encode_list(value)
            elif field == "method":
                value = value.value
            setattr(db_webhook, field, value)

        self._session.commit()
        self._session.refresh(db_webhook)
        return db_webhook

    def delete(self, webhook_id: str) -> bool:
        """Delete a webhook by ID together with its recorded responses.

        Returns:
            True if webhook was deleted, False if not found
        """
        db_webhook = self.get_by_id(webhook_id)
        if db_webhook is None:
            return False

        self._session.delete(db_webhook)
        self._session.commit()
        return True
