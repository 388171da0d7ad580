"""Response store: append-only persistence of webhook execution results."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webhook_studio.models.webhook_response import WebhookResponse
from webhook_studio.schemas.webhook_response import WebhookResponseRecord
from webhook_studio.services.errors import StoreWriteError

logger = logging.getLogger(__name__)


class ResponseRepository:
    """Handles database operations for WebhookResponse rows.

    Rows are inserted once per execution and never updated; they disappear only
    through :meth:`delete_by_webhook` or when the owning webhook is deleted.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert(self, record: WebhookResponseRecord) -> WebhookResponse:
        """Persist one response record.

        Raises:
            StoreWriteError: If the database rejects the write
        """
        db_response = WebhookResponse(
            id=record.id,
            webhook_id=record.webhook_id,
            status=record.status,
            status_text=record.status_text,
            headers=record.headers,
            data=record.data,
            data_format=record.data_format.value,
            timestamp=record.timestamp,
        )
        try:
            self._session.add(db_response)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise StoreWriteError(f"Failed to store response for webhook {record.webhook_id}: {e}") from e
        return db_response

    def list_by_webhook(self, webhook_id: str, limit: int | None = None) -> Sequence[WebhookResponse]:
        """Return responses for a webhook, most recent first.

        Args:
            webhook_id: Owning webhook
            limit: Optional maximum number of rows
        """
        query = (
            self._session.query(WebhookResponse)
            .filter(WebhookResponse.webhook_id == webhook_id)
            .order_by(WebhookResponse.timestamp.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def latest_for_webhook(self, webhook_id: str) -> WebhookResponse | None:
        responses = self.list_by_webhook(webhook_id, limit=1)
        return responses[0] if responses else None

    def latest_by_webhook(self) -> dict[str, WebhookResponse]:
        """Return the newest response of every webhook that has one."""
        newest = (
            self._session.query(
                WebhookResponse.webhook_id,
                func.max(WebhookResponse.timestamp).label("latest"),
            )
            .group_by(WebhookResponse.webhook_id)
            .subquery()
        )
        rows = (
            self._session.query(WebhookResponse)
            .join(
                newest,
                (WebhookResponse.webhook_id == newest.c.webhook_id)
                & (WebhookResponse.timestamp == newest.c.latest),
            )
            .all()
        )
        return {row.webhook_id: row for row in rows}

    def delete_by_webhook(self, webhook_id: str) -> int:
        """Remove every response recorded for a webhook.

        Returns:
            Number of rows deleted

        Raises:
            StoreWriteError: If the database rejects the delete
        """
        try:
            deleted = (
                self._session.query(WebhookResponse)
                .filter(WebhookResponse.webhook_id == webhook_id)
                .delete()
            )
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise StoreWriteError(f"Failed to clear responses for webhook {webhook_id}: {e}") from e
        logger.info(f"Cleared {deleted} response(s) for webhook {webhook_id}")
        return deleted
