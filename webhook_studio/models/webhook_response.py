"""Webhook response model definition."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ResponseDataFormat(str, Enum):
    """Tag recording how the response body was decoded."""

    JSON = "json"
    TEXT = "text"


class WebhookResponse(Base):
    """The persisted, normalized result of one webhook execution. Never mutated."""

    __tablename__ = "webhook_responses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    webhook_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("webhooks.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[int] = mapped_column(Integer, nullable=False)
    status_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    headers: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)
    data: Mapped[Any] = mapped_column(JSON(none_as_null=True), nullable=True)
    data_format: Mapped[str] = mapped_column(String(8), nullable=False, default=ResponseDataFormat.TEXT.value)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    webhook: Mapped["Webhook"] = relationship(back_populates="responses")  # noqa: F821

    __table_args__ = (
        Index("ix_webhook_responses_webhook_id_timestamp", "webhook_id", "timestamp"),
    )
