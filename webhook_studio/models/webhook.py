"""Webhook model definition."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class WebhookMethod(str, Enum):
    """HTTP methods a webhook may be dispatched with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class Webhook(Base):
    """A stored, named HTTP request template that can be triggered on demand.

    ``headers`` and ``example_payloads`` hold JSON-encoded text, not JSON columns,
    so rows stay readable by tools that only know the plain text schema.
    """

    __tablename__ = "webhooks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    url: Mapped[str] = mapped_column(Text, nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False, default=WebhookMethod.POST.value)
    headers: Mapped[str] = mapped_column(Text, nullable=False, default="[]", server_default="[]")
    default_payload: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    example_payloads: Mapped[str] = mapped_column(Text, nullable=False, default="[]", server_default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category: Mapped[Optional["Category"]] = relationship(back_populates="webhooks")  # noqa: F821
    responses: Mapped[list["WebhookResponse"]] = relationship(  # noqa: F821
        back_populates="webhook",
        cascade="all, delete-orphan",
    )
