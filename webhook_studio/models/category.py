"""Category model definition."""
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

DEFAULT_CATEGORY_COLOR = "#6E42CE"


class Category(Base):
    """A user-defined grouping label for webhooks."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    color: Mapped[str] = mapped_column(
        Text, nullable=False, default=DEFAULT_CATEGORY_COLOR, server_default=DEFAULT_CATEGORY_COLOR
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    webhooks: Mapped[list["Webhook"]] = relationship(back_populates="category")  # noqa: F821
