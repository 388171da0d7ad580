"""Pydantic schemas for category resources."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webhook_studio.models.category import DEFAULT_CATEGORY_COLOR

NonEmptyStr = Annotated[str, Field(min_length=1, max_length=255)]


class CategoryBase(BaseModel):
    """Shared attributes for category payloads."""

    name: NonEmptyStr = Field(description="Display name, not required to be unique")
    description: str = Field(default="", description="Optional description")
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, description="CSS color used to tag the category")

    @field_validator("name", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        if isinstance(value, str):
            value = value.strip()
        return value


class CategoryCreate(CategoryBase):
    """Payload used when creating a category."""

    pass


class CategoryUpdate(BaseModel):
    """Payload used when updating a category (all fields optional)."""

    name: NonEmptyStr | None = Field(default=None, description="Display name")
    description: str | None = Field(default=None, description="Optional description")
    color: str | None = Field(default=None, description="CSS color")

    @field_validator("name", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            value = value.strip()
        return value


class CategoryRead(BaseModel):
    """Category as returned by API endpoints."""

    id: str = Field(description="Database identifier")
    name: str
    description: str = ""
    color: str = DEFAULT_CATEGORY_COLOR
    created_at: datetime = Field(description="Timestamp when the category was created")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, value: str | None) -> str:
        return value or ""

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, value: str | None) -> str:
        return value or DEFAULT_CATEGORY_COLOR
