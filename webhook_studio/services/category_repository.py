"""Category repository for database operations."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from webhook_studio.models.category import Category
from webhook_studio.models.webhook import Webhook
from webhook_studio.schemas.category import CategoryCreate, CategoryUpdate
from webhook_studio.services.errors import CategoryInUseError


class CategoryRepository:
    """Handles database operations for Category entities."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, category: CategoryCreate) -> Category:
        """Create a new category.

        Args:
            category: CategoryCreate schema with category data

        Returns:
            Created Category instance
        """
        db_category = Category(
            name=category.name,
            description=category.description,
            color=category.color,
        )
        self._session.add(db_category)
        self._session.commit()
        self._session.refresh(db_category)
        return db_category

    def get_by_id(self, category_id: str) -> Category | None:
        return self._session.get(Category, category_id)

    def get_all(self) -> Sequence[Category]:
        """Fetch all categories in creation order."""
        return self._session.query(Category).order_by(Category.created_at.asc(), Category.name.asc()).all()

    def count(self) -> int:
        return self._session.query(Category).count()

    def update(self, category_id: str, category: CategoryUpdate) -> Category | None:
        """Update a category by ID.

        Returns:
            Updated Category instance if found, None otherwise
        """
        db_category = self.get_by_id(category_id)
        if db_category is None:
            return None

        # Update only provided fields
        if category.name is not None:
            db_category.name = category.name
        if category.description is not None:
            db_category.description = category.description
        if category.color is not None:
            db_category.color = category.color

        self._session.commit()
        self._session.refresh(db_category)
        return db_category

    def delete(self, category_id: str) -> bool:
        """Delete a category by ID.

        Returns:
            True if the category was deleted, False if not found

        Raises:
            CategoryInUseError: If any webhook still references the category
        """
        db_category = self.get_by_id(category_id)
        if db_category is None:
            return False

        webhook_count = (
            self._session.query(func.count(Webhook.id))
            .filter(Webhook.category_id == category_id)
            .scalar()
        )
        if webhook_count:
            raise CategoryInUseError(category_id, webhook_count)

        self._session.delete(db_category)
        self._session.commit()
        return True
