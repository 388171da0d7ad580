"""Category management API endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from webhook_studio.core.db import get_session
from webhook_studio.core.security import Session as AuthSession
from webhook_studio.core.security import require_admin, require_session
from webhook_studio.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from webhook_studio.services.category_repository import CategoryRepository
from webhook_studio.services.errors import CategoryInUseError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_repository(session: Session = Depends(get_session)) -> CategoryRepository:
    """Dependency to get CategoryRepository instance."""
    return CategoryRepository(session)


@router.get(
    "",
    response_model=list[CategoryRead],
    status_code=status.HTTP_200_OK,
    summary="List all categories",
)
async def list_categories(
    repository: CategoryRepository = Depends(get_category_repository),
    _: AuthSession = Depends(require_session),
) -> list[CategoryRead]:
    return [CategoryRead.model_validate(c) for c in repository.get_all()]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new category",
)
async def create_category(
    category: CategoryCreate,
    repository: CategoryRepository = Depends(get_category_repository),
    _: AuthSession = Depends(require_admin),
) -> CategoryRead:
    try:
        created = repository.create(category)
        logger.info(f"Created category {created.id} ({created.name})")
        return CategoryRead.model_validate(created)
    except Exception as e:
        logger.exception(f"Unexpected error creating category: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create category",
        ) from e


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
    status_code=status.HTTP_200_OK,
    summary="Get category by ID",
)
async def get_category(
    category_id: str,
    repository: CategoryRepository = Depends(get_category_repository),
    _: AuthSession = Depends(require_session),
) -> CategoryRead:
    category = repository.get_by_id(category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found",
        )
    return CategoryRead.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    status_code=status.HTTP_200_OK,
    summary="Update a category",
)
async def update_category(
    category_id: str,
    category: CategoryUpdate,
    repository: CategoryRepository = Depends(get_category_repository),
    _: AuthSession = Depends(require_admin),
) -> CategoryRead:
    updated = repository.update(category_id, category)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found",
        )
    return CategoryRead.model_validate(updated)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Delete a category. Refused with 409 while webhooks still belong to it.",
)
async def delete_category(
    category_id: str,
    repository: CategoryRepository = Depends(get_category_repository),
    _: AuthSession = Depends(require_admin),
) -> None:
    try:
        deleted = repository.delete(category_id)
    except CategoryInUseError as e:
        logger.warning(f"Refused to delete category {category_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete category with webhooks",
        ) from e
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found",
        )
