"""Category API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from receipt_tracker.api.dependencies import get_current_user, get_pattern_store, get_user_category
from receipt_tracker.database import get_db
from receipt_tracker.models.category import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_ICON,
    Category,
)
from receipt_tracker.models.receipt import Receipt, ReceiptItem
from receipt_tracker.models.user import User
from receipt_tracker.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from receipt_tracker.services.categories import get_active_categories, next_sort_order
from receipt_tracker.services.learned_patterns import LearnedPatternStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the user's categories in display order."""
    return get_active_categories(db, current_user.id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new category, placed last unless a sort order is given."""
    sort_order = category_data.sort_order
    if sort_order is None:
        sort_order = next_sort_order(db, current_user.id)

    category = Category(
        user_id=current_user.id,
        name=category_data.name,
        color=category_data.color or DEFAULT_CATEGORY_COLOR,
        icon=category_data.icon or DEFAULT_CATEGORY_ICON,
        parent_category=category_data.parent_category,
        sort_order=sort_order,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a category."""
    category = get_user_category(db, category_id, current_user)

    for field, value in category_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(category, field, value)

    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[LearnedPatternStore, Depends(get_pattern_store)],
):
    """Soft delete a category.

    Receipts and items in it become uncategorized and the patterns learned
    for it are forgotten, so it is never suggested again.
    """
    category = get_user_category(db, category_id, current_user)

    db.query(ReceiptItem).filter(ReceiptItem.category_id == category_id).update(
        {ReceiptItem.category_id: None}, synchronize_session=False
    )
    db.query(Receipt).filter(Receipt.category_id == category_id).update(
        {Receipt.category_id: None}, synchronize_session=False
    )
    forgotten = store.delete_for_category(category_id)

    category.soft_delete()
    db.commit()
    logger.info(f"Deleted category {category_id}, forgot {forgotten} learned patterns")
