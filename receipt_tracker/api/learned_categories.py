"""Learned category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from receipt_tracker.api.dependencies import (
    get_category_resolver,
    get_current_user,
    get_feedback_recorder,
    get_pattern_store,
    get_user_category,
)
from receipt_tracker.database import get_db
from receipt_tracker.models.user import User
from receipt_tracker.schemas.learned_category import (
    LearnCategoryRequest,
    LearnedCategoryResponse,
    ResolveCategoryRequest,
    ResolveCategoryResponse,
)
from receipt_tracker.services.categories import get_active_categories
from receipt_tracker.services.categorization import CategoryResolver, FeedbackRecorder
from receipt_tracker.services.learned_patterns import LearnedPatternStore

router = APIRouter(prefix="/api/v1/learned-categories", tags=["learned-categories"])


@router.get("", response_model=list[LearnedCategoryResponse])
def list_learned_categories(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[LearnedPatternStore, Depends(get_pattern_store)],
):
    """List learned patterns, most used first."""
    return store.list_by_user(current_user.id)


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
def learn_category(
    request: LearnCategoryRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    recorder: Annotated[FeedbackRecorder, Depends(get_feedback_recorder)],
):
    """Remember the category the user chose for an item."""
    get_user_category(db, request.category_id, current_user)
    recorder.learn(current_user.id, request.item_name, request.category_id)


@router.post("/resolve", response_model=ResolveCategoryResponse)
def resolve_category(
    request: ResolveCategoryRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    resolver: Annotated[CategoryResolver, Depends(get_category_resolver)],
):
    """Suggest a category for one item name."""
    categories = get_active_categories(db, current_user.id)
    category_id = resolver.resolve(
        request.item_name, request.suggested_category, categories, current_user.id
    )
    return ResolveCategoryResponse(item_name=request.item_name, category_id=category_id)
