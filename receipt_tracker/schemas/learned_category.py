"""Learned category schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LearnCategoryRequest(BaseModel):
    """A category the user picked or confirmed for an item."""

    item_name: str = Field(..., max_length=500)
    category_id: int


class LearnedCategoryResponse(BaseModel):
    """A learned item pattern."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_pattern: str
    category_id: int
    use_count: int
    created_at: datetime
    updated_at: datetime


class ResolveCategoryRequest(BaseModel):
    """Resolve a single item name for the current user."""

    item_name: str = Field(..., max_length=500)
    suggested_category: str = Field("", max_length=255)


class ResolveCategoryResponse(BaseModel):
    """Resolution result; category_id is None when uncategorized."""

    item_name: str
    category_id: int | None
