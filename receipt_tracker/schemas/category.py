"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Category name cannot be blank")
    return value


class CategoryCreate(BaseModel):
    """Create a new category. Sort order defaults to after the existing ones."""

    name: str = Field(..., min_length=1, max_length=255)
    color: str | None = Field(None, max_length=20)
    icon: str | None = Field(None, max_length=50)
    parent_category: str | None = Field(None, max_length=255)
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str | None) -> str | None:
        return _clean_name(value)


class CategoryUpdate(BaseModel):
    """Update a category."""

    name: str | None = Field(None, min_length=1, max_length=255)
    color: str | None = Field(None, max_length=20)
    icon: str | None = Field(None, max_length=50)
    parent_category: str | None = Field(None, max_length=255)
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str | None) -> str | None:
        return _clean_name(value)


class CategoryResponse(BaseModel):
    """Category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    parent_category: str | None
    color: str
    icon: str
    sort_order: int
    created_at: datetime
    updated_at: datetime
