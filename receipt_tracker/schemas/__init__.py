"""Pydantic schemas for API requests and responses."""

from receipt_tracker.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from receipt_tracker.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from receipt_tracker.schemas.learned_category import (
    LearnCategoryRequest,
    LearnedCategoryResponse,
    ResolveCategoryRequest,
    ResolveCategoryResponse,
)
from receipt_tracker.schemas.receipt import (
    ReceiptCreate,
    ReceiptCreateResponse,
    ReceiptItemCreate,
    ReceiptItemResponse,
    ReceiptResponse,
)
from receipt_tracker.schemas.receipt_scan import (
    ReceiptScanCreateResponse,
    ReceiptScanResponse,
    ScannedItemResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "LearnCategoryRequest",
    "LearnedCategoryResponse",
    "ResolveCategoryRequest",
    "ResolveCategoryResponse",
    "ReceiptCreate",
    "ReceiptItemCreate",
    "ReceiptResponse",
    "ReceiptItemResponse",
    "ReceiptCreateResponse",
    "ReceiptScanCreateResponse",
    "ReceiptScanResponse",
    "ScannedItemResponse",
]
