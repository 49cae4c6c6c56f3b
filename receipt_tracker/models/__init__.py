"""SQLAlchemy models."""

from receipt_tracker.models.category import Category
from receipt_tracker.models.learned_category import LearnedCategory
from receipt_tracker.models.receipt import Receipt, ReceiptItem
from receipt_tracker.models.receipt_scan import ReceiptScan
from receipt_tracker.models.user import User

__all__ = [
    "User",
    "Category",
    "LearnedCategory",
    "Receipt",
    "ReceiptItem",
    "ReceiptScan",
]
