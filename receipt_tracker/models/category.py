"""Category model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from receipt_tracker.database import Base
from receipt_tracker.models.mixins import SoftDeleteMixin, TimestampMixin

DEFAULT_CATEGORY_COLOR = "#64748b"
DEFAULT_CATEGORY_ICON = "tag"


class Category(Base, TimestampMixin, SoftDeleteMixin):
    """Spending category owned by a user."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    parent_category = Column(String(255), nullable=True)
    color = Column(String(20), nullable=False, default=DEFAULT_CATEGORY_COLOR)
    icon = Column(String(50), nullable=False, default=DEFAULT_CATEGORY_ICON)
    sort_order = Column(Integer, default=0)

    # Relationships
    user = relationship("User", back_populates="categories")
    receipt_items = relationship("ReceiptItem", back_populates="category")
