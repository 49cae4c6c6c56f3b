"""Learned category model for user-taught item categorization."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from receipt_tracker.database import Base
from receipt_tracker.models.mixins import TimestampMixin


class LearnedCategory(Base, TimestampMixin):
    """Mapping from a normalized item name to the category a user chose for it.

    Rows are created on the first correction of an item and updated in place
    on every later one: the category follows the most recent correction while
    use_count keeps growing. (user_id, item_pattern) is unique so the store can
    write with a single INSERT ... ON CONFLICT DO UPDATE.
    """

    __tablename__ = "learned_categories"
    __table_args__ = (
        UniqueConstraint("user_id", "item_pattern", name="uq_learned_categories_user_pattern"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    item_pattern = Column(String(500), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    use_count = Column(Integer, nullable=False, default=1)

    # Relationships
    category = relationship("Category")
