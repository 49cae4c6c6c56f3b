"""Receipt and receipt item models."""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from receipt_tracker.database import Base
from receipt_tracker.models.mixins import TimestampMixin


class Receipt(Base, TimestampMixin):
    """A saved receipt with its purchased items."""

    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    merchant = Column(String(255), nullable=False)
    receipt_date = Column(Date, nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    ocr_method = Column(String(50), nullable=True)  # "vision", "manual"
    raw_ocr_text = Column(Text, nullable=True)
    confidence_score = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="receipts")
    category = relationship("Category")
    items = relationship(
        "ReceiptItem",
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="ReceiptItem.line_number",
    )


class ReceiptItem(Base, TimestampMixin):
    """A single line item on a receipt."""

    __tablename__ = "receipt_items"

    id = Column(Integer, primary_key=True, index=True)
    receipt_id = Column(
        Integer, ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_name = Column(String(500), nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=True)
    total_price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    line_number = Column(Integer, nullable=True)

    # Relationships
    receipt = relationship("Receipt", back_populates="items")
    category = relationship("Category", back_populates="receipt_items")
