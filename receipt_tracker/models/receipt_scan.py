"""ReceiptScan model for tracking receipt upload and processing."""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from receipt_tracker.database import Base
from receipt_tracker.models.mixins import TimestampMixin


class ReceiptScan(Base, TimestampMixin):
    """Model for tracking receipt scan uploads and their processing status."""

    __tablename__ = "receipt_scans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        String(20), nullable=False, default="pending"
    )  # pending, processing, completed, failed
    error_message = Column(Text, nullable=True)

    # Receipt header read by the vision model
    merchant = Column(String(255), nullable=True)
    receipt_date = Column(String(20), nullable=True)
    total = Column(Float, nullable=True)
    confidence = Column(Float, nullable=True)
    raw_text = Column(Text, nullable=True)

    # Resolved items (list of {name, quantity, total_price, suggested_category, category_id, ...})
    parsed_items = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)

    # When processing completed
    processed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", backref="receipt_scans")
