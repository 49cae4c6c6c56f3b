"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from receipt_tracker.database import Base
from receipt_tracker.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    # Relationships
    categories = relationship("Category", back_populates="user")
    receipts = relationship("Receipt", back_populates="user")
