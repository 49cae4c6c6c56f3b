"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from receipt_tracker.database import get_db
from receipt_tracker.models.category import Category
from receipt_tracker.models.user import User
from receipt_tracker.services.auth import decode_access_token
from receipt_tracker.services.categorization import CategoryResolver, FeedbackRecorder
from receipt_tracker.services.learned_patterns import LearnedPatternStore

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub") if payload else None

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_user_category(db: Session, category_id: int, user: User) -> Category:
    """Get a live category owned by the user, or 404."""
    category = (
        db.query(Category)
        .filter(
            Category.id == category_id,
            Category.user_id == user.id,
            Category.deleted_at.is_(None),
        )
        .first()
    )
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def get_pattern_store(db: Annotated[Session, Depends(get_db)]) -> LearnedPatternStore:
    return LearnedPatternStore(db)


def get_category_resolver(
    store: Annotated[LearnedPatternStore, Depends(get_pattern_store)],
) -> CategoryResolver:
    return CategoryResolver(store)


def get_feedback_recorder(
    store: Annotated[LearnedPatternStore, Depends(get_pattern_store)],
) -> FeedbackRecorder:
    return FeedbackRecorder(store)
