"""Persistent store of learned item-name patterns."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receipt_tracker.exceptions import DataAccessError
from receipt_tracker.models.learned_category import LearnedCategory

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@contextmanager
def _data_access(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Learned pattern {operation} failed: {e}")
        raise DataAccessError(f"Learned pattern {operation} failed: {e}") from e


class LearnedPatternStore:
    """Per-user mapping of normalized item names to categories.

    Patterns are passed in already normalized; the store does no text
    processing of its own.
    """

    def __init__(self, db: Session):
        self.db = db

    def upsert(self, user_id: int, pattern: str, category_id: int) -> LearnedCategory:
        """Insert a pattern or reassign it and bump its use count.

        The write is a single INSERT ... ON CONFLICT DO UPDATE against the
        (user_id, item_pattern) unique constraint, so two corrections for the
        same item arriving together both count.
        """
        with _data_access("upsert"):
            dialect = self.db.get_bind().dialect.name
            insert = UPSERT_INSERTS.get(dialect)
            if insert is None:
                raise DataAccessError(f"Atomic upsert is not supported on '{dialect}'")

            stmt = insert(LearnedCategory).values(
                user_id=user_id,
                item_pattern=pattern,
                category_id=category_id,
                use_count=1,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id", "item_pattern"],
                set_={
                    "category_id": stmt.excluded.category_id,
                    "use_count": LearnedCategory.use_count + 1,
                    "updated_at": func.now(),
                },
            )
            self.db.execute(stmt)

        learned = self.lookup_exact(user_id, pattern)
        if learned is None:
            raise DataAccessError(f"Pattern '{pattern}' missing after upsert")
        return learned

    def lookup_exact(self, user_id: int, pattern: str) -> LearnedCategory | None:
        """Get the learned pattern equal to the given key, if any."""
        with _data_access("lookup"):
            return (
                self.db.query(LearnedCategory)
                .filter(
                    LearnedCategory.user_id == user_id,
                    LearnedCategory.item_pattern == pattern,
                )
                .populate_existing()
                .first()
            )

    def list_by_user(self, user_id: int) -> list[LearnedCategory]:
        """All patterns for a user, best established first.

        Ordered by use count, then longer patterns, then alphabetically, which
        is also the tie-break order for partial matches.
        """
        with _data_access("listing"):
            return (
                self.db.query(LearnedCategory)
                .filter(LearnedCategory.user_id == user_id)
                .order_by(
                    LearnedCategory.use_count.desc(),
                    func.length(LearnedCategory.item_pattern).desc(),
                    LearnedCategory.item_pattern.asc(),
                )
                .populate_existing()
                .all()
            )

    def delete_for_category(self, category_id: int) -> int:
        """Forget every pattern pointing at a category. Returns rows removed."""
        with _data_access("delete"):
            return (
                self.db.query(LearnedCategory)
                .filter(LearnedCategory.category_id == category_id)
                .delete(synchronize_session=False)
            )

    def commit(self) -> None:
        with _data_access("commit"):
            self.db.commit()
