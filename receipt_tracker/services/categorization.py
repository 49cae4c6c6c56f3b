"""Categorization of receipt items using learned patterns with AI fallback."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from receipt_tracker.models.category import Category
from receipt_tracker.models.learned_category import LearnedCategory
from receipt_tracker.services.learned_patterns import LearnedPatternStore
from receipt_tracker.services.normalization import normalize_item_name

logger = logging.getLogger(__name__)

# Shorter patterns are too generic to learn from ("øl", "is")
MIN_PATTERN_LENGTH = 3
# Minimum learned pattern length for matching a whole word inside an item name
MIN_WORD_PATTERN_LENGTH = 5
# Minimum learned pattern length for matching the start of an item name
MIN_PREFIX_PATTERN_LENGTH = 4


class ScannedItem(Protocol):
    """What the resolver needs from an item read off a receipt."""

    name: str
    suggested_category: str
    confidence: float


@dataclass
class ResolvedAssignment:
    """Category decision for one receipt item."""

    item_name: str
    category_id: int | None
    confidence: float
    source: str  # exact, word, prefix, suggestion_exact, suggestion_partial, none


class CategoryResolver:
    """Decide which category a receipt item belongs to.

    Learned user corrections always outrank the vision model's suggestion,
    and within each group exact matches outrank partial ones.
    """

    def __init__(self, store: LearnedPatternStore):
        self.store = store

    def resolve(
        self,
        item_name: str,
        ai_suggested_category_name: str,
        known_categories: Sequence[Category],
        user_id: int,
    ) -> int | None:
        """Return the best category id for an item, or None if uncategorized."""
        category_id, _ = self._resolve(
            item_name, ai_suggested_category_name, known_categories, user_id
        )
        return category_id

    def resolve_suggestion(
        self, ai_suggested_category_name: str, known_categories: Sequence[Category]
    ) -> int | None:
        """Match only the AI suggestion against category names.

        Used on its own when learned patterns cannot be read.
        """
        category_id, _ = self._match_suggestion(ai_suggested_category_name, known_categories)
        return category_id

    def resolve_items(
        self,
        items: Sequence[ScannedItem],
        known_categories: Sequence[Category],
        user_id: int,
    ) -> list[ResolvedAssignment]:
        """Resolve every item of a scanned receipt.

        Learned patterns are loaded once for the whole receipt. A learned
        category that is no longer among the known categories counts as
        uncategorized.
        """
        learned = self.store.list_by_user(user_id)
        known_ids = {category.id for category in known_categories}

        assignments = []
        for item in items:
            category_id, source = self._resolve(
                item.name, item.suggested_category, known_categories, user_id, learned
            )
            if category_id is not None and category_id not in known_ids:
                logger.info(f"Category {category_id} for '{item.name}' no longer exists")
                category_id, source = None, "none"

            assignments.append(
                ResolvedAssignment(
                    item_name=item.name,
                    category_id=category_id,
                    confidence=item.confidence,
                    source=source,
                )
            )
        return assignments

    def _resolve(
        self,
        item_name: str,
        suggested: str,
        known_categories: Sequence[Category],
        user_id: int,
        learned: list[LearnedCategory] | None = None,
    ) -> tuple[int | None, str]:
        pattern = normalize_item_name(item_name)
        if len(pattern) >= MIN_PATTERN_LENGTH:
            match = self._match_learned(pattern, user_id, learned)
            if match:
                return match
        return self._match_suggestion(suggested, known_categories)

    def _match_learned(
        self, pattern: str, user_id: int, learned: list[LearnedCategory] | None
    ) -> tuple[int, str] | None:
        if learned is None:
            exact = self.store.lookup_exact(user_id, pattern)
        else:
            exact = next((lc for lc in learned if lc.item_pattern == pattern), None)
        if exact:
            logger.info(f"Exact learned match for '{pattern}' -> category {exact.category_id}")
            return exact.category_id, "exact"

        if learned is None:
            learned = self.store.list_by_user(user_id)

        words = pattern.split(" ")
        for lc in learned:
            if len(lc.item_pattern) >= MIN_WORD_PATTERN_LENGTH and lc.item_pattern in words:
                logger.info(
                    f"Word learned match '{lc.item_pattern}' in '{pattern}' "
                    f"-> category {lc.category_id}"
                )
                return lc.category_id, "word"

        for lc in learned:
            if len(lc.item_pattern) < MIN_PREFIX_PATTERN_LENGTH:
                continue
            if pattern == lc.item_pattern or pattern.startswith(lc.item_pattern + " "):
                logger.info(
                    f"Prefix learned match '{lc.item_pattern}' for '{pattern}' "
                    f"-> category {lc.category_id}"
                )
                return lc.category_id, "prefix"

        return None

    def _match_suggestion(
        self, suggested: str, known_categories: Sequence[Category]
    ) -> tuple[int | None, str]:
        suggestion = (suggested or "").strip().lower()
        if not suggestion:
            return None, "none"

        for category in known_categories:
            if (category.name or "").strip().lower() == suggestion:
                return category.id, "suggestion_exact"

        for category in known_categories:
            name = (category.name or "").strip().lower()
            if name and (suggestion in name or name in suggestion):
                return category.id, "suggestion_partial"

        return None, "none"


class FeedbackRecorder:
    """Teach the store from categories the user picked or confirmed.

    Only call this for explicit user decisions. Recording unreviewed AI
    suggestions would make the resolver learn from its own guesses.
    """

    def __init__(self, store: LearnedPatternStore):
        self.store = store

    def learn(self, user_id: int, item_name: str, category_id: int) -> LearnedCategory | None:
        """Record an item -> category correction for future resolution.

        Returns the stored pattern, or None when the name is too short to learn.
        """
        pattern = normalize_item_name(item_name)
        if len(pattern) < MIN_PATTERN_LENGTH:
            logger.debug(f"Skipping learning for short pattern '{pattern}'")
            return None

        learned = self.store.upsert(user_id, pattern, category_id)
        self.store.commit()
        logger.info(
            f"Learned '{pattern}' -> category {category_id} (used {learned.use_count} times)"
        )
        return learned
