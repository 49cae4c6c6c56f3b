"""Item name normalization shared by learning and resolution."""

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_item_name(name: str) -> str:
    """Canonicalize a receipt item name into a learned-pattern key.

    "Melk, lettmelk 1L" and "melk lettmelk 1l " both become
    "melk lettmelk 1l". Punctuation is removed before whitespace is collapsed
    so the result is stable under repeated normalization.
    """
    if not name:
        return ""
    lowered = name.lower()
    stripped = _NON_WORD.sub("", lowered)
    return _WHITESPACE.sub(" ", stripped).strip()
