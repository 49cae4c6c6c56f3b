"""Tests for item name normalization."""

import pytest

from receipt_tracker.services.normalization import normalize_item_name


def test_ocr_variants_share_a_key():
    """Casing, punctuation and spacing differences collapse to one pattern."""
    assert normalize_item_name("Melk, lettmelk 1L") == "melk lettmelk 1l"
    assert normalize_item_name("melk lettmelk 1l ") == "melk lettmelk 1l"
    assert normalize_item_name("  MELK   lettmelk\t1L.") == "melk lettmelk 1l"


def test_norwegian_letters_survive():
    assert normalize_item_name("Pålegg Ørret Ærfugl") == "pålegg ørret ærfugl"


def test_empty_and_degenerate_input():
    assert normalize_item_name("") == ""
    assert normalize_item_name("   ") == ""
    assert normalize_item_name("!!! ,,, ...") == ""


def test_punctuation_between_words_leaves_single_space():
    assert normalize_item_name("Kaffe - Friele") == "kaffe friele"
    assert normalize_item_name("a , b") == "a b"


@pytest.mark.parametrize(
    "raw",
    [
        "Melk, lettmelk 1L",
        "Frokost  Kaffe / Sort",
        "a , b",
        "  Tine * Norvegia 26% ",
        "İstanbul kebab",
        "øl",
        "",
        "___",
    ],
)
def test_normalization_is_idempotent(raw):
    once = normalize_item_name(raw)
    assert normalize_item_name(once) == once
