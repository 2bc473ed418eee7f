"""Summary: Quote corpus loading and context-aware selection.

Importance: Turns the detected category into the quote shown on a new tab.
Alternatives: Show a random quote regardless of context.
"""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Sequence

from quietquotes.models import Category, Quote


logger = logging.getLogger(__name__)

FALLBACK_QUOTE = Quote(
    text="Simplicity is the ultimate sophistication.",
    author="Leonardo da Vinci",
    category="creative",
)

CATEGORY_SYNONYMS: dict[Category, tuple[str, ...]] = {
    Category.CODING: ("technology", "programming", "logic", "science"),
    Category.PRODUCTIVITY: ("work", "success", "time", "action"),
    Category.CREATIVE: ("art", "imagination", "create", "beauty"),
    Category.WELLBEING: ("peace", "happiness", "mind", "health"),
}

LONG_QUOTE_LENGTH = 150


def load_quotes(path: Path) -> list[Quote]:
    """Summary: Load the quote corpus from a JSON asset.

    Importance: Any read or parse failure degrades to a single built-in quote.
    Alternatives: Fail startup when the asset is missing.
    """

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(records, list):
            raise ValueError("Quote asset must contain a JSON list")
        quotes = [Quote.from_record(record) for record in records]
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.error("Failed to load quotes from %s: %s", path, exc)
        return [FALLBACK_QUOTE]
    if not quotes:
        logger.error("Quote asset %s is empty; using fallback quote.", path)
        return [FALLBACK_QUOTE]
    logger.info("Loaded %s quotes.", len(quotes))
    return quotes


def keywords_for(category: Category) -> tuple[str, ...]:
    """Summary: Expand a category into the tag keywords it accepts.

    Importance: Bridges classifier labels and the corpus's own tag vocabulary.
    Alternatives: Require quotes to be tagged with classifier labels.
    """

    return CATEGORY_SYNONYMS.get(category, (category.value,))


def eligible_quotes(items: Sequence[Quote], category: Category) -> list[Quote]:
    """Summary: Filter quotes matching a category, falling back to all.

    Importance: Never yields an empty selection while quotes exist.
    Alternatives: Return no quote when nothing matches.
    """

    if category is Category.GENERAL:
        return list(items)
    keywords = keywords_for(category)
    matches = []
    for quote in items:
        primary = (quote.category or "").lower()
        haystack = f"{primary} {' '.join(quote.tags)}".lower()
        if primary in keywords or any(keyword in haystack for keyword in keywords):
            matches.append(quote)
    return matches or list(items)


def select_for_category(
    items: Sequence[Quote], category: Category, rng: random.Random | None = None
) -> Quote | None:
    """Summary: Pick a random quote from the eligible set.

    Importance: Drives the contextual quote on every new tab.
    Alternatives: Rotate quotes deterministically.
    """

    candidates = eligible_quotes(items, category)
    if not candidates:
        return None
    return (rng or random).choice(candidates)


def is_long(quote: Quote) -> bool:
    return len(quote.text) > LONG_QUOTE_LENGTH
