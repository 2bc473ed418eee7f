"""Summary: Context classification from recent chat text.

Importance: Turns page content into the single category that drives quote selection.
Alternatives: Use an LLM-based or trained text classifier.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from quietquotes.models import Category


logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 10

KeywordTable = Mapping[Category, Sequence[str]]
ScoreVector = dict[Category, int]

DEFAULT_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.PRODUCTIVITY: (
        "plan", "schedule", "list", "organize", "task", "mail", "calendar", "time", "efficient",
    ),
    Category.CODING: (
        "javascript", "python", "react", "code", "function", "bug", "error", "api",
        "database", "variable", "class", "method",
    ),
    Category.CREATIVE: (
        "write", "story", "poem", "idea", "design", "color", "imagine", "create", "art", "music",
    ),
    Category.LEARNING: (
        "explain", "what is", "how to", "history", "science", "math", "study", "learn",
        "understand", "theory",
    ),
    Category.WELLBEING: (
        "stress", "relax", "meditate", "feeling", "emotion", "health", "sleep", "exercise",
        "anxiety",
    ),
}


@dataclass(frozen=True)
class ContextClassifier:
    """Summary: Keyword-count classifier over a fixed category table.

    Importance: Offers deterministic, dependency-free context detection.
    Alternatives: Use embeddings similarity against category descriptions.
    """

    keywords: KeywordTable = field(default_factory=lambda: dict(DEFAULT_KEYWORDS))
    min_length: int = MIN_TEXT_LENGTH
    _patterns: tuple[tuple[Category, tuple[re.Pattern[str], ...]], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Summary: Compile whole-word patterns once per table.

        Importance: Keeps the per-call cost to regex scanning only.
        Alternatives: Compile patterns lazily on every call.
        """

        compiled = []
        for label, terms in self.keywords.items():
            try:
                category = Category(str(getattr(label, "value", label)).lower())
            except ValueError as exc:
                raise ValueError(f"Unknown category: {label}") from exc
            if category is Category.GENERAL:
                raise ValueError("general is the fallback category and cannot hold keywords")
            patterns = tuple(
                re.compile(rf"\b{re.escape(term.lower())}\b", re.IGNORECASE) for term in terms
            )
            compiled.append((category, patterns))
        object.__setattr__(self, "_patterns", tuple(compiled))

    def score(self, text: str) -> ScoreVector:
        """Summary: Count whole-word keyword hits per category.

        Importance: Exposes the raw evidence behind a classification.
        Alternatives: Return only the winning label.
        """

        scores: ScoreVector = {category: 0 for category, _ in self._patterns}
        for category, patterns in self._patterns:
            for pattern in patterns:
                scores[category] += len(pattern.findall(text))
        return scores

    def classify(self, text: str) -> Category:
        """Summary: Resolve the best-matching category for a text blob.

        Importance: Produces the label persisted by the context monitor.
        Alternatives: Return a ranked list of categories.
        """

        if not text or len(text) < self.min_length:
            return Category.GENERAL
        scores = self.score(text)
        best = Category.GENERAL
        best_score = 0
        # Strict comparison: the earliest category in table order wins ties.
        for category, _ in self._patterns:
            if scores[category] > best_score:
                best_score = scores[category]
                best = category
        logger.debug(
            "Scores: %s Best: %s",
            {category.value: value for category, value in scores.items()},
            best.value,
        )
        return best


_DEFAULT_CLASSIFIER = ContextClassifier()


def classify(text: str) -> Category:
    """Summary: Classify text with the default keyword table.

    Importance: Convenience entry point for callers without custom tables.
    Alternatives: Always construct a ContextClassifier explicitly.
    """

    return _DEFAULT_CLASSIFIER.classify(text)
