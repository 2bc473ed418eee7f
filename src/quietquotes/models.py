"""Summary: Domain model types for Quiet Quotes.

Importance: Defines the shared vocabulary between classifier, monitor, and consumers.
Alternatives: Pass raw strings and dicts between components.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(str, Enum):
    """Summary: Closed set of context labels inferred from chat content.

    Importance: Keeps persisted context values within a known vocabulary.
    Alternatives: Store free-form labels and validate at read time.
    """

    PRODUCTIVITY = "productivity"
    CODING = "coding"
    CREATIVE = "creative"
    LEARNING = "learning"
    WELLBEING = "wellbeing"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        """Summary: Convert a stored value into a Category.

        Importance: Unknown or missing values fall back to general.
        Alternatives: Raise on unknown labels.
        """

        if isinstance(value, Category):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


CONTEXT_KEY = "current_context_category"


@dataclass(frozen=True)
class Quote:
    """Summary: Represents one record of the quote corpus.

    Importance: Carries the tags used for context-aware selection.
    Alternatives: Keep the raw JSON records throughout the app.
    """

    text: str
    author: str
    category: str | None = None
    tags: tuple[str, ...] = ()

    @staticmethod
    def from_record(record: dict[str, Any]) -> "Quote":
        """Summary: Build a Quote from an asset record.

        Importance: Maps the corpus field names onto the domain type.
        Alternatives: Rename the fields in the asset file.
        """

        if not isinstance(record, dict):
            raise ValueError(f"Quote record must be an object, got {type(record).__name__}")
        tags = record.get("Tags") or []
        if isinstance(tags, str):
            tags = [tags]
        return Quote(
            text=str(record["Quote"]),
            author=str(record.get("Author") or "Unknown"),
            category=record.get("Category") or None,
            tags=tuple(str(tag) for tag in tags),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "Quote": self.text,
            "Author": self.author,
            "Category": self.category,
            "Tags": list(self.tags),
        }


@dataclass(frozen=True)
class Shortcut:
    """Summary: Represents a pinned shortcut on the new tab page.

    Importance: Stored in the synced namespace alongside preferences.
    Alternatives: Use the browser's top sites list only.
    """

    title: str
    url: str

    def to_record(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass(frozen=True)
class StorageChange:
    """Summary: Old and new value of a single changed key.

    Importance: Lets listeners react only to the keys they care about.
    Alternatives: Re-read the whole namespace on every notification.
    """

    old_value: Any = None
    new_value: Any = None


@dataclass(frozen=True)
class Badge:
    """Summary: Badge text and color for the toolbar action.

    Importance: Gives a glanceable signal of the detected context.
    Alternatives: Show context only on the new tab page.
    """

    text: str
    color: str


@dataclass(frozen=True)
class Appearance:
    """Summary: Resolved visual tokens for rendering the new tab page.

    Importance: Separates preference math from any rendering layer.
    Alternatives: Compute styles inline inside templates.
    """

    font_stack: str
    colors: tuple[str, str, str]
    bg_type: str
    noise_opacity: float
    noise_frequency: float
    animation_seconds: float
    text_primary: str
    text_secondary: str
    text_shadow: str


@dataclass(frozen=True)
class NewTabSnapshot:
    """Summary: Everything a renderer needs to paint the new tab page.

    Importance: Makes the consumer testable without a DOM.
    Alternatives: Render HTML directly from the view object.
    """

    quote: str
    author: str
    long_text: bool
    context_indicator: str
    clock: str
    date_line: str | None
    appearance: Appearance
    shortcuts: list[Shortcut] = field(default_factory=list)
