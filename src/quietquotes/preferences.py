"""Summary: User preferences and pinned shortcuts in the synced namespace.

Importance: Validates user input at the boundary before anything is stored.
Alternatives: Store whatever the UI sends and sanitize on read.
"""

from __future__ import annotations

import logging
import re
import urllib.parse
from dataclasses import dataclass
from typing import Any

from quietquotes.appearance import BACKGROUND_TYPES, FONT_STACKS
from quietquotes.models import Shortcut
from quietquotes.storage.kv_store import SYNC, KeyValueStore


logger = logging.getLogger(__name__)

SHORTCUTS_KEY = "pinnedShortcuts"
MAX_SHORTCUTS = 8

DEFAULT_PREFERENCES: dict[str, Any] = {
    "fontFamily": "serif",
    "fontSize": "l",
    "contextAware": True,
    "showSeconds": False,
    "showDate": False,
    "bgType": "plane",
    "noiseStrength": 40,
    "noiseDensity": 13,
    "color1": "#ff5005",
    "color2": "#dbba95",
    "color3": "#d0bce1",
    "speed": 40,
    SHORTCUTS_KEY: [],
}

FONT_SIZES = ("s", "m", "l", "xl")
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_RANGES = {"noiseStrength": (0, 100), "noiseDensity": (0, 50), "speed": (0, 100)}


class InvalidPreferenceError(ValueError):
    """Summary: Raised when a preference update is malformed."""


class InvalidShortcutError(ValueError):
    """Summary: Raised when a shortcut cannot be pinned."""


@dataclass(frozen=True)
class PreferencesService:
    """Summary: Loads and saves user preferences.

    Importance: Gives every consumer the same defaults-merged view.
    Alternatives: Let each consumer merge defaults on its own.
    """

    store: KeyValueStore

    def load(self) -> dict[str, Any]:
        """Summary: Return stored preferences merged over defaults.

        Importance: Missing keys always resolve to a default value.
        Alternatives: Fail when preferences were never saved.
        """

        return self.store.get_with_defaults(SYNC, DEFAULT_PREFERENCES)

    def save(self, updates: dict[str, Any]) -> dict[str, Any]:
        """Summary: Validate and store preference updates.

        Importance: Rejects the whole update when any value is invalid.
        Alternatives: Store valid keys and drop invalid ones.
        """

        cleaned = {key: validate_preference(key, value) for key, value in updates.items()}
        if cleaned:
            self.store.set(SYNC, cleaned)
            logger.info("Saved preferences %s.", ", ".join(sorted(cleaned)))
        return self.load()

    def reset(self) -> dict[str, Any]:
        keys = [key for key in DEFAULT_PREFERENCES if key != SHORTCUTS_KEY]
        self.store.remove(SYNC, keys)
        return self.load()


def validate_preference(key: str, value: Any) -> Any:
    """Summary: Validate a single preference value.

    Importance: Keeps stored preferences renderable without extra checks.
    Alternatives: Use a schema library for preference documents.
    """

    if key == SHORTCUTS_KEY:
        raise InvalidPreferenceError("Pinned shortcuts are managed through the shortcuts commands")
    if key not in DEFAULT_PREFERENCES:
        raise InvalidPreferenceError(f"Unknown preference: {key}")
    if key == "fontFamily" and value not in FONT_STACKS:
        raise InvalidPreferenceError(f"Unknown font family: {value}")
    if key == "fontSize" and value not in FONT_SIZES:
        raise InvalidPreferenceError(f"Unknown font size: {value}")
    if key == "bgType" and value not in BACKGROUND_TYPES:
        raise InvalidPreferenceError(f"Unknown background type: {value}")
    if key in ("contextAware", "showSeconds", "showDate") and not isinstance(value, bool):
        raise InvalidPreferenceError(f"{key} must be true or false")
    if key.startswith("color") and not (isinstance(value, str) and _HEX_COLOR.match(value)):
        raise InvalidPreferenceError(f"{key} must be a #rrggbb color")
    if key in _RANGES:
        low, high = _RANGES[key]
        if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
            raise InvalidPreferenceError(f"{key} must be an integer between {low} and {high}")
    return value


def normalize_url(raw_url: str) -> str:
    """Summary: Validate a shortcut URL and add a scheme to bare domains.

    Importance: Malformed input is rejected before anything is committed.
    Alternatives: Accept any string and let the browser fail later.
    """

    candidate = raw_url.strip()
    if not candidate or any(char.isspace() for char in candidate):
        raise InvalidShortcutError(f"Invalid URL: {raw_url!r}")
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    parsed = urllib.parse.urlparse(candidate)
    if parsed.scheme not in ("http", "https"):
        raise InvalidShortcutError(f"Unsupported URL scheme: {parsed.scheme}")
    host = parsed.hostname or ""
    if not host or ("." not in host and host != "localhost"):
        raise InvalidShortcutError(f"Invalid URL: {raw_url!r}")
    return candidate


@dataclass(frozen=True)
class ShortcutService:
    """Summary: Manages pinned shortcuts on the new tab page.

    Importance: Keeps shortcut validation and limits in one place.
    Alternatives: Store shortcuts as free-form preference values.
    """

    store: KeyValueStore

    def list_shortcuts(self) -> list[Shortcut]:
        records = self.store.get_with_defaults(SYNC, {SHORTCUTS_KEY: []})[SHORTCUTS_KEY]
        return [Shortcut(title=record["title"], url=record["url"]) for record in records]

    def add(self, title: str, url: str) -> Shortcut:
        """Summary: Pin a new shortcut.

        Importance: Rejects invalid URLs, duplicates, and overflow without writing.
        Alternatives: Replace the oldest shortcut when the list is full.
        """

        normalized = normalize_url(url)
        shortcuts = self.list_shortcuts()
        if any(item.url == normalized for item in shortcuts):
            raise InvalidShortcutError(f"Shortcut already pinned: {normalized}")
        if len(shortcuts) >= MAX_SHORTCUTS:
            raise InvalidShortcutError(f"At most {MAX_SHORTCUTS} shortcuts can be pinned")
        label = title.strip() or (urllib.parse.urlparse(normalized).hostname or normalized)
        shortcut = Shortcut(title=label, url=normalized)
        shortcuts.append(shortcut)
        self._store(shortcuts)
        logger.info("Pinned shortcut %s.", normalized)
        return shortcut

    def remove(self, url: str) -> bool:
        """Summary: Unpin a shortcut by URL.

        Importance: Returns False when nothing matched.
        Alternatives: Remove by list position.
        """

        target = normalize_url(url)
        shortcuts = self.list_shortcuts()
        remaining = [item for item in shortcuts if item.url != target]
        if len(remaining) == len(shortcuts):
            return False
        self._store(remaining)
        logger.info("Removed shortcut %s.", target)
        return True

    def _store(self, shortcuts: list[Shortcut]) -> None:
        self.store.set(SYNC, {SHORTCUTS_KEY: [item.to_record() for item in shortcuts]})
