"""Summary: Background worker: install defaults, badge updates, context queries.

Importance: Reacts to context changes independently of any open new tab.
Alternatives: Let the new tab page own badge updates.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from quietquotes.models import CONTEXT_KEY, Badge, Category, StorageChange
from quietquotes.storage.kv_store import LOCAL, KeyValueStore


logger = logging.getLogger(__name__)

DEFAULT_LOCAL_SETTINGS: dict[str, Any] = {
    CONTEXT_KEY: Category.GENERAL.value,
    "theme": "light",
    "quote_frequency": "always",
}

CATEGORY_BADGES: dict[Category, Badge] = {
    Category.PRODUCTIVITY: Badge(text="PROD", color="#4CAF50"),
    Category.CODING: Badge(text="CODE", color="#2196F3"),
    Category.CREATIVE: Badge(text="ART", color="#9C27B0"),
    Category.LEARNING: Badge(text="LEARN", color="#FF9800"),
    Category.WELLBEING: Badge(text="ZEN", color="#00BCD4"),
    Category.GENERAL: Badge(text="", color="#000000"),
}


def badge_for(category: Category) -> Badge:
    return CATEGORY_BADGES.get(category, CATEGORY_BADGES[Category.GENERAL])


def on_installed(store: KeyValueStore, reason: str = "install") -> dict[str, Any]:
    """Summary: Seed local defaults for keys that are still missing.

    Importance: Guarantees the persisted category is never absent after install.
    Alternatives: Have every reader apply its own default.
    """

    logger.info("Extension installed/updated: %s", reason)
    existing = store.get(LOCAL, DEFAULT_LOCAL_SETTINGS.keys())
    missing = {key: value for key, value in DEFAULT_LOCAL_SETTINGS.items() if key not in existing}
    if missing:
        store.set(LOCAL, missing)
        logger.info("Default settings initialized.")
    return missing


def current_category(store: KeyValueStore) -> Category:
    return Category.parse(store.get(LOCAL, [CONTEXT_KEY]).get(CONTEXT_KEY))


def handle_message(store: KeyValueStore, message: dict[str, Any]) -> dict[str, Any] | None:
    """Summary: Answer runtime messages sent by pages.

    Importance: Lets pages query the context without reading storage themselves.
    Alternatives: Require pages to read the store directly.
    """

    if message.get("type") == "GET_CONTEXT":
        return {"category": current_category(store).value}
    return None


class BadgeSink(ABC):
    """Summary: Destination for badge updates."""

    @abstractmethod
    def show(self, badge: Badge) -> None:
        """Summary: Display a badge."""


class RecordingBadgeSink(BadgeSink):
    """Summary: Keeps the latest badge in memory.

    Importance: Backs the API badge endpoint and tests.
    Alternatives: Render badges to a terminal directly.
    """

    def __init__(self) -> None:
        self.current = badge_for(Category.GENERAL)
        self.history: list[Badge] = []

    def show(self, badge: Badge) -> None:
        self.current = badge
        self.history.append(badge)


@dataclass
class BadgeUpdater:
    """Summary: Mirrors the persisted category onto the badge.

    Importance: Consumes change notifications from the local namespace only.
    Alternatives: Poll the store on an interval.
    """

    store: KeyValueStore
    sink: BadgeSink
    _unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)
        self.sink.show(badge_for(current_category(self.store)))

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, changes: dict[str, StorageChange], namespace: str) -> None:
        if namespace != LOCAL or CONTEXT_KEY not in changes:
            return
        category = Category.parse(changes[CONTEXT_KEY].new_value)
        logger.info("Context changed to: %s", category.value)
        self.sink.show(badge_for(category))
