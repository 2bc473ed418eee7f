"""Summary: New tab view model that consumes the persisted context.

Importance: Selects and presents the quote for the current context.
Alternatives: Render directly from storage reads on every paint.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from quietquotes.appearance import format_clock, format_date, resolve_appearance
from quietquotes.models import CONTEXT_KEY, Category, NewTabSnapshot, Quote, Shortcut, StorageChange
from quietquotes.preferences import SHORTCUTS_KEY, PreferencesService
from quietquotes.quotes import FALLBACK_QUOTE, is_long, select_for_category
from quietquotes.storage.kv_store import LOCAL, SYNC, KeyValueStore


logger = logging.getLogger(__name__)


@dataclass
class NewTabState:
    """Summary: Explicit state of one new tab page.

    Importance: Replaces module-level globals with a single owned object.
    Alternatives: Keep category and preferences as globals.
    """

    quotes: list[Quote]
    preferences: dict[str, Any]
    category: Category = Category.GENERAL
    quote: Quote | None = None


@dataclass
class NewTabView:
    """Summary: Reacts to storage changes and renders new tab snapshots.

    Importance: Keeps the consumer independent from the context monitor.
    Alternatives: Have the monitor push quotes to the page.
    """

    store: KeyValueStore
    quotes: list[Quote]
    rng: random.Random = field(default_factory=random.Random)
    state: NewTabState = field(init=False)
    _unsubscribe: Callable[[], None] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.state = NewTabState(quotes=list(self.quotes), preferences=self._preferences().load())

    def open(self) -> NewTabSnapshot:
        """Summary: Initialize the page: context, quote, and subscriptions.

        Importance: Mirrors the page lifecycle from load to first paint.
        Alternatives: Lazily select the quote on first render.
        """

        self.refresh_context()
        self.select_quote()
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)
        return self.render()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh_context(self) -> Category:
        """Summary: Read the persisted category into page state.

        Importance: Context-unaware mode always behaves as general.
        Alternatives: Ignore the contextAware preference.
        """

        if not self.state.preferences["contextAware"]:
            self.state.category = Category.GENERAL
        else:
            stored = self.store.get(LOCAL, [CONTEXT_KEY]).get(CONTEXT_KEY)
            self.state.category = Category.parse(stored)
        return self.state.category

    def select_quote(self) -> Quote:
        quote = select_for_category(self.state.quotes, self.state.category, self.rng)
        self.state.quote = quote or FALLBACK_QUOTE
        return self.state.quote

    def context_indicator(self) -> str:
        if self.state.preferences["contextAware"] and self.state.category is not Category.GENERAL:
            return f"Inspired by {self.state.category.value}"
        return ""

    def render(self, now: datetime | None = None) -> NewTabSnapshot:
        """Summary: Produce a snapshot of everything shown on the page.

        Importance: Gives renderers and tests one immutable view.
        Alternatives: Expose the mutable state directly.
        """

        moment = now or datetime.now()
        prefs = self.state.preferences
        quote = self.state.quote or self.select_quote()
        return NewTabSnapshot(
            quote=quote.text,
            author=quote.author,
            long_text=is_long(quote),
            context_indicator=self.context_indicator(),
            clock=format_clock(moment, prefs["showSeconds"]),
            date_line=format_date(moment) if prefs["showDate"] else None,
            appearance=resolve_appearance(prefs),
            shortcuts=[
                Shortcut(title=item["title"], url=item["url"]) for item in prefs[SHORTCUTS_KEY]
            ],
        )

    def _preferences(self) -> PreferencesService:
        return PreferencesService(store=self.store)

    def _on_change(self, changes: dict[str, StorageChange], namespace: str) -> None:
        if namespace == LOCAL and CONTEXT_KEY in changes:
            previous = self.state.category
            if self.refresh_context() is not previous:
                logger.info("Context changed to %s; selecting a new quote.", self.state.category.value)
                self.select_quote()
            return
        if namespace == SYNC:
            self.state.preferences = self._preferences().load()
            if "contextAware" in changes:
                self.refresh_context()
                self.select_quote()
