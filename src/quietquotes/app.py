"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and API layers.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quietquotes.background import BadgeUpdater, RecordingBadgeSink, on_installed
from quietquotes.classifier import ContextClassifier
from quietquotes.config import AppConfig
from quietquotes.models import Quote
from quietquotes.monitor import ContextMonitor
from quietquotes.newtab import NewTabView
from quietquotes.preferences import PreferencesService, ShortcutService
from quietquotes.quotes import load_quotes
from quietquotes.scheduler import TimerQueue
from quietquotes.sources import ContentSource
from quietquotes.storage.kv_store import KeyValueStore
from quietquotes.storage.sqlite_store import SqliteStore


@dataclass(frozen=True)
class AppContext:
    """Summary: Shared application context for building components.

    Importance: Reuses the store, classifier, corpus, and timers across components.
    Alternatives: Rebuild dependencies for every request.
    """

    store: KeyValueStore
    classifier: ContextClassifier
    quotes: list[Quote]
    timers: TimerQueue
    config: AppConfig
    preferences: PreferencesService
    shortcuts: ShortcutService
    badge_sink: RecordingBadgeSink
    badge_updater: BadgeUpdater

    def monitor_for(self, source: ContentSource) -> ContextMonitor:
        """Summary: Build a context monitor for a content source.

        Importance: Every monitor shares the store, classifier, and timers.
        Alternatives: Keep a single global monitor.
        """

        return ContextMonitor(
            source=source,
            classifier=self.classifier,
            store=self.store,
            timers=self.timers,
            debounce_seconds=self.config.debounce_seconds,
            scan_interval_seconds=self.config.scan_interval_seconds,
            max_blocks=self.config.max_blocks,
        )

    def new_tab(self) -> NewTabView:
        return NewTabView(store=self.store, quotes=self.quotes)


def build_context(config: AppConfig, store: KeyValueStore | None = None) -> AppContext:
    """Summary: Build shared context from configuration.

    Importance: Provides a single construction path for the application.
    Alternatives: Construct dependencies separately per entrypoint.
    """

    if store is None:
        sqlite_store = SqliteStore(config.db_path)
        sqlite_store.initialize()
        store = sqlite_store
    on_installed(store, reason="startup")
    badge_sink = RecordingBadgeSink()
    badge_updater = BadgeUpdater(store=store, sink=badge_sink)
    badge_updater.start()
    return AppContext(
        store=store,
        classifier=ContextClassifier(min_length=config.min_text_length),
        quotes=load_quotes(Path(config.quotes_path)),
        timers=TimerQueue(),
        config=config,
        preferences=PreferencesService(store=store),
        shortcuts=ShortcutService(store=store),
        badge_sink=badge_sink,
        badge_updater=badge_updater,
    )
