"""Summary: Context monitor that keeps the persisted category current.

Importance: Connects page content to the shared store without redundant writes.
Alternatives: Classify on demand whenever a consumer needs the category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from quietquotes.classifier import ContextClassifier
from quietquotes.models import CONTEXT_KEY, Category
from quietquotes.scheduler import TimerHandle, TimerQueue
from quietquotes.sources import MAX_BLOCKS, ContentSource, window_text
from quietquotes.storage.kv_store import LOCAL, KeyValueStore, StoreWriteError


logger = logging.getLogger(__name__)

SCAN_INTERVAL_SECONDS = 1.5
DEBOUNCE_SECONDS = 1.0


@dataclass
class MonitorStats:
    """Summary: Counters describing monitor activity.

    Importance: Makes write suppression and failures observable in tests and logs.
    Alternatives: Inspect the store to infer what happened.
    """

    cycles: int = 0
    skipped_empty: int = 0
    skipped_unchanged: int = 0
    classifications: int = 0
    writes: int = 0
    write_failures: int = 0


@dataclass
class ContextMonitor:
    """Summary: Extract, classify, debounce, and persist the chat context.

    Importance: Owns the only writer of the live context signal.
    Alternatives: Write on every classification without debouncing.
    """

    source: ContentSource
    classifier: ContextClassifier
    store: KeyValueStore
    timers: TimerQueue
    debounce_seconds: float = DEBOUNCE_SECONDS
    scan_interval_seconds: float = SCAN_INTERVAL_SECONDS
    max_blocks: int = MAX_BLOCKS
    stats: MonitorStats = field(default_factory=MonitorStats)
    _last_text: str = field(default="", init=False, repr=False)
    _pending_save: TimerHandle | None = field(default=None, init=False, repr=False)
    _pending_scan: TimerHandle | None = field(default=None, init=False, repr=False)
    _poll: TimerHandle | None = field(default=None, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """Summary: Begin monitoring the source.

        Importance: Unrecognized sites leave the monitor idle with no writes.
        Alternatives: Poll every source regardless of host.
        """

        if self.source.site is None:
            logger.info("Site not supported or not detected; monitor stays idle.")
            return False
        logger.info("Hooked into %s.", self.source.site.name)
        self._running = True
        self.process()
        self._schedule_poll()
        return True

    def stop(self) -> None:
        """Summary: Cancel polling and any pending work.

        Importance: A stopped monitor never writes again.
        Alternatives: Let pending writes complete after stop.
        """

        self._running = False
        for handle in (self._pending_save, self._pending_scan, self._poll):
            if handle:
                handle.cancel()
        self._pending_save = self._pending_scan = self._poll = None

    def process(self) -> Category | None:
        """Summary: Run one extract and classify cycle.

        Importance: Skips empty and unchanged text so writes stay minimal.
        Alternatives: Re-classify on every trigger.
        """

        self.stats.cycles += 1
        text = window_text(self.source.recent_blocks(), self.max_blocks)
        if not text:
            self.stats.skipped_empty += 1
            return None
        if text == self._last_text:
            self.stats.skipped_unchanged += 1
            return None
        self._last_text = text
        category = self.classifier.classify(text)
        self.stats.classifications += 1
        self.schedule_save(category)
        return category

    def notify_mutation(self) -> None:
        """Summary: Throttle bursts of source changes into one scan.

        Importance: A scan already scheduled absorbs further mutations.
        Alternatives: Scan synchronously on every mutation.
        """

        if self._pending_scan is not None:
            return
        self._pending_scan = self.timers.call_later(self.scan_interval_seconds, self._scan_now)

    def schedule_save(self, category: Category) -> None:
        """Summary: Debounce persistence of a category.

        Importance: Only the last category within the quiet window is written.
        Alternatives: Queue every category and write them in order.
        """

        if self._pending_save is not None:
            self._pending_save.cancel()
        self._pending_save = self.timers.call_later(
            self.debounce_seconds, lambda: self._save(category)
        )

    def flush(self) -> bool:
        """Summary: Commit a pending debounced write immediately.

        Importance: Lets one-shot callers persist without waiting for the timer.
        Alternatives: Sleep for the debounce window.
        """

        handle = self._pending_save
        if handle is None:
            return False
        handle.cancel()
        handle.callback()
        return True

    def _scan_now(self) -> None:
        self._pending_scan = None
        self.process()

    def _schedule_poll(self) -> None:
        if not self._running:
            return
        self._poll = self.timers.call_later(self.scan_interval_seconds, self._on_poll)

    def _on_poll(self) -> None:
        self._poll = None
        self.process()
        self._schedule_poll()

    def _save(self, category: Category) -> None:
        self._pending_save = None
        try:
            self.store.set(LOCAL, {CONTEXT_KEY: category.value})
        except StoreWriteError as exc:
            self.stats.write_failures += 1
            # Forget the text so the next cycle classifies and writes again.
            self._last_text = ""
            logger.warning("Failed to save category %s: %s", category.value, exc)
            return
        self.stats.writes += 1
        logger.debug("Saved category %s.", category.value)
