"""Summary: Timer queue for debounce and polling callbacks.

Importance: Replaces ambient timers with an explicit, clock-injectable queue.
Alternatives: Use threading.Timer or an asyncio event loop.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable


class LogicalClock:
    """Summary: Manually advanced clock for deterministic tests.

    Importance: Verifies debounce timing without wall-clock waits.
    Alternatives: Patch time.monotonic in tests.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now += seconds


@dataclass(order=True)
class TimerHandle:
    """Summary: A scheduled callback that can be cancelled.

    Importance: Lets a newer trigger supersede a pending write.
    Alternatives: Track callbacks by integer ids.
    """

    deadline: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """Summary: Single-threaded queue of deadline-ordered callbacks.

    Importance: Provides the only suspension points of the runtime.
    Alternatives: Spawn one thread per timer.
    """

    def __init__(self, time_source: Callable[[], float] = time.monotonic) -> None:
        self._time_source = time_source
        self._heap: list[TimerHandle] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._time_source()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Summary: Schedule a callback after a delay in seconds.

        Importance: Ties at the same deadline run in scheduling order.
        Alternatives: Schedule at absolute times only.
        """

        handle = TimerHandle(
            deadline=self.now() + max(0.0, delay),
            sequence=next(self._counter),
            callback=callback,
        )
        heapq.heappush(self._heap, handle)
        return handle

    def pending(self) -> int:
        return sum(1 for handle in self._heap if not handle.cancelled)

    def next_deadline(self) -> float | None:
        self._drop_cancelled()
        return self._heap[0].deadline if self._heap else None

    def run_due(self) -> int:
        """Summary: Run every callback whose deadline has passed.

        Importance: Callbacks scheduled while running are honored when due.
        Alternatives: Run only the callbacks present at call time.
        """

        ran = 0
        while True:
            self._drop_cancelled()
            if not self._heap or self._heap[0].deadline > self.now():
                return ran
            handle = heapq.heappop(self._heap)
            handle.callback()
            ran += 1

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)


def run_forever(
    timers: TimerQueue,
    should_stop: Callable[[], bool] = lambda: False,
    sleep: Callable[[float], None] = time.sleep,
    idle_seconds: float = 0.5,
) -> None:
    """Summary: Drive a timer queue against the wall clock.

    Importance: Runs monitors from the CLI without an event loop library.
    Alternatives: Use asyncio with loop.call_later.
    """

    while not should_stop():
        timers.run_due()
        deadline = timers.next_deadline()
        if deadline is None:
            sleep(idle_seconds)
            continue
        sleep(max(0.0, min(idle_seconds, deadline - timers.now())))
