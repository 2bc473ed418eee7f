"""Summary: Tests for the timer queue.

Importance: Debounce and polling depend on correct deadline ordering.
Alternatives: Test timing indirectly through the monitor only.
"""

from __future__ import annotations

import pytest

from quietquotes.scheduler import LogicalClock, TimerQueue, run_forever


def test_timers_run_in_deadline_then_insertion_order() -> None:
    """Summary: Earlier deadlines run first; ties keep scheduling order.

    Importance: Keeps single-threaded callbacks totally ordered.
    Alternatives: Run callbacks in arbitrary order.
    """

    clock = LogicalClock()
    timers = TimerQueue(clock.now)
    calls: list[str] = []
    timers.call_later(2.0, lambda: calls.append("late"))
    timers.call_later(1.0, lambda: calls.append("first"))
    timers.call_later(1.0, lambda: calls.append("second"))
    clock.advance(1.0)
    assert timers.run_due() == 2
    assert calls == ["first", "second"]
    clock.advance(1.0)
    timers.run_due()
    assert calls == ["first", "second", "late"]


def test_cancelled_timers_never_run() -> None:
    """Summary: Cancelled handles are skipped and not counted as pending.

    Importance: Superseded debounced writes must not commit.
    Alternatives: Check a flag inside every callback.
    """

    clock = LogicalClock()
    timers = TimerQueue(clock.now)
    calls: list[int] = []
    handle = timers.call_later(1.0, lambda: calls.append(1))
    timers.call_later(3.0, lambda: calls.append(3))
    handle.cancel()
    assert timers.pending() == 1
    assert timers.next_deadline() == 3.0
    clock.advance(5.0)
    timers.run_due()
    assert calls == [3]


def test_callbacks_may_schedule_due_work() -> None:
    """Summary: Work scheduled with zero delay runs in the same pass.

    Importance: Lets callbacks chain without waiting for another tick.
    Alternatives: Defer new work to the next run.
    """

    clock = LogicalClock()
    timers = TimerQueue(clock.now)
    calls: list[str] = []
    timers.call_later(0.5, lambda: timers.call_later(0, lambda: calls.append("chained")))
    clock.advance(0.5)
    assert timers.run_due() == 2
    assert calls == ["chained"]


def test_logical_clock_rejects_going_backwards() -> None:
    """Summary: Logical time is monotonic.

    Importance: Mirrors monotonic wall-clock guarantees.
    Alternatives: Allow arbitrary clock jumps.
    """

    with pytest.raises(ValueError):
        LogicalClock().advance(-1.0)


def test_run_forever_sleeps_until_deadlines() -> None:
    """Summary: The driver sleeps in bounded steps and fires due timers.

    Importance: Verifies the CLI loop without real waits.
    Alternatives: Use a real clock with short delays.
    """

    clock = LogicalClock()
    timers = TimerQueue(clock.now)
    fired: list[float] = []
    timers.call_later(1.0, lambda: fired.append(clock.now()))
    run_forever(timers, should_stop=lambda: bool(fired), sleep=clock.advance)
    assert fired == [1.0]
