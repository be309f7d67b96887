"""Single-threaded cooperative scheduler for polls, countdowns and volume ramps.

Callbacks never run concurrently with each other: everything happens inside
``Scheduler.tick`` on the caller's thread, so state changes made by a callback
are atomic with respect to the rest of the application.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Optional

log = logging.getLogger(__name__)


class ScheduledEvent:
    """Handle for a pending one-shot or repeating callback."""

    def __init__(
        self,
        callback: Callable[[], None],
        due: float,
        interval: Optional[float] = None,
    ) -> None:
        self.callback = callback
        self.due = due
        self.interval = interval
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Run callbacks at or after their due time, in due-time order."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._events: list[ScheduledEvent] = []

    def now(self) -> float:
        return self._clock()

    def schedule_once(self, callback: Callable[[], None], delay: float) -> ScheduledEvent:
        event = ScheduledEvent(callback, self.now() + delay)
        self._events.append(event)
        return event

    def schedule_interval(
        self, callback: Callable[[], None], interval: float
    ) -> ScheduledEvent:
        if interval <= 0:
            raise ValueError("interval must be positive")
        event = ScheduledEvent(callback, self.now() + interval, interval)
        self._events.append(event)
        return event

    def remaining(self, event: Optional[ScheduledEvent]) -> float:
        """Seconds until ``event`` fires (0 if it is gone or overdue)."""
        if event is None or event.cancelled:
            return 0.0
        return max(0.0, event.due - self.now())

    @property
    def pending(self) -> int:
        return sum(1 for e in self._events if not e.cancelled)

    def tick(self) -> int:
        """Run every event that is due. Returns the number of callbacks run.

        Events scheduled by a callback during this tick wait for the next one.
        """
        now = self.now()
        self._events = [e for e in self._events if not e.cancelled]
        due = sorted((e for e in self._events if e.due <= now), key=lambda e: e.due)
        ran = 0
        for event in due:
            if event.cancelled:
                continue
            if event.repeating:
                # Skip missed beats instead of replaying them in a burst.
                event.due += event.interval  # type: ignore[operator]
                if event.due <= now:
                    event.due = now + event.interval  # type: ignore[operator]
            else:
                event.cancelled = True
            event.callback()
            ran += 1
        self._events = [e for e in self._events if not e.cancelled]
        return ran

    def cancel_all(self) -> None:
        for event in self._events:
            event.cancel()
        self._events.clear()

    def run_forever(
        self,
        should_stop: Callable[[], bool] = lambda: False,
        resolution: float = 1.0,
    ) -> None:
        """Tick until ``should_stop`` returns True or the user hits Ctrl-C."""
        try:
            while not should_stop():
                self.tick()
                time.sleep(resolution)
        except KeyboardInterrupt:
            log.info("Scheduler loop interrupted.")
