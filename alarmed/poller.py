"""Foreground alarm trigger poller.

Alarms only fire while the process is alive and in the foreground: the
poller checks on a fixed cadence and once more whenever the app comes back
to the foreground.  There is no background wake-up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Optional

from alarmed.models import Alarm
from alarmed.schedule import format_time_from, should_ring_today
from alarmed.state import AppState
from alarmed.timer import ScheduledEvent, Scheduler

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 10


class AlarmPoller:
    """Scans active alarms and triggers at most one per tick."""

    def __init__(
        self,
        state: AppState,
        on_trigger: Callable[[Alarm], None],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.on_trigger = on_trigger
        self._clock = clock
        self._event: Optional[ScheduledEvent] = None
        # alarm id -> (date, "HH:MM") it last fired for
        self._fired: dict[int, tuple[date, str]] = {}

    @property
    def running(self) -> bool:
        return self._event is not None and not self._event.cancelled

    def check(self, now: Optional[datetime] = None) -> Optional[Alarm]:
        """Trigger the first due alarm, if any. Returns the alarm triggered."""
        if self.state.active_alarm_id is not None:
            return None
        now = now or self._clock()
        minute = format_time_from(now)
        slot = (now.date(), minute)
        for alarm in self.state.active_alarms:
            if alarm.time != minute or not should_ring_today(alarm.repeat_days, now.date()):
                continue
            if self._fired.get(alarm.id) == slot:
                continue
            self._fired[alarm.id] = slot
            log.info("Alarm %s triggered at %s.", alarm.id, minute)
            self.on_trigger(alarm)
            return alarm
        return None

    def start(
        self, scheduler: Scheduler, interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    ) -> None:
        """Check right away, then every ``interval`` seconds."""
        self.stop()
        self._event = scheduler.schedule_interval(self.check, interval)
        self.check()

    def stop(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None
