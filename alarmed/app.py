"""Application runtime: foreground/background lifecycle and the ringing session."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from alarmed.models import Alarm, AppConfig
from alarmed.poller import AlarmPoller
from alarmed.ports import Navigator, Notifier, NullVibrator, SoundPlayer, Vibrator
from alarmed.ringing import RingingSession
from alarmed.state import AppState
from alarmed.timer import Scheduler

log = logging.getLogger(__name__)


class AlarmApp:
    """Wires the poller to ringing sessions and reacts to app lifecycle changes."""

    def __init__(
        self,
        state: AppState,
        *,
        sound: SoundPlayer,
        navigator: Navigator,
        notifier: Notifier,
        vibrator: Optional[Vibrator] = None,
        config: Optional[AppConfig] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.state = state
        self.sound = sound
        self.navigator = navigator
        self.notifier = notifier
        self.vibrator = vibrator or NullVibrator()
        self.config = config or AppConfig()
        self.scheduler = scheduler or Scheduler()
        self._clock = clock
        self._rng = rng
        self.poller = AlarmPoller(state, self.trigger, clock)
        self.session: Optional[RingingSession] = None
        self.foreground = False

    def on_foreground(self) -> None:
        """App became active: check immediately and resume polling."""
        self.foreground = True
        self.poller.start(self.scheduler, self.config.poll_interval_seconds)

    def on_background(self) -> None:
        """App left the foreground: polling stops, so remind the user."""
        self.foreground = False
        self.poller.stop()
        active = self.state.active_alarms
        log.info("App went to background. Active alarms: %d", len(active))
        if active:
            self.notifier.remind_keep_running(len(active))

    def trigger(self, alarm: Alarm) -> Optional[RingingSession]:
        """Start ringing ``alarm`` unless another alarm is already ringing."""
        if self.state.active_alarm_id is not None:
            log.debug("Alarm %s ignored: %s is already ringing.", alarm.id, self.state.active_alarm_id)
            return None
        self.state.set_active_alarm(alarm.id)
        self.navigator.alarm_ringing(alarm.id)
        self.session = RingingSession(
            self.state,
            self.scheduler,
            sound=self.sound,
            vibrator=self.vibrator,
            navigator=self.navigator,
            config=self.config,
            rng=self._rng,
            clock=self._clock,
        )
        self.session.start()
        if self.session.closed:
            self.session = None
        return self.session

    def end_session(self) -> None:
        """Dismiss a completed session, or tear down an unfinished one."""
        if self.session is None:
            return
        if self.session.record is not None:
            self.session.finish()
        else:
            log.info("Ringing session abandoned before completion.")
            self.session.close()
            self.state.set_active_alarm(None)
            self.navigator.session_ended()
        self.session = None

    def shutdown(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None
        self.poller.stop()
        self.scheduler.cancel_all()
