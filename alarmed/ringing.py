"""A ringing alarm: the challenge plus sound, vibration and timers.

The session owns two scheduled events, the per-question countdown and the
crescendo volume ramp.  Both are cancelled on completion and on ``close`` so
no callback can touch the session after it ends.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from alarmed.challenge import Challenge
from alarmed.models import (
    Alarm,
    AlarmHistory,
    AlarmHistoryCreate,
    AppConfig,
    ChallengeState,
    Question,
)
from alarmed.ports import Navigator, SoundError, SoundPlayer, Vibrator
from alarmed.questions import select_questions
from alarmed.quotes import pick_quote
from alarmed.state import AppState
from alarmed.timer import ScheduledEvent, Scheduler

log = logging.getLogger(__name__)

VIBRATION_PATTERN = (1000, 2000, 3000)
CRESCENDO_INTERVAL_SECONDS = 1.0


class RingingSession:
    """Drives one alarm from trigger to dismissal."""

    def __init__(
        self,
        state: AppState,
        scheduler: Scheduler,
        *,
        sound: SoundPlayer,
        vibrator: Vibrator,
        navigator: Navigator,
        config: Optional[AppConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = state
        self.scheduler = scheduler
        self.sound = sound
        self.vibrator = vibrator
        self.navigator = navigator
        self.config = config or AppConfig()
        self._rng = rng
        self._clock = clock

        self.alarm: Optional[Alarm] = None
        self.challenge: Optional[Challenge] = None
        self.started_at: Optional[datetime] = None
        self.record: Optional[AlarmHistory] = None
        self.quote = ""
        self.draft = ""  # what the user has typed so far; auto-submitted on timeout
        self.question_serial = 0  # bumps every time a new question is presented
        self.sound_error = ""
        self.current_volume = 0.0
        self.closed = False

        self._question_timer: Optional[ScheduledEvent] = None
        self._crescendo: Optional[ScheduledEvent] = None
        self._sound_loaded = False
        self._playing = False
        self._vibrating = False

    # -- lifecycle ----------------------------------------------------------

    @property
    def status(self) -> ChallengeState:
        if self.challenge is None:
            return ChallengeState.IDLE if self.closed else ChallengeState.LOADING
        return self.challenge.state

    def start(self) -> ChallengeState:
        """Look up the active alarm and begin ringing.

        If the alarm was deleted in the meantime the session goes straight to
        IDLE and hands control back to the alarm list.
        """
        alarm = self.state.get_alarm(self.state.active_alarm_id)
        if alarm is None:
            log.info("Active alarm %s no longer exists; nothing to ring.", self.state.active_alarm_id)
            self.state.set_active_alarm(None)
            self.closed = True
            self.navigator.session_ended()
            return ChallengeState.IDLE

        self.alarm = alarm
        self.started_at = self._clock()
        self.challenge = Challenge(alarm.question_count, self._draw)
        self.challenge.start()
        log.info(
            "Alarm %s ringing: %d questions drawn, %d correct needed.",
            alarm.id, len(self.challenge.questions), alarm.question_count,
        )
        self.quote = pick_quote(self.state.quotes, self._rng)
        if alarm.vibrate:
            self.vibrator.start(VIBRATION_PATTERN)
            self._vibrating = True
        self._start_sound(alarm)
        self._arm_question_timer()
        return self.challenge.state

    def _draw(self) -> list[Question]:
        if self.alarm is None:
            return []
        return select_questions(
            self.config.question_pool_size,
            self.alarm.question_difficulty,
            self.alarm.question_categories,
            self._rng,
        )

    # -- answering ----------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        return self.challenge.current_question if self.challenge else None

    @property
    def time_left(self) -> float:
        return self.scheduler.remaining(self._question_timer)

    def submit(self, given: object) -> Optional[bool]:
        """Lock in an answer for the current question."""
        if self.challenge is None or self.closed:
            return None
        verdict = self.challenge.submit(given)
        if verdict is not None:
            self._cancel(self._question_timer)
            self._question_timer = None
        return verdict

    def advance(self) -> ChallengeState:
        """Move past a submitted question."""
        if self.challenge is None or self.closed:
            return self.status
        before = (self.challenge.index, self.challenge.correct)
        state = self.challenge.advance()
        if (self.challenge.index, self.challenge.correct) != before:
            self._after_move()
        return state

    def answer(self, given: object) -> bool:
        verdict = self.submit(given)
        self.advance()
        return bool(verdict)

    def snooze(self) -> bool:
        """Start over with a fresh set of questions."""
        if self.challenge is None or self.closed:
            return False
        if not self.challenge.snooze():
            return False
        log.info("Alarm %s snoozed (%d so far).", self.alarm.id, self.challenge.snooze_count)
        self.draft = ""
        self._arm_question_timer()
        return True

    def _on_time_up(self) -> None:
        self._question_timer = None
        if self.challenge is None or self.challenge.state is not ChallengeState.PRESENTING:
            return
        log.debug("Question timed out; submitting %r.", self.draft)
        self.challenge.submit(self.draft)
        self.challenge.advance()
        self._after_move()

    def _after_move(self) -> None:
        self.draft = ""
        if self.challenge.state is ChallengeState.COMPLETED:
            self._complete()
        else:
            self._arm_question_timer()

    def _arm_question_timer(self) -> None:
        self._cancel(self._question_timer)
        self._question_timer = None
        if self.challenge is None or self.challenge.state is not ChallengeState.PRESENTING:
            return
        self.question_serial += 1
        self._question_timer = self.scheduler.schedule_once(
            self._on_time_up, self.config.question_time_limit_seconds
        )

    # -- completion ---------------------------------------------------------

    def _complete(self) -> None:
        if self.record is not None:
            return
        self._silence()
        self.record = self.state.add_history(
            AlarmHistoryCreate(
                alarm_id=self.alarm.id,
                date=self.started_at,
                wake_up_time=self._clock(),
                questions_answered=self.challenge.questions_answered,
                questions_correct=self.challenge.correct,
                snooze_count=self.challenge.snooze_count,
                dismissed=False,
            )
        )
        self.state.set_active_alarm(None)
        log.info(
            "Alarm %s dismissed after %d questions, %d answers in total (%d snoozes).",
            self.alarm.id, self.record.questions_answered, self.challenge.attempts,
            self.record.snooze_count,
        )

    def finish(self) -> Optional[AlarmHistory]:
        """Leave the completed session and return to the alarm list."""
        if self.closed:
            return self.record
        self.close()
        self.navigator.session_ended()
        return self.record

    def close(self) -> None:
        """Tear down: cancel timers and silence everything. Safe to call twice."""
        if self.closed:
            return
        self.closed = True
        self._silence()
        if self._sound_loaded:
            self._sound_call(self.sound.unload)
            self._sound_loaded = False

    # -- sound --------------------------------------------------------------

    def _start_sound(self, alarm: Alarm) -> None:
        target = self.state.volume
        if self.state.crescendo_enabled:
            self.current_volume = min(self.config.crescendo_start_volume, target)
        else:
            self.current_volume = target
        if not self._sound_call(self.sound.load, alarm.sound, self.current_volume, True):
            return
        self._sound_loaded = True
        if not self._sound_call(self.sound.play):
            return
        self._playing = True
        if self.state.crescendo_enabled and self.current_volume < target:
            self._crescendo = self.scheduler.schedule_interval(
                self._ramp_volume, CRESCENDO_INTERVAL_SECONDS
            )

    def _ramp_volume(self) -> None:
        target = self.state.volume
        if self.current_volume >= target:
            self._cancel(self._crescendo)
            self._crescendo = None
            log.debug("Crescendo complete.")
            return
        self.current_volume = min(self.current_volume + self.config.crescendo_step, target)
        self._sound_call(self.sound.set_volume, self.current_volume)

    def _sound_call(self, action: Callable[..., None], *args: object) -> bool:
        try:
            action(*args)
        except SoundError as exc:
            self.sound_error = str(exc)
            log.warning("Alarm sound problem: %s", exc)
            return False
        return True

    def _silence(self) -> None:
        self._cancel(self._question_timer)
        self._question_timer = None
        self._cancel(self._crescendo)
        self._crescendo = None
        if self._playing:
            self._sound_call(self.sound.stop)
            self._playing = False
        if self._vibrating:
            self.vibrator.cancel()
            self._vibrating = False

    @staticmethod
    def _cancel(event: Optional[ScheduledEvent]) -> None:
        if event is not None:
            event.cancel()
