"""Tests for the application runtime."""

from __future__ import annotations

from datetime import datetime

import pytest

from alarmed.app import AlarmApp
from alarmed.models import AlarmCreate, AppConfig, ChallengeState
from alarmed.state import AppState

NOW = datetime(2026, 10, 19, 7, 0, 5)


@pytest.fixture()
def state() -> AppState:
    return AppState()


@pytest.fixture()
def runner(state, scheduler, sound, vibrator, navigator, notifier) -> AlarmApp:
    return AlarmApp(
        state,
        sound=sound,
        vibrator=vibrator,
        navigator=navigator,
        notifier=notifier,
        config=AppConfig(),
        scheduler=scheduler,
        clock=lambda: NOW,
    )


def _finish(runner: AlarmApp) -> None:
    session = runner.session
    while session.status is ChallengeState.PRESENTING:
        session.answer(str(session.current_question.answer))


class TestForeground:
    def test_foreground_checks_immediately(self, runner, state, navigator) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00", question_count=1))
        runner.on_foreground()
        assert runner.foreground
        assert state.active_alarm_id == alarm.id
        assert navigator.ringing == [alarm.id]
        assert runner.session is not None
        assert runner.session.status is ChallengeState.PRESENTING

    def test_no_alarm_due(self, runner, state) -> None:
        state.add_alarm(AlarmCreate(time="08:00"))
        runner.on_foreground()
        assert runner.session is None
        assert runner.poller.running

    def test_completed_session_does_not_retrigger(self, runner, state, scheduler, clock) -> None:
        state.add_alarm(AlarmCreate(time="07:00", question_count=1))
        runner.on_foreground()
        _finish(runner)
        runner.end_session()
        assert state.active_alarm_id is None
        assert len(state.history) == 1
        clock.advance(10)
        scheduler.tick()
        assert runner.session is None


class TestBackground:
    def test_reminds_when_alarms_active(self, runner, state, notifier) -> None:
        state.add_alarm(AlarmCreate(time="08:00"))
        state.add_alarm(AlarmCreate(time="09:00"))
        runner.on_foreground()
        runner.on_background()
        assert notifier.reminders == [2]
        assert not runner.poller.running

    def test_quiet_without_active_alarms(self, runner, state, notifier) -> None:
        state.add_alarm(AlarmCreate(time="08:00", is_active=False))
        runner.on_background()
        assert notifier.reminders == []


class TestTrigger:
    def test_only_one_alarm_rings(self, runner, state) -> None:
        first = state.add_alarm(AlarmCreate(time="07:00"))
        second = state.add_alarm(AlarmCreate(time="07:00"))
        assert runner.trigger(first) is not None
        assert runner.trigger(second) is None
        assert state.active_alarm_id == first.id

    def test_alarm_deleted_before_ringing(self, runner, state, navigator) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00"))
        state.delete_alarm(alarm.id)
        assert runner.trigger(alarm) is None
        assert state.active_alarm_id is None
        assert navigator.ended == 1

    def test_abandoned_session_frees_the_slot(self, runner, state, navigator, sound) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00"))
        runner.trigger(alarm)
        runner.end_session()
        assert state.active_alarm_id is None
        assert state.history == []
        assert navigator.ended == 1
        assert not sound.playing

    def test_shutdown_cancels_timers(self, runner, state, scheduler) -> None:
        state.add_alarm(AlarmCreate(time="07:00"))
        runner.on_foreground()
        runner.shutdown()
        assert scheduler.pending == 0
        assert runner.session is None
