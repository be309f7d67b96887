"""Tests for the application state object."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from alarmed import db
from alarmed.history import DELETED_ALARM_LABEL, alarm_label
from alarmed.models import (
    AlarmCreate,
    AlarmHistoryCreate,
    AlarmUpdate,
    QuestionCategory,
    RepeatDay,
)
from alarmed.quotes import DEFAULT_QUOTES
from alarmed.state import AppState


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture()
def state(db_path: Path):
    s = AppState(db.get_connection(db_path=db_path))
    yield s
    s.close()


def _reopen(db_path: Path) -> AppState:
    return AppState(db.get_connection(db_path=db_path))


class TestAlarms:
    def test_add_assigns_ids(self, state) -> None:
        a = state.add_alarm(AlarmCreate(time="07:00"))
        b = state.add_alarm(AlarmCreate(time="08:00"))
        assert (a.id, b.id) == (1, 2)
        assert state.get_alarm(2) == b

    def test_get_missing(self, state) -> None:
        assert state.get_alarm(42) is None
        assert state.get_alarm(None) is None

    def test_persisted(self, state, db_path) -> None:
        state.add_alarm(AlarmCreate(time="06:30", label="Run", repeat_days={RepeatDay.SAT}))
        reopened = _reopen(db_path)
        assert reopened.alarms[0].label == "Run"
        assert reopened.alarms[0].repeat_days == {RepeatDay.SAT}
        reopened.close()

    def test_update_merges_only_given_fields(self, state) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00", label="Work"))
        updated = state.update_alarm(alarm.id, AlarmUpdate(time="07:15"))
        assert updated.time == "07:15"
        assert updated.label == "Work"

    def test_update_missing(self, state) -> None:
        assert state.update_alarm(9, AlarmUpdate(label="x")) is None

    def test_toggle(self, state, db_path) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00"))
        assert state.toggle_alarm(alarm.id).is_active is False
        assert state.active_alarms == []
        reopened = _reopen(db_path)
        assert reopened.alarms[0].is_active is False
        reopened.close()

    def test_delete_keeps_history(self, state) -> None:
        alarm = state.add_alarm(AlarmCreate(time="07:00"))
        state.add_history(
            AlarmHistoryCreate(
                alarm_id=alarm.id, date=datetime.now(), questions_answered=3, questions_correct=3
            )
        )
        assert state.delete_alarm(alarm.id)
        assert not state.delete_alarm(alarm.id)
        assert len(state.history) == 1

    def test_clear(self, state, db_path) -> None:
        state.add_alarm(AlarmCreate(time="07:00"))
        state.clear_alarms()
        assert state.alarms == []
        reopened = _reopen(db_path)
        assert reopened.alarms == []
        reopened.close()

    def test_ids_not_reused_while_alarms_exist(self, state) -> None:
        state.add_alarm(AlarmCreate(time="07:00"))
        b = state.add_alarm(AlarmCreate(time="08:00"))
        state.delete_alarm(1)
        c = state.add_alarm(AlarmCreate(time="09:00"))
        assert c.id == b.id + 1

    def test_deleted_newest_id_not_reused(self, state) -> None:
        gym = state.add_alarm(AlarmCreate(time="07:00", label="Gym"))
        state.add_history(
            AlarmHistoryCreate(
                alarm_id=gym.id, date=datetime.now(), questions_answered=3, questions_correct=3
            )
        )
        state.delete_alarm(gym.id)
        dentist = state.add_alarm(AlarmCreate(time="09:00", label="Dentist"))
        assert dentist.id != gym.id
        assert alarm_label(state.history[0], state.alarms) == DELETED_ALARM_LABEL

    def test_id_counter_survives_restart(self, state, db_path) -> None:
        first = state.add_alarm(AlarmCreate(time="07:00"))
        state.delete_alarm(first.id)
        reopened = _reopen(db_path)
        assert reopened.add_alarm(AlarmCreate(time="08:00")).id == first.id + 1
        reopened.close()

    def test_clear_does_not_reset_ids(self, state) -> None:
        state.add_alarm(AlarmCreate(time="07:00"))
        state.add_alarm(AlarmCreate(time="08:00"))
        state.clear_alarms()
        assert state.add_alarm(AlarmCreate(time="09:00")).id == 3


class TestHistory:
    def test_add_and_streak(self, state, db_path) -> None:
        state.add_history(
            AlarmHistoryCreate(
                alarm_id=1,
                date=datetime(2026, 10, 19, 7, 0),
                questions_answered=4,
                questions_correct=3,
                snooze_count=1,
            )
        )
        assert state.history[0].id == 1
        assert state.streak(date(2026, 10, 19)) == 1
        reopened = _reopen(db_path)
        assert reopened.history[0].snooze_count == 1
        reopened.close()

    def test_clear(self, state) -> None:
        state.add_history(
            AlarmHistoryCreate(alarm_id=1, date=datetime.now(), questions_answered=1, questions_correct=1)
        )
        state.clear_history()
        assert state.history == []


class TestSettings:
    def test_defaults(self, state) -> None:
        assert state.quotes == DEFAULT_QUOTES
        assert state.volume == 1.0
        assert state.crescendo_enabled is False
        assert state.active_alarm_id is None

    def test_quotes_crud(self, state, db_path) -> None:
        state.add_quote("Carpe diem.")
        state.update_quote(0, "First!")
        removed = state.delete_quote(1)
        assert removed == DEFAULT_QUOTES[1]
        reopened = _reopen(db_path)
        assert reopened.quotes[0] == "First!"
        assert reopened.quotes[-1] == "Carpe diem."
        assert len(reopened.quotes) == len(DEFAULT_QUOTES)
        reopened.close()

    def test_quote_index_out_of_range(self, state) -> None:
        with pytest.raises(IndexError):
            state.update_quote(99, "nope")

    def test_volume_and_crescendo(self, state, db_path) -> None:
        state.set_volume(0.4)
        state.set_crescendo_enabled(True)
        reopened = _reopen(db_path)
        assert reopened.volume == 0.4
        assert reopened.crescendo_enabled is True
        reopened.close()

    def test_volume_bounds(self, state) -> None:
        with pytest.raises(ValueError):
            state.set_volume(1.5)


class TestWithoutPersistence:
    def test_memory_only(self) -> None:
        s = AppState()
        alarm = s.add_alarm(
            AlarmCreate(time="07:00", question_categories={QuestionCategory.PUZZLE})
        )
        assert s.get_alarm(alarm.id) is not None
        s.close()

    def test_write_failure_keeps_memory_state(self, db_path) -> None:
        conn = db.get_connection(db_path=db_path)
        s = AppState(conn)
        conn.close()  # every write now raises sqlite3.ProgrammingError
        alarm = s.add_alarm(AlarmCreate(time="07:00"))
        s.set_volume(0.2)
        assert s.get_alarm(alarm.id) is not None
        assert s.volume == 0.2
