"""SQLite persistence layer. All public functions return Pydantic models."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from alarmed.config import get_db_path as _config_get_db_path
from alarmed.models import (
    Alarm,
    AlarmHistory,
    QuestionCategory,
    QuestionDifficulty,
    RepeatDay,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS alarms (
    id                   INTEGER PRIMARY KEY,
    time                 TEXT    NOT NULL,
    label                TEXT    NOT NULL DEFAULT '',
    is_active            INTEGER NOT NULL DEFAULT 1,
    repeat_days          TEXT    NOT NULL DEFAULT '[]',
    question_count       INTEGER NOT NULL,
    question_difficulty  TEXT    NOT NULL,
    question_categories  TEXT    NOT NULL,
    sound                TEXT    NOT NULL DEFAULT 'default',
    vibrate              INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS history (
    id                  INTEGER PRIMARY KEY,
    alarm_id            INTEGER NOT NULL,
    date                TEXT    NOT NULL,
    wake_up_time        TEXT    NOT NULL,
    questions_answered  INTEGER NOT NULL,
    questions_correct   INTEGER NOT NULL,
    snooze_count        INTEGER NOT NULL DEFAULT 0,
    dismissed           INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS settings (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


def _get_db_path() -> Path:
    """Return the database file path from config (or default)."""
    return _config_get_db_path()


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


# ---------------------------------------------------------------------------
# Alarms
# ---------------------------------------------------------------------------


def _row_to_alarm(row: sqlite3.Row) -> Alarm:
    """Convert a database row to an Alarm model."""
    return Alarm(
        id=row["id"],
        time=row["time"],
        label=row["label"],
        is_active=bool(row["is_active"]),
        repeat_days={RepeatDay(d) for d in json.loads(row["repeat_days"])},
        question_count=row["question_count"],
        question_difficulty=QuestionDifficulty(row["question_difficulty"]),
        question_categories={
            QuestionCategory(c) for c in json.loads(row["question_categories"])
        },
        sound=row["sound"],
        vibrate=bool(row["vibrate"]),
    )


def list_alarms(conn: sqlite3.Connection) -> list[Alarm]:
    """All alarms in creation order."""
    rows = conn.execute("SELECT * FROM alarms ORDER BY id ASC").fetchall()
    return [_row_to_alarm(r) for r in rows]


def save_alarm(conn: sqlite3.Connection, alarm: Alarm) -> None:
    """Insert or replace an alarm."""
    conn.execute(
        "INSERT OR REPLACE INTO alarms (id, time, label, is_active, repeat_days, "
        "question_count, question_difficulty, question_categories, sound, vibrate) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            alarm.id,
            alarm.time,
            alarm.label,
            int(alarm.is_active),
            json.dumps(sorted(d.value for d in alarm.repeat_days)),
            alarm.question_count,
            alarm.question_difficulty.value,
            json.dumps(sorted(c.value for c in alarm.question_categories)),
            alarm.sound,
            int(alarm.vibrate),
        ),
    )
    conn.commit()


def delete_alarm(conn: sqlite3.Connection, alarm_id: int) -> None:
    """Delete an alarm. Its history rows are kept."""
    conn.execute("DELETE FROM alarms WHERE id = ?", (alarm_id,))
    conn.commit()


def clear_alarms(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM alarms")
    conn.commit()


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def _row_to_history(row: sqlite3.Row) -> AlarmHistory:
    """Convert a database row to an AlarmHistory model."""
    return AlarmHistory(
        id=row["id"],
        alarm_id=row["alarm_id"],
        date=datetime.fromisoformat(row["date"]),
        wake_up_time=datetime.fromisoformat(row["wake_up_time"]),
        questions_answered=row["questions_answered"],
        questions_correct=row["questions_correct"],
        snooze_count=row["snooze_count"],
        dismissed=bool(row["dismissed"]),
    )


def list_history(conn: sqlite3.Connection) -> list[AlarmHistory]:
    """All history records in the order they were written."""
    rows = conn.execute("SELECT * FROM history ORDER BY id ASC").fetchall()
    return [_row_to_history(r) for r in rows]


def insert_history(conn: sqlite3.Connection, record: AlarmHistory) -> None:
    """Append a history record."""
    conn.execute(
        "INSERT INTO history (id, alarm_id, date, wake_up_time, questions_answered, "
        "questions_correct, snooze_count, dismissed) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            record.id,
            record.alarm_id,
            record.date.isoformat(),
            record.wake_up_time.isoformat(),
            record.questions_answered,
            record.questions_correct,
            record.snooze_count,
            int(record.dismissed),
        ),
    )
    conn.commit()


def clear_history(conn: sqlite3.Connection) -> None:
    conn.execute("DELETE FROM history")
    conn.commit()


# ---------------------------------------------------------------------------
# Settings (quotes, volume, crescendo)
# ---------------------------------------------------------------------------


def get_setting(conn: sqlite3.Connection, key: str, default: Any = None) -> Any:
    """Read a JSON-encoded setting, returning ``default`` if it was never set."""
    row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    if row is None:
        return default
    return json.loads(row["value"])


def set_setting(conn: sqlite3.Connection, key: str, value: Any) -> None:
    conn.execute(
        """INSERT INTO settings (key, value) VALUES (?, ?)
           ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
        (key, json.dumps(value)),
    )
    conn.commit()
