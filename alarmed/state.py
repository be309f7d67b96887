"""Application state: alarms, history, quotes and sound settings.

One ``AppState`` is owned by the running application and handed to the
poller and ringing sessions.  Persistence is optional and injected as a
SQLite connection; when a write fails the in-memory state stays
authoritative and the failure is logged.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from datetime import date
from typing import Any, Optional

from alarmed import db
from alarmed.history import compute_streak, find_alarm
from alarmed.models import (
    Alarm,
    AlarmCreate,
    AlarmHistory,
    AlarmHistoryCreate,
    AlarmUpdate,
)
from alarmed.quotes import DEFAULT_QUOTES

log = logging.getLogger(__name__)

DEFAULT_VOLUME = 1.0


class AppState:
    def __init__(self, conn: Optional[sqlite3.Connection] = None) -> None:
        self._conn = conn
        self.alarms: list[Alarm] = []
        self.history: list[AlarmHistory] = []
        self.active_alarm_id: Optional[int] = None
        self.quotes: list[str] = list(DEFAULT_QUOTES)
        self.volume = DEFAULT_VOLUME
        self.crescendo_enabled = False
        self._next_alarm_id = 1
        if conn is not None:
            self._load()

    # -- persistence --------------------------------------------------------

    def _load(self) -> None:
        try:
            self.alarms = db.list_alarms(self._conn)
            self.history = db.list_history(self._conn)
            self.quotes = db.get_setting(self._conn, "quotes", list(DEFAULT_QUOTES))
            self.volume = float(db.get_setting(self._conn, "volume", DEFAULT_VOLUME))
            self.crescendo_enabled = bool(db.get_setting(self._conn, "crescendo", False))
            self._next_alarm_id = int(db.get_setting(self._conn, "next_alarm_id", 1))
        except sqlite3.Error as exc:
            log.warning("Could not load saved state, starting empty: %s", exc)

    def _persist(self, write: Callable[..., None], *args: Any) -> bool:
        if self._conn is None:
            return True
        try:
            write(self._conn, *args)
        except sqlite3.Error as exc:
            log.warning("Could not save (%s): %s", write.__name__, exc)
            return False
        return True

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- alarms -------------------------------------------------------------

    def _next_id(self, items: list[Any]) -> int:
        return max((item.id for item in items), default=0) + 1

    def _new_alarm_id(self) -> int:
        """Alarm ids are never reused, so history never points at a different alarm."""
        seen = [a.id for a in self.alarms] + [r.alarm_id for r in self.history]
        alarm_id = max(self._next_alarm_id, max(seen, default=0) + 1)
        self._next_alarm_id = alarm_id + 1
        self._persist(db.set_setting, "next_alarm_id", self._next_alarm_id)
        return alarm_id

    def get_alarm(self, alarm_id: Optional[int]) -> Optional[Alarm]:
        if alarm_id is None:
            return None
        return find_alarm(self.alarms, alarm_id)

    @property
    def active_alarms(self) -> list[Alarm]:
        return [a for a in self.alarms if a.is_active]

    def add_alarm(self, alarm_in: AlarmCreate) -> Alarm:
        alarm = Alarm(id=self._new_alarm_id(), **alarm_in.model_dump())
        self.alarms.append(alarm)
        self._persist(db.save_alarm, alarm)
        return alarm

    def update_alarm(self, alarm_id: int, changes: AlarmUpdate) -> Optional[Alarm]:
        current = self.get_alarm(alarm_id)
        if current is None:
            return None
        updated = Alarm(**{**current.model_dump(), **changes.model_dump(exclude_unset=True)})
        self.alarms = [updated if a.id == alarm_id else a for a in self.alarms]
        self._persist(db.save_alarm, updated)
        return updated

    def toggle_alarm(self, alarm_id: int) -> Optional[Alarm]:
        current = self.get_alarm(alarm_id)
        if current is None:
            return None
        return self.update_alarm(alarm_id, AlarmUpdate(is_active=not current.is_active))

    def delete_alarm(self, alarm_id: int) -> bool:
        if self.get_alarm(alarm_id) is None:
            return False
        self.alarms = [a for a in self.alarms if a.id != alarm_id]
        self._persist(db.delete_alarm, alarm_id)
        return True

    def clear_alarms(self) -> None:
        self.alarms = []
        self._persist(db.clear_alarms)

    def set_active_alarm(self, alarm_id: Optional[int]) -> None:
        self.active_alarm_id = alarm_id

    # -- history ------------------------------------------------------------

    def add_history(self, record_in: AlarmHistoryCreate) -> AlarmHistory:
        record = AlarmHistory(id=self._next_id(self.history), **record_in.model_dump())
        self.history.append(record)
        self._persist(db.insert_history, record)
        return record

    def clear_history(self) -> None:
        self.history = []
        self._persist(db.clear_history)

    def streak(self, today: Optional[date] = None) -> int:
        return compute_streak(self.history, today)

    # -- quotes & sound -----------------------------------------------------

    def add_quote(self, quote: str) -> None:
        self.quotes.append(quote)
        self._persist(db.set_setting, "quotes", self.quotes)

    def update_quote(self, index: int, quote: str) -> None:
        """Replace the quote at ``index``. Raises IndexError if out of range."""
        self.quotes[index] = quote
        self._persist(db.set_setting, "quotes", self.quotes)

    def delete_quote(self, index: int) -> str:
        removed = self.quotes.pop(index)
        self._persist(db.set_setting, "quotes", self.quotes)
        return removed

    def set_volume(self, volume: float) -> None:
        if not 0.0 <= volume <= 1.0:
            raise ValueError("volume must be between 0 and 1")
        self.volume = volume
        self._persist(db.set_setting, "volume", volume)

    def set_crescendo_enabled(self, enabled: bool) -> None:
        self.crescendo_enabled = enabled
        self._persist(db.set_setting, "crescendo", enabled)
