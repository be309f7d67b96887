"""Wake-up history helpers and the consecutive-day streak."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from alarmed.models import Alarm, AlarmHistory

DELETED_ALARM_LABEL = "Deleted Alarm"


def sorted_history(history: Iterable[AlarmHistory]) -> list[AlarmHistory]:
    """Newest first."""
    return sorted(history, key=lambda r: r.date, reverse=True)


def one_per_day(history: Iterable[AlarmHistory]) -> dict[date, AlarmHistory]:
    """Collapse records to one per calendar day; a completion beats a miss."""
    by_day: dict[date, AlarmHistory] = {}
    for record in sorted_history(history):
        day = record.date.date()
        kept = by_day.get(day)
        if kept is None or (kept.dismissed and not record.dismissed):
            by_day[day] = record
    return by_day


def compute_streak(history: Iterable[AlarmHistory], today: Optional[date] = None) -> int:
    """Count consecutive non-dismissed wake-ups ending today or the day before.

    Walks backwards from ``today``.  A record on the day being checked counts
    (unless dismissed, which ends the streak) and the check moves one day
    back.  A record exactly one day before the checked day, when the checked
    day itself has none, also counts and the check jumps to it.  Any larger
    gap ends the streak.
    """
    day = today or date.today()
    streak = 0
    for record_day, record in sorted(one_per_day(history).items(), reverse=True):
        if record_day == day:
            if record.dismissed:
                break
            streak += 1
            day -= timedelta(days=1)
        elif (day - record_day).days > 1:
            break
        elif record_day == day - timedelta(days=1):
            if record.dismissed:
                break
            streak += 1
            day = record_day
    return streak


def find_alarm(alarms: Iterable[Alarm], alarm_id: int) -> Optional[Alarm]:
    """History keeps a weak reference: the alarm may be gone."""
    for alarm in alarms:
        if alarm.id == alarm_id:
            return alarm
    return None


def alarm_label(record: AlarmHistory, alarms: Iterable[Alarm]) -> str:
    alarm = find_alarm(alarms, record.alarm_id)
    if alarm is None:
        return DELETED_ALARM_LABEL
    return alarm.label or "Alarm"
