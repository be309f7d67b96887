"""Day-of-week matching, next-trigger computation and relative time labels."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional

from alarmed.models import RepeatDay

_WEEK: list[RepeatDay] = list(RepeatDay)
_WEEKDAYS: frozenset[RepeatDay] = frozenset(_WEEK[:5])
_WEEKEND: frozenset[RepeatDay] = frozenset(_WEEK[5:])

_REPEAT_PRESETS: dict[str, frozenset[RepeatDay]] = {
    "once": frozenset(),
    "daily": frozenset(_WEEK),
    "weekdays": _WEEKDAYS,
    "weekends": _WEEKEND,
}


def weekday_tag(day: date) -> RepeatDay:
    """Return the repeat tag for a calendar date."""
    return _WEEK[day.weekday()]


def parse_time(alarm_time: str) -> tuple[int, int]:
    """Split an ``HH:MM`` string into hours and minutes."""
    hours, _, minutes = alarm_time.partition(":")
    return int(hours, 10), int(minutes, 10)


def normalize_time(raw: str) -> str:
    """Accept ``7:05`` or ``07:05`` and return zero-padded ``HH:MM``.

    Raises ValueError for anything that is not a valid 24h clock time.
    """
    try:
        hours, minutes = parse_time(raw.strip())
    except ValueError:
        raise ValueError(f"Not a valid time: {raw!r}") from None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Not a valid time: {raw!r}")
    return f"{hours:02d}:{minutes:02d}"


def parse_repeat_days(raw: str) -> set[RepeatDay]:
    """Parse ``mon,wed,fri`` or one of once/daily/weekdays/weekends."""
    text = raw.strip().lower()
    if text in _REPEAT_PRESETS:
        return set(_REPEAT_PRESETS[text])
    days: set[RepeatDay] = set()
    for part in text.split(","):
        part = part.strip()[:3]
        if part:
            days.add(RepeatDay(part))
    return days


def should_ring_today(
    repeat_days: Iterable[RepeatDay], today: Optional[date] = None
) -> bool:
    """True for one-time alarms, or when today's weekday is in ``repeat_days``."""
    days = set(repeat_days)
    if not days:
        return True
    today = today or date.today()
    return weekday_tag(today) in days


def next_trigger(
    alarm_time: str,
    repeat_days: Iterable[RepeatDay],
    now: Optional[datetime] = None,
) -> datetime:
    """Return the next instant, strictly after ``now``, at which the alarm rings."""
    now = now or datetime.now()
    days = set(repeat_days)
    hours, minutes = parse_time(alarm_time)
    candidate = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)

    if not days:
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    if candidate > now and weekday_tag(now.date()) in days:
        return candidate

    for offset in range(1, 8):
        day = candidate + timedelta(days=offset)
        if weekday_tag(day.date()) in days:
            return day
    raise ValueError(f"No matching weekday in {days!r}")  # unreachable for a non-empty set


def format_time_12h(alarm_time: str) -> str:
    """``07:05`` -> ``7:05 AM``."""
    hours, minutes = parse_time(alarm_time)
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{minutes:02d} {period}"


def format_time_from(moment: datetime) -> str:
    """Minute-granular ``HH:MM`` for a datetime."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


def format_relative(target: datetime, now: Optional[datetime] = None) -> str:
    """Human label for how far away ``target`` is ("in 8 hours", "tomorrow at ...")."""
    now = now or datetime.now()
    seconds = (target - now).total_seconds()
    minutes = math.floor(seconds / 60)
    hours = math.floor(seconds / 3600)

    if hours < 1:
        return f"in {minutes} {'minute' if minutes == 1 else 'minutes'}"
    if hours < 24:
        return f"in {hours} {'hour' if hours == 1 else 'hours'}"

    clock = format_time_12h(format_time_from(target))
    end_of_tomorrow = datetime.combine(now.date() + timedelta(days=2), datetime.min.time())
    if target < end_of_tomorrow:
        return f"tomorrow at {clock}"
    return f"{target.strftime('%A')} {clock}"


def format_repeat_days(repeat_days: Iterable[RepeatDay]) -> str:
    """Short description of a repeat set ("Once", "Weekdays", "Mon, Wed")."""
    days = set(repeat_days)
    if not days:
        return "Once"
    if len(days) == 7:
        return "Every day"
    if days == _WEEKDAYS:
        return "Weekdays"
    if days == _WEEKEND:
        return "Weekends"
    return ", ".join(d.value.capitalize() for d in _WEEK if d in days)
