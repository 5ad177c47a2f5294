"""Calendar-day and time-of-day helpers for the booking flow.

Times of day are kept as minutes since midnight everywhere inside the service.
The 12-hour ``hh:mm AM/PM`` label only exists at the API boundary, so every
comparison site works on plain integers. Days are ``date`` values evaluated
against the UTC clock.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer, WithJsonSchema

from mockrise.shared.utils import ensure_utc

MINUTES_PER_DAY = 24 * 60

_TIME_LABEL_RE = re.compile(r"^(0?[1-9]|1[0-2]):([0-5][0-9]) (AM|PM)$", re.IGNORECASE)


def parse_time_label(label: str) -> int:
    """Convert ``"02:30 PM"`` into minutes since midnight (870)."""
    match = _TIME_LABEL_RE.match(label.strip())
    if match is None:
        raise ValueError('Invalid time format. Use format like "09:00 AM" or "02:00 PM"')

    hour = int(match.group(1)) % 12
    if match.group(3).upper() == "PM":
        hour += 12
    return hour * 60 + int(match.group(2))


def format_time_label(minutes: int) -> str:
    """Convert minutes since midnight into the ``hh:mm AM/PM`` label."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Time of day out of range: {minutes}")
    hour, minute = divmod(minutes, 60)
    period = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour:02d}:{minute:02d} {period}"


def parse_calendar_day(value: str | date | datetime) -> date:
    """Normalize client input to a calendar day.

    ``YYYY-MM-DD`` is taken literally so the client's local offset never
    shifts the day; full datetimes are converted to UTC first.
    """
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
    except ValueError as exc:
        raise ValueError("Invalid date format. Expected YYYY-MM-DD") from exc


def minutes_of_day(moment: datetime) -> int:
    """Return UTC minutes since midnight for an instant."""
    moment = ensure_utc(moment)
    return moment.hour * 60 + moment.minute


def is_past_day(day: date, now: datetime) -> bool:
    """Return True when ``day`` is before the current UTC day."""
    return day < ensure_utc(now).date()


def is_bookable_time(day: date, minutes: int, now: datetime, buffer_minutes: int) -> bool:
    """Check that a start time is far enough in the future to be booked.

    Only the current UTC day is constrained: the start must be strictly later
    than ``now + buffer_minutes``.
    """
    now = ensure_utc(now)
    if day != now.date():
        return day > now.date()
    return minutes > minutes_of_day(now) + buffer_minutes


def _coerce_time_label(value: object) -> object:
    if isinstance(value, str):
        return parse_time_label(value)
    return value


def _coerce_calendar_day(value: object) -> object:
    if isinstance(value, str | datetime):
        return parse_calendar_day(value)
    return value


TimeLabel = Annotated[
    int,
    BeforeValidator(_coerce_time_label),
    PlainSerializer(format_time_label, return_type=str),
    WithJsonSchema({"type": "string", "example": "09:00 AM"}),
]
"""Minutes since midnight on the inside, ``hh:mm AM/PM`` on the wire."""

CalendarDay = Annotated[date, BeforeValidator(_coerce_calendar_day)]

DEFAULT_SLOT_TIMES: tuple[int, ...] = tuple(
    parse_time_label(label)
    for label in (
        "09:00 AM",
        "10:00 AM",
        "11:00 AM",
        "12:00 PM",
        "02:00 PM",
        "03:00 PM",
        "04:00 PM",
        "05:00 PM",
    )
)
"""Fixed day-parted catalogue offered for modes without interviewers."""
