from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from mockrise.modules.booking.metadata import AiMetadata, LiveMetadata, dump_metadata, linked_slot_id, load_metadata
from mockrise.shared.timeslots import (
    DEFAULT_SLOT_TIMES,
    format_time_label,
    is_bookable_time,
    is_past_day,
    parse_calendar_day,
    parse_time_label,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    ("label", "minutes"),
    [
        ("12:00 AM", 0),
        ("12:30 AM", 30),
        ("09:00 AM", 540),
        ("9:05 am", 545),
        ("12:00 PM", 720),
        ("02:30 PM", 870),
        ("11:59 PM", 1439),
    ],
)
def test_parse_time_label(label: str, minutes: int) -> None:
    assert parse_time_label(label) == minutes


@pytest.mark.parametrize("label", ["13:00 PM", "00:30 AM", "09:00", "9 AM", "09:60 AM", ""])
def test_parse_time_label_rejects_malformed_input(label: str) -> None:
    with pytest.raises(ValueError, match="Invalid time format"):
        parse_time_label(label)


def test_format_time_label_pads_and_wraps_noon_and_midnight() -> None:
    assert format_time_label(0) == "12:00 AM"
    assert format_time_label(540) == "09:00 AM"
    assert format_time_label(720) == "12:00 PM"
    assert format_time_label(870) == "02:30 PM"
    with pytest.raises(ValueError):
        format_time_label(24 * 60)


def test_parse_calendar_day_keeps_plain_dates_literal() -> None:
    assert parse_calendar_day("2026-03-11") == date(2026, 3, 11)
    assert parse_calendar_day(date(2026, 3, 11)) == date(2026, 3, 11)


def test_parse_calendar_day_converts_offset_datetimes_to_utc() -> None:
    assert parse_calendar_day("2026-03-11T23:30:00-05:00") == date(2026, 3, 12)
    assert parse_calendar_day("2026-03-11T10:00:00Z") == date(2026, 3, 11)
    local = datetime(2026, 3, 12, 1, 0, tzinfo=timezone(timedelta(hours=3)))
    assert parse_calendar_day(local) == date(2026, 3, 11)


def test_parse_calendar_day_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Invalid date format"):
        parse_calendar_day("11/03/2026")


def test_bookable_time_applies_buffer_only_to_today() -> None:
    today = NOW.date()

    assert is_bookable_time(today, parse_time_label("12:30 PM"), NOW, 30) is False
    assert is_bookable_time(today, parse_time_label("12:31 PM"), NOW, 30) is True
    assert is_bookable_time(today + timedelta(days=1), 0, NOW, 30) is True
    assert is_bookable_time(today - timedelta(days=1), 1439, NOW, 30) is False
    assert is_past_day(today - timedelta(days=1), NOW) is True
    assert is_past_day(today, NOW) is False


def test_default_catalogue_is_sorted_and_skips_lunch() -> None:
    assert list(DEFAULT_SLOT_TIMES) == sorted(DEFAULT_SLOT_TIMES)
    assert len(DEFAULT_SLOT_TIMES) == 8
    assert parse_time_label("01:00 PM") not in DEFAULT_SLOT_TIMES


def test_metadata_round_trip_and_slot_link() -> None:
    slot_id = uuid4()
    raw = dump_metadata(LiveMetadata(slot_id=slot_id))

    assert raw == {"type": "live_mock_interview", "slotId": str(slot_id)}
    assert linked_slot_id(raw) == slot_id
    assert linked_slot_id(dump_metadata(AiMetadata(session_id="ai_1_abc"))) is None
    assert linked_slot_id(None) is None
    assert load_metadata({}) is None


def test_metadata_rejects_unknown_variant() -> None:
    with pytest.raises(ValidationError):
        load_metadata({"type": "unknown"})
