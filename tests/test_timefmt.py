from __future__ import annotations

from datetime import datetime, timezone

import pytest

from utils.exceptions import ConfigurationError
from utils.timefmt import format_current_cut, format_duration, format_timestamp, resolve_timezone


def test_timestamp_uses_display_timezone() -> None:
    value = datetime(2026, 10, 17, 15, 35, tzinfo=timezone.utc)
    assert format_timestamp(value) == "17 October 2026, 09:05 pm"


def test_timestamp_pads_day_for_slides() -> None:
    value = datetime(2026, 1, 2, 0, 0, tzinfo=timezone.utc)
    assert format_timestamp(value, pad_day=True) == "02 January 2026, 05:30 am"


def test_naive_timestamp_is_treated_as_utc() -> None:
    assert format_timestamp(datetime(2026, 6, 1, 6, 30), tz="UTC") == "1 June 2026, 06:30 am"


def test_noon_and_midnight() -> None:
    assert format_timestamp(datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc), tz="UTC").endswith("12:00 pm")
    assert format_timestamp(datetime(2026, 6, 1, 0, 5, tzinfo=timezone.utc), tz="UTC").endswith("12:05 am")


def test_unknown_timezone_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        resolve_timezone("Mars/Olympus_Mons")


def test_duration_labels() -> None:
    assert format_duration(240) == "4 min 00 sec"
    assert format_duration(400) == "6 min 40 sec"
    assert format_duration(None) == "4 min runtime"


def test_current_cut_rounds_minutes() -> None:
    assert format_current_cut(240) == "4 min 0 sec"
    assert format_current_cut(252) == "4 min 12 sec"
    assert format_current_cut(400) == "7 min 40 sec"
