"""Locale-stable timestamp and runtime labels."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ConfigurationError


DEFAULT_TIMEZONE = "Asia/Kolkata"

# Fixed English month names so output does not depend on the host locale.
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@lru_cache(maxsize=16)
def resolve_timezone(name: str = DEFAULT_TIMEZONE) -> tzinfo:
    try:
        return ZoneInfo(str(name or DEFAULT_TIMEZONE))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown display timezone: {name}") from exc


def format_timestamp(
    value: datetime,
    *,
    tz: Union[str, tzinfo] = DEFAULT_TIMEZONE,
    pad_day: bool = False,
) -> str:
    """Render ``value`` as ``"17 October 2026, 09:05 pm"`` in the display timezone."""
    zone = resolve_timezone(tz) if isinstance(tz, str) else tz
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(zone)
    day = f"{local.day:02d}" if pad_day else str(local.day)
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{day} {_MONTHS[local.month - 1]} {local.year}, {hour:02d}:{local.minute:02d} {meridiem}"


def format_duration(duration_sec: Optional[int]) -> str:
    """Label for a finished render, e.g. ``"4 min 00 sec"``."""
    if not duration_sec or duration_sec < 0:
        return "4 min runtime"
    minutes = int(duration_sec) // 60
    seconds = int(duration_sec) % 60
    return f"{minutes} min {seconds:02d} sec"


def format_current_cut(total_duration_sec: int) -> str:
    """Label for the planned cut before rendering; minutes are rounded half up."""
    total = max(0, int(total_duration_sec))
    minutes = int((total / 60) + 0.5)
    return f"{minutes} min {total % 60} sec"
