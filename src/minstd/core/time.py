"""Millisecond timestamp and timezone utilities.

Provides consistent timezone handling for the period engine with:
- UTC discipline: every instant is an integer count of epoch milliseconds
- ISO-8601 formatting/parsing for persisted documents
- Local wall-clock resolution with DST awareness
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Union

import pytz

from .validation import InvalidInputError, validate_timestamp_ms, validate_timezone

__all__ = [
    "EPOCH",
    "MS_PER_DAY",
    "TimezoneLike",
    "format_utc_iso8601",
    "get_current_utc_ms",
    "is_dst_transition_day",
    "local_midnight_ms",
    "localize_ms",
    "ms_to_utc",
    "parse_utc_iso8601_ms",
    "resolve_timezone",
    "utc_to_ms",
]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MS_PER_DAY = 24 * 60 * 60 * 1000

TimezoneLike = Union[str, pytz.BaseTzInfo]

_ONE_MS = timedelta(milliseconds=1)


def resolve_timezone(tz: TimezoneLike) -> pytz.BaseTzInfo:
    """Return a pytz timezone for a name or an already-resolved zone."""
    if isinstance(tz, pytz.BaseTzInfo):
        return tz
    return validate_timezone(tz)


def ms_to_utc(timestamp_ms: float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime.

    Example
    -------
    >>> ms_to_utc(0).isoformat()
    '1970-01-01T00:00:00+00:00'
    """
    validate_timestamp_ms(timestamp_ms)
    return EPOCH + timedelta(milliseconds=timestamp_ms)


def utc_to_ms(dt: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds.

    Naive datetimes are assumed to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // _ONE_MS


def localize_ms(timestamp_ms: float, tz: TimezoneLike) -> datetime:
    """Express an instant as a local wall-clock datetime in ``tz``.

    Example
    -------
    >>> localize_ms(0, "Europe/Brussels").hour
    1
    """
    zone = resolve_timezone(tz)
    return ms_to_utc(timestamp_ms).astimezone(zone)


def local_midnight_ms(local_date: date, tz: TimezoneLike) -> int:
    """Instant at which ``local_date`` begins on the wall clock of ``tz``.

    When midnight does not exist (clocks jump forward at 00:00) the day
    begins at the transition instant. When midnight occurs twice the
    first occurrence wins. Either way the previous day ends exactly
    where this one begins.
    """
    zone = resolve_timezone(tz)
    naive = datetime(local_date.year, local_date.month, local_date.day)

    try:
        local = zone.localize(naive, is_dst=None)
    except pytz.AmbiguousTimeError:
        local = zone.localize(naive, is_dst=True)
    except pytz.NonExistentTimeError:
        local = zone.localize(naive, is_dst=False)

    return utc_to_ms(local)


def get_current_utc_ms() -> int:
    """Current wall time as epoch milliseconds."""
    return utc_to_ms(datetime.now(timezone.utc))


def format_utc_iso8601(timestamp_ms: float) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string.

    Example
    -------
    >>> format_utc_iso8601(1765463400000)
    '2025-12-11T14:30:00+00:00'
    """
    return ms_to_utc(timestamp_ms).isoformat()


def parse_utc_iso8601_ms(iso_string: str) -> int:
    """Parse an ISO-8601 string into epoch milliseconds.

    A trailing ``Z`` is accepted; strings without an offset are taken as UTC.

    Raises
    ------
    InvalidInputError
        If the string is not valid ISO-8601
    """
    try:
        dt = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as exc:
        raise InvalidInputError(f"Cannot parse ISO-8601 timestamp: {iso_string!r}") from exc

    return utc_to_ms(dt)


def is_dst_transition_day(local_date: date, tz: TimezoneLike) -> bool:
    """Check whether the UTC offset of ``tz`` changes during ``local_date``.

    Example
    -------
    >>> is_dst_transition_day(date(2025, 3, 9), "America/New_York")
    True
    >>> is_dst_transition_day(date(2025, 10, 8), "America/New_York")
    False
    """
    start_ms = local_midnight_ms(local_date, tz)
    end_ms = local_midnight_ms(local_date + timedelta(days=1), tz)
    return end_ms - start_ms != MS_PER_DAY
