"""Period window calculations with DST awareness.

Compute ``[start, end)`` windows from the local wall-clock calendar of an
IANA timezone (day, week, month). Boundaries are local midnights, so a
"day" may last 23, 24 or 25 hours of real time.
"""

from __future__ import annotations

from datetime import date, timedelta

from ..core.models import DEFAULT_PERIOD_START_PREFERENCE, Cadence, PeriodStartPreference, PeriodWindow
from ..core.time import TimezoneLike, local_midnight_ms, localize_ms, resolve_timezone
from ..core.validation import (
    InvalidInputError,
    validate_cadence,
    validate_period_start_preference,
    validate_timestamp_ms,
)

__all__ = [
    "calculate_period_window",
    "compute_day_window",
    "compute_month_window",
    "compute_week_window",
    "get_week_start",
    "next_period_window",
    "previous_period_window",
]

DEFAULT_WEEK_START_DAY = 1  # Monday


def _long_date(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def get_week_start(day: date, start_on: int = DEFAULT_WEEK_START_DAY) -> date:
    """Get the most recent ``start_on`` weekday at or before ``day``.

    Parameters
    ----------
    day
        Local calendar date
    start_on
        ISO weekday the week starts on (1=Monday, 7=Sunday)

    Returns
    -------
    date
        Start of the week containing ``day``
    """
    days_since_start = (day.isoweekday() - start_on) % 7
    return day - timedelta(days=days_since_start)


def compute_day_window(local_date: date, tz: TimezoneLike) -> PeriodWindow:
    """Window for one local day.

    Examples
    --------
    >>> window = compute_day_window(date(2025, 3, 9), "America/New_York")
    >>> (window.end_ms - window.start_ms) // 3_600_000  # spring forward
    23
    """
    return PeriodWindow(
        start_ms=local_midnight_ms(local_date, tz),
        end_ms=local_midnight_ms(local_date + timedelta(days=1), tz),
        period_key=local_date.isoformat(),
        label=_long_date(local_date),
    )


def compute_week_window(
    local_date: date,
    tz: TimezoneLike,
    start_on: int = DEFAULT_WEEK_START_DAY,
) -> PeriodWindow:
    """Window for the local week containing ``local_date``.

    The label shows the last day of the window (``end - 1 day``) because
    the end boundary is exclusive.
    """
    week_start = get_week_start(local_date, start_on=start_on)
    week_end = week_start + timedelta(days=7)

    return PeriodWindow(
        start_ms=local_midnight_ms(week_start, tz),
        end_ms=local_midnight_ms(week_end, tz),
        period_key=week_start.isoformat(),
        label=f"{_long_date(week_start)} – {_long_date(week_end - timedelta(days=1))}",
    )


def compute_month_window(local_date: date, tz: TimezoneLike) -> PeriodWindow:
    """Window for the local calendar month containing ``local_date``."""
    month_start = local_date.replace(day=1)

    if month_start.month == 12:
        next_month = date(month_start.year + 1, 1, 1)
    else:
        next_month = date(month_start.year, month_start.month + 1, 1)

    return PeriodWindow(
        start_ms=local_midnight_ms(month_start, tz),
        end_ms=local_midnight_ms(next_month, tz),
        period_key=f"{month_start.year:04d}-{month_start.month:02d}",
        label=f"{month_start:%B} {month_start.year}",
    )


def calculate_period_window(
    timestamp_ms: float,
    cadence: Cadence,
    timezone: TimezoneLike,
    period_start_preference: PeriodStartPreference | None = None,
) -> PeriodWindow:
    """Compute the period window containing an instant.

    Parameters
    ----------
    timestamp_ms
        Instant in epoch milliseconds
    cadence
        Cadence of the standard. Windows are one base unit long; the
        interval is validated but does not group windows.
    timezone
        IANA timezone identifier (e.g. "America/New_York")
    period_start_preference
        Week anchor; ignored for day and month cadences

    Returns
    -------
    PeriodWindow
        Window with inclusive start, exclusive end, key and label

    Raises
    ------
    InvalidInputError
        For a non-finite timestamp, unknown timezone, or unsupported cadence

    Examples
    --------
    >>> window = calculate_period_window(1765463400000, Cadence(1, "day"), "UTC")
    >>> window.period_key, window.label
    ('2025-12-11', 'December 11, 2025')
    """
    validate_timestamp_ms(timestamp_ms)
    validate_cadence(cadence)
    preference = period_start_preference or DEFAULT_PERIOD_START_PREFERENCE
    validate_period_start_preference(preference)

    tz = resolve_timezone(timezone)

    try:
        local_date = localize_ms(timestamp_ms, tz).date()

        if cadence.unit == "day":
            return compute_day_window(local_date, tz)
        elif cadence.unit == "week":
            start_on = preference.week_start_day if preference.mode == "weekDay" else DEFAULT_WEEK_START_DAY
            return compute_week_window(local_date, tz, start_on=start_on)
        elif cadence.unit == "month":
            return compute_month_window(local_date, tz)
        else:
            raise InvalidInputError(f"Unsupported cadence unit: {cadence.unit}")
    except InvalidInputError:
        raise
    except (OverflowError, ValueError) as exc:
        raise InvalidInputError(f"Period window out of supported range for timestamp {timestamp_ms!r}") from exc


def next_period_window(
    window: PeriodWindow,
    cadence: Cadence,
    timezone: TimezoneLike,
    period_start_preference: PeriodStartPreference | None = None,
) -> PeriodWindow:
    """Window immediately following ``window``."""
    return calculate_period_window(window.end_ms, cadence, timezone, period_start_preference)


def previous_period_window(
    window: PeriodWindow,
    cadence: Cadence,
    timezone: TimezoneLike,
    period_start_preference: PeriodStartPreference | None = None,
) -> PeriodWindow:
    """Window immediately preceding ``window``."""
    return calculate_period_window(window.start_ms - 1, cadence, timezone, period_start_preference)
