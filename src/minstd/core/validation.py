"""Input validation for the period engine.

Invalid inputs are rejected synchronously with ``InvalidInputError``;
nothing is defaulted silently and nothing is retried.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import pytz

if TYPE_CHECKING:
    from .models import Cadence, PeriodStartPreference

__all__ = [
    "CADENCE_UNITS",
    "InvalidInputError",
    "ValidationResult",
    "check_cadence",
    "validate_cadence",
    "validate_period_start_preference",
    "validate_timestamp_ms",
    "validate_timezone",
]

CADENCE_UNITS = ("day", "week", "month")

# datetime cannot represent dates outside years 1..9999. Accepted instants
# keep two months of slack on either side so that the day, week and month
# windows around them, and pytz localisation of their boundaries, stay in range.
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MIN_TIMESTAMP_MS = (datetime(1, 3, 1, tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
_MAX_TIMESTAMP_MS = (datetime(9999, 11, 1, tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)


class InvalidInputError(ValueError):
    """Raised when a timestamp, timezone, cadence or preference is unusable."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class ValidationResult:
    """Result of a non-raising validation."""

    def __init__(self, valid: bool, errors: list[str] | None = None) -> None:
        self.valid = valid
        self.errors = errors or []

    def __bool__(self) -> bool:
        return self.valid

    def __str__(self) -> str:
        if self.valid:
            return "Valid"
        return f"Invalid: {'; '.join(self.errors)}"

    def add_error(self, error: str) -> None:
        self.errors.append(error)
        self.valid = False

    @property
    def error(self) -> str | None:
        """First error message, if any."""
        return self.errors[0] if self.errors else None


def validate_timestamp_ms(timestamp_ms: Any) -> None:
    """Ensure a millisecond timestamp is a finite, representable number.

    Raises
    ------
    InvalidInputError
        If the value is not a number, is NaN/infinite, or falls outside
        the range a calendar date can represent
    """
    if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)):
        raise InvalidInputError(f"Timestamp must be a number, got {type(timestamp_ms).__name__}")

    if not math.isfinite(timestamp_ms):
        raise InvalidInputError(f"Timestamp must be finite, got {timestamp_ms!r}")

    if not _MIN_TIMESTAMP_MS <= timestamp_ms <= _MAX_TIMESTAMP_MS:
        raise InvalidInputError(f"Timestamp out of supported range: {timestamp_ms!r}")


def validate_timezone(timezone_name: Any) -> pytz.BaseTzInfo:
    """Resolve an IANA timezone identifier.

    Returns
    -------
    pytz.BaseTzInfo
        Resolved timezone

    Raises
    ------
    InvalidInputError
        If the identifier is empty, not a string, or unknown
    """
    if not isinstance(timezone_name, str) or not timezone_name.strip():
        raise InvalidInputError(f"Invalid timezone: {timezone_name!r}")

    try:
        return pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError as exc:
        raise InvalidInputError(f"Invalid timezone: {timezone_name}") from exc


def check_cadence(interval: Any, unit: Any) -> ValidationResult:
    """Check a cadence interval/unit pair without raising."""
    result = ValidationResult(valid=True)

    if interval is None or unit is None:
        result.add_error("Interval and unit are required")
        return result

    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        result.add_error("Interval must be a positive integer")

    if unit not in CADENCE_UNITS:
        result.add_error(f"Unit must be one of: {', '.join(CADENCE_UNITS)} (got {unit!r})")

    return result


def validate_cadence(cadence: Cadence) -> None:
    """Raise ``InvalidInputError`` unless ``cadence`` is usable for windowing."""
    result = check_cadence(getattr(cadence, "interval", None), getattr(cadence, "unit", None))
    if not result:
        raise InvalidInputError(f"Unsupported cadence: {result.error}", result.errors)


def validate_period_start_preference(preference: PeriodStartPreference) -> None:
    """Raise ``InvalidInputError`` for an unknown mode or weekday."""
    if preference.mode == "default":
        return

    if preference.mode != "weekDay":
        raise InvalidInputError(f"Unknown period start mode: {preference.mode!r}")

    day = preference.week_start_day
    if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 7:
        raise InvalidInputError(f"weekStartDay must be an integer in 1..7, got {day!r}")
