"""Core records, validation and time helpers."""

from .models import (
    Cadence,
    HistoryRow,
    LogSlice,
    PeriodStartPreference,
    PeriodStatus,
    PeriodWindow,
    SessionConfig,
    Standard,
    StandardSnapshot,
)
from .validation import InvalidInputError

__all__ = [
    "Cadence",
    "HistoryRow",
    "InvalidInputError",
    "LogSlice",
    "PeriodStartPreference",
    "PeriodStatus",
    "PeriodWindow",
    "SessionConfig",
    "Standard",
    "StandardSnapshot",
]
