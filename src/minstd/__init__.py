"""Period window and history aggregation engine for recurring numeric goals."""

from .core.models import (
    Cadence,
    HistoryRow,
    LogSlice,
    PeriodStartPreference,
    PeriodWindow,
    RangeStats,
    SessionConfig,
    Standard,
    StandardSnapshot,
)
from .core.validation import InvalidInputError
from .engine import ActivityHistoryEngine, create_engine
from .history import (
    aggregate_logs,
    compute_range_stats,
    compute_standard_history,
    compute_synthetic_current_rows,
    merge_activity_history_rows,
)
from .periods import calculate_period_window, derive_period_status

__version__ = "0.1.0"

__all__ = [
    "ActivityHistoryEngine",
    "Cadence",
    "HistoryRow",
    "InvalidInputError",
    "LogSlice",
    "PeriodStartPreference",
    "PeriodWindow",
    "RangeStats",
    "SessionConfig",
    "Standard",
    "StandardSnapshot",
    "aggregate_logs",
    "calculate_period_window",
    "compute_range_stats",
    "compute_standard_history",
    "compute_synthetic_current_rows",
    "create_engine",
    "derive_period_status",
    "merge_activity_history_rows",
]
