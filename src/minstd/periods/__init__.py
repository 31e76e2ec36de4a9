"""Period windows, statuses and cadence helpers."""

from .cadence import CADENCE_PRESETS, create_custom_cadence, format_standard_summary, get_cadence_preset
from .status import IN_PROGRESS, MET, MISSED, compute_progress_percent, derive_period_status
from .time_windows import (
    calculate_period_window,
    compute_day_window,
    compute_month_window,
    compute_week_window,
    get_week_start,
    next_period_window,
    previous_period_window,
)

__all__ = [
    # Time windows
    "calculate_period_window",
    "compute_day_window",
    "compute_week_window",
    "compute_month_window",
    "get_week_start",
    "next_period_window",
    "previous_period_window",
    # Status
    "MET",
    "IN_PROGRESS",
    "MISSED",
    "derive_period_status",
    "compute_progress_percent",
    # Cadence
    "CADENCE_PRESETS",
    "get_cadence_preset",
    "create_custom_cadence",
    "format_standard_summary",
]
