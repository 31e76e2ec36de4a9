"""Period status and progress derivation."""

from __future__ import annotations

from ..core.models import PeriodStatus

__all__ = [
    "IN_PROGRESS",
    "MET",
    "MISSED",
    "compute_progress_percent",
    "derive_period_status",
]

MET: PeriodStatus = "Met"
IN_PROGRESS: PeriodStatus = "In Progress"
MISSED: PeriodStatus = "Missed"


def derive_period_status(
    total: float,
    minimum: float,
    now_ms: float,
    period_end_ms: float,
) -> PeriodStatus:
    """Derive the status of a period from its total and boundaries.

    Reaching the minimum means Met even while the period is still open.
    Otherwise the period is Missed once ``now_ms`` reaches the exclusive
    end boundary, and In Progress before it.

    Examples
    --------
    >>> derive_period_status(50, 50, 0, 1)
    'Met'
    >>> derive_period_status(30, 50, 1, 1)
    'Missed'
    """
    if total >= minimum:
        return MET

    if now_ms >= period_end_ms:
        return MISSED

    return IN_PROGRESS


def compute_progress_percent(total: float, minimum: float) -> float:
    """Progress towards ``minimum`` in percent, clamped to 0..100, two decimals.

    A non-positive minimum counts as fully met.
    """
    safe_minimum = max(minimum, 0)
    if safe_minimum == 0:
        ratio = 1.0
    else:
        ratio = min(max(total / safe_minimum, 0.0), 1.0)
    return round(ratio * 100, 2)
