"""Log aggregation over period windows.

Logs are expected to arrive already filtered of soft-deleted entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.models import LogAggregate, PeriodRollup
from ..periods.status import compute_progress_percent, derive_period_status

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.models import LogSlice, PeriodWindow, StandardSnapshot

__all__ = [
    "aggregate_logs",
    "compute_period_rollup",
    "sum_logs_in_range",
]


def aggregate_logs(
    logs: Iterable[LogSlice],
    standard_id: str | None,
    start_ms: float,
    end_ms: float,
) -> LogAggregate:
    """Sum values and count entries of one standard in ``[start_ms, end_ms)``.

    Parameters
    ----------
    logs
        Log slices (any standards)
    standard_id
        Standard to keep; ``None`` keeps every standard
    start_ms
        Inclusive lower bound
    end_ms
        Exclusive upper bound

    Returns
    -------
    LogAggregate
        ``count`` is the number of qualifying entries regardless of value
    """
    total: float = 0
    count = 0

    for log in logs:
        if standard_id is not None and log.standard_id != standard_id:
            continue
        if start_ms <= log.occurred_at_ms < end_ms:
            total += log.value
            count += 1

    return LogAggregate(total=total, count=count)


def sum_logs_in_range(logs: Iterable[LogSlice], start_ms: float, end_ms: float) -> float:
    """Total value of all logs in ``[start_ms, end_ms)``, across standards."""
    return aggregate_logs(logs, None, start_ms, end_ms).total


def compute_period_rollup(
    snapshot: StandardSnapshot,
    standard_id: str,
    logs: Iterable[LogSlice],
    window: PeriodWindow,
    now_ms: float,
    *,
    end_ms: float | None = None,
) -> PeriodRollup:
    """Evaluate one period of a standard.

    Parameters
    ----------
    snapshot
        Standard configuration the period is judged against
    standard_id
        Standard whose logs count
    logs
        Candidate logs
    window
        Period window; its end decides Missed vs In Progress
    now_ms
        Evaluation instant
    end_ms
        Exclusive aggregation bound; defaults to ``window.end_ms``. The
        current period passes ``now_ms`` so future-dated logs are left out.

    Returns
    -------
    PeriodRollup
        Total, sessions, status and progress for the period
    """
    aggregate = aggregate_logs(
        logs,
        standard_id,
        window.start_ms,
        window.end_ms if end_ms is None else end_ms,
    )

    return PeriodRollup(
        total=aggregate.total,
        current_sessions=aggregate.count,
        target_sessions=snapshot.session_config.sessions_per_cadence,
        status=derive_period_status(aggregate.total, snapshot.minimum, now_ms, window.end_ms),
        progress_percent=compute_progress_percent(aggregate.total, snapshot.minimum),
    )
