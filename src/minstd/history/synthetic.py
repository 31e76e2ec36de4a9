"""Synthetic rows for the still-open current period."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.models import HistoryRow, PeriodRollup
from ..observability.loguru_config import get_logger
from ..periods.time_windows import calculate_period_window
from .aggregator import compute_period_rollup

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..core.models import LogSlice, PeriodWindow, Standard
    from ..core.time import TimezoneLike

__all__ = [
    "CurrentProgress",
    "build_current_progress",
    "compute_synthetic_current_rows",
]

log = get_logger("history")


def compute_synthetic_current_rows(
    standards: Iterable[Standard],
    logs: Sequence[LogSlice],
    timezone: TimezoneLike,
    now_ms: float,
    *,
    activity_id: str | None = None,
) -> list[HistoryRow]:
    """Build one current-period row per active, non-archived standard.

    Logs are aggregated over ``[window.start_ms, now_ms)`` so entries
    dated later in the same calendar window are not counted yet.

    Parameters
    ----------
    standards
        Candidate standards; inactive or archived ones are skipped
    logs
        Logs of the candidate standards
    timezone
        IANA timezone identifier
    now_ms
        Evaluation instant
    activity_id
        When given, only standards of this activity are used

    Returns
    -------
    list[HistoryRow]
        Rows with ``is_current_period=True``, in input order
    """
    rows: list[HistoryRow] = []

    for standard in standards:
        if not standard.is_active:
            continue
        if activity_id is not None and standard.activity_id != activity_id:
            continue

        snapshot = standard.snapshot
        window = calculate_period_window(
            now_ms,
            snapshot.cadence,
            timezone,
            snapshot.period_start_preference,
        )
        rollup = compute_period_rollup(snapshot, standard.id, logs, window, now_ms, end_ms=now_ms)

        rows.append(
            HistoryRow(
                standard_id=standard.id,
                period_start_ms=window.start_ms,
                period_end_ms=window.end_ms,
                period_label=window.label,
                period_key=window.period_key,
                standard_snapshot=snapshot,
                total=rollup.total,
                current_sessions=rollup.current_sessions,
                target_sessions=rollup.target_sessions,
                status=rollup.status,
                progress_percent=rollup.progress_percent,
                is_current_period=True,
            )
        )

    log.debug("Built synthetic current rows", activity_id=activity_id, rows=len(rows))
    return rows


class CurrentProgress:
    """Progress of a standard in the window containing the reference instant."""

    def __init__(self, standard_id: str, window: PeriodWindow, rollup: PeriodRollup) -> None:
        self.standard_id = standard_id
        self.window = window
        self.rollup = rollup

    @property
    def period_label(self) -> str:
        return self.window.label

    def to_dict(self) -> dict:
        return {
            "standardId": self.standard_id,
            "periodLabel": self.window.label,
            "periodStartMs": self.window.start_ms,
            "periodEndMs": self.window.end_ms,
            "currentTotal": self.rollup.total,
            "currentSessions": self.rollup.current_sessions,
            "targetSessions": self.rollup.target_sessions,
            "status": self.rollup.status,
            "progressPercent": self.rollup.progress_percent,
        }


def build_current_progress(
    standards: Iterable[Standard],
    logs: Sequence[LogSlice],
    timezone: TimezoneLike,
    now_ms: float,
    *,
    window_reference_ms: float | None = None,
) -> dict[str, CurrentProgress]:
    """Progress per standard over the full window containing the reference.

    Unlike :func:`compute_synthetic_current_rows` this counts the whole
    window ``[start, end)`` and does not filter on active state; it backs
    dashboard cards that may look at a different period than ``now``.
    """
    reference_ms = now_ms if window_reference_ms is None else window_reference_ms
    progress: dict[str, CurrentProgress] = {}

    for standard in standards:
        snapshot = standard.snapshot
        window = calculate_period_window(
            reference_ms,
            snapshot.cadence,
            timezone,
            snapshot.period_start_preference,
        )
        rollup = compute_period_rollup(snapshot, standard.id, logs, window, now_ms)
        progress[standard.id] = CurrentProgress(standard.id, window, rollup)

    return progress
