"""Range clipping and range-accurate statistics for merged history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from ..core.models import ClippedRow, RangeStats
from ..core.time import MS_PER_DAY
from ..core.validation import InvalidInputError, validate_timestamp_ms
from ..observability.loguru_config import timing_context
from ..periods.status import IN_PROGRESS
from .aggregator import aggregate_logs, sum_logs_in_range

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.models import HistoryRow, LogSlice

__all__ = [
    "RANGE_LOOKBACK_DAYS",
    "TimeRange",
    "clip_rows_to_range",
    "compute_range_stats",
    "resolve_range_start",
]

TimeRange = Literal["7d", "30d", "90d", "All"]

RANGE_LOOKBACK_DAYS: dict[str, int] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
}


def resolve_range_start(
    selected_range: TimeRange,
    now_ms: int,
    rows: Sequence[HistoryRow] = (),
    logs: Sequence[LogSlice] = (),
) -> int:
    """Effective start of a selected range.

    Fixed ranges look back a whole number of days from ``now_ms``. "All"
    starts at the earliest row start or log, whichever comes first, and
    at ``now_ms`` when there is neither.

    Raises
    ------
    InvalidInputError
        For an unknown range selection
    """
    if selected_range == "All":
        candidates = [row.period_start_ms for row in rows]
        candidates.extend(entry.occurred_at_ms for entry in logs)
        return min(candidates) if candidates else now_ms

    try:
        days = RANGE_LOOKBACK_DAYS[selected_range]
    except KeyError as exc:
        raise InvalidInputError(f"Unknown range: {selected_range!r}") from exc

    return now_ms - days * MS_PER_DAY


def clip_rows_to_range(
    rows: Sequence[HistoryRow],
    logs: Sequence[LogSlice],
    range_start_ms: int,
    now_ms: int,
) -> list[ClippedRow]:
    """Keep rows overlapping ``[range_start_ms, now_ms)`` and re-total them.

    A row overlaps when it starts before ``now_ms`` and ends at or after
    ``range_start_ms``. Its clipped total sums that standard's logs in
    ``[max(row start, range start), min(row end, now))`` and can differ
    from the row's full-period total.
    """
    clipped: list[ClippedRow] = []

    for row in rows:
        if not (row.period_start_ms < now_ms and row.period_end_ms >= range_start_ms):
            continue

        clip_start = max(row.period_start_ms, range_start_ms)
        clip_end = min(row.period_end_ms, now_ms)
        clipped_total = aggregate_logs(logs, row.standard_id, clip_start, clip_end).total

        clipped.append(
            ClippedRow(
                row=row,
                clip_start_ms=clip_start,
                clip_end_ms=clip_end,
                clipped_total=clipped_total,
                met=clipped_total >= row.standard_snapshot.minimum,
            )
        )

    return clipped


def compute_range_stats(
    rows: Sequence[HistoryRow],
    logs: Sequence[LogSlice],
    now_ms: int,
    *,
    selected_range: TimeRange = "All",
    range_start_ms: int | None = None,
) -> RangeStats:
    """Aggregate merged history and raw logs over a selected range.

    Parameters
    ----------
    rows
        Merged history rows (see ``merge_activity_history_rows``)
    logs
        Raw logs of the same standards
    now_ms
        Exclusive end of the range
    selected_range
        Range preset; ignored when ``range_start_ms`` is given
    range_start_ms
        Explicit inclusive start of the range

    Returns
    -------
    RangeStats
        ``total_value`` sums raw logs in range directly; ``percent_met``
        is computed over rows that are not In Progress, judging each by
        its clipped total
    """
    validate_timestamp_ms(now_ms)
    if range_start_ms is None:
        range_start_ms = resolve_range_start(selected_range, now_ms, rows, logs)
    else:
        validate_timestamp_ms(range_start_ms)

    with timing_context("compute_range_stats", component="history", rows=len(rows)) as ctx:
        clipped = clip_rows_to_range(rows, logs, range_start_ms, now_ms)
        completed = [entry for entry in clipped if entry.row.status != IN_PROGRESS]
        met_count = sum(1 for entry in completed if entry.met)
        percent_met = round(met_count / len(completed) * 100, 2) if completed else 0.0
        ctx["included"] = len(clipped)

    return RangeStats(
        range_start_ms=range_start_ms,
        range_end_ms=now_ms,
        rows=tuple(clipped),
        total_value=sum_logs_in_range(logs, range_start_ms, now_ms),
        met_count=met_count,
        completed_count=len(completed),
        percent_met=percent_met,
    )
