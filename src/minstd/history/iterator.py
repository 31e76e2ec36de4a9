"""Backward period-by-period history reconstruction from raw logs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.models import HistoryRow
from ..core.time import resolve_timezone
from ..core.validation import validate_timestamp_ms
from ..observability.loguru_config import get_logger, log_timing
from ..periods.time_windows import calculate_period_window
from .aggregator import compute_period_rollup

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.models import LogSlice, Standard
    from ..core.time import TimezoneLike

__all__ = ["DEFAULT_MAX_ITERATIONS", "compute_standard_history"]

DEFAULT_MAX_ITERATIONS = 1000

log = get_logger("history")


@log_timing("history")
def compute_standard_history(
    standard: Standard,
    logs: Sequence[LogSlice],
    timezone: TimezoneLike,
    now_ms: float,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> list[HistoryRow]:
    """Compute one row per period that has logs, most recent first.

    Walks backwards from the period containing ``now_ms`` until the
    window ends at or before the earliest log. Periods without logs are
    omitted. Hitting ``max_iterations`` truncates the history without
    raising.

    Parameters
    ----------
    standard
        Standard whose periods are reconstructed
    logs
        Logs of the standard; entries of other standards are ignored
    timezone
        IANA timezone identifier
    now_ms
        Evaluation instant
    max_iterations
        Upper bound on windows visited

    Returns
    -------
    list[HistoryRow]
        Rows ordered most-recent-first

    Raises
    ------
    InvalidInputError
        For an unknown timezone or invalid ``now_ms``, even without logs
    """
    tz = resolve_timezone(timezone)
    validate_timestamp_ms(now_ms)

    if not logs:
        return []

    snapshot = standard.snapshot
    earliest_log_ms = min(entry.occurred_at_ms for entry in logs)

    history: list[HistoryRow] = []
    seen_keys: set[str] = set()
    reference_ms = now_ms
    iterations = 0

    while iterations < max_iterations:
        window = calculate_period_window(
            reference_ms,
            snapshot.cadence,
            tz,
            snapshot.period_start_preference,
        )

        # No earlier window can contain a log
        if window.end_ms <= earliest_log_ms:
            break

        if window.period_key in seen_keys:
            break
        seen_keys.add(window.period_key)

        rollup = compute_period_rollup(snapshot, standard.id, logs, window, now_ms)

        if rollup.current_sessions > 0:
            history.append(
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
                    is_current_period=window.contains(now_ms),
                )
            )

        reference_ms = window.start_ms - 1
        iterations += 1
    else:
        log.warning(
            "History truncated at iteration cap",
            standard_id=standard.id,
            max_iterations=max_iterations,
            rows=len(history),
        )

    log.debug("Computed standard history", standard_id=standard.id, rows=len(history))
    return history
