"""Merging persisted and synthetic history rows."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ..observability.loguru_config import get_logger
from ..periods.time_windows import calculate_period_window

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.models import HistoryRow, PeriodWindow
    from ..core.time import TimezoneLike

__all__ = [
    "merge_activity_history_rows",
    "recalculate_historical_boundaries",
]

log = get_logger("history")


def recalculate_historical_boundaries(row: HistoryRow, timezone: TimezoneLike) -> PeriodWindow:
    """Recompute a persisted row's window with its own snapshot configuration.

    Uses ``reference_timestamp_ms`` when present, otherwise
    ``period_start_ms``, so rows written by older boundary logic line up
    with windows computed today.
    """
    reference_ms = row.reference_timestamp_ms
    if reference_ms is None:
        reference_ms = row.period_start_ms

    snapshot = row.standard_snapshot
    return calculate_period_window(
        reference_ms,
        snapshot.cadence,
        timezone,
        snapshot.period_start_preference,
    )


def merge_activity_history_rows(
    persisted_rows: Iterable[HistoryRow],
    synthetic_rows: Iterable[HistoryRow],
    *,
    timezone: TimezoneLike | None = None,
) -> list[HistoryRow]:
    """Combine persisted and synthetic rows, one row per (standard, period start).

    Synthetic rows are inserted first, so on a key collision the
    synthetic row is kept and the persisted one dropped.

    Parameters
    ----------
    persisted_rows
        Rows of closed periods from the history store
    synthetic_rows
        Current-period rows built from live logs
    timezone
        When given, persisted rows get their boundaries recalculated
        (see :func:`recalculate_historical_boundaries`) before dedup

    Returns
    -------
    list[HistoryRow]
        Rows sorted by ``period_end_ms`` descending; ties keep insertion order
    """
    seen_keys: set[tuple[str, int]] = set()
    merged: list[HistoryRow] = []

    for synthetic in synthetic_rows:
        if synthetic.dedup_key in seen_keys:
            continue
        seen_keys.add(synthetic.dedup_key)
        merged.append(synthetic)

    dropped = 0
    for persisted in persisted_rows:
        if timezone is not None:
            window = recalculate_historical_boundaries(persisted, timezone)
            persisted = replace(
                persisted,
                period_start_ms=window.start_ms,
                period_end_ms=window.end_ms,
                period_label=window.label,
                period_key=window.period_key,
                is_current_period=False,
            )

        if persisted.dedup_key in seen_keys:
            dropped += 1
            continue
        seen_keys.add(persisted.dedup_key)
        merged.append(persisted)

    if dropped:
        log.debug("Dropped duplicate persisted rows", dropped=dropped)

    merged.sort(key=lambda row: row.period_end_ms, reverse=True)
    return merged
