"""Stateless service object over the period and history functions.

``ActivityHistoryEngine`` binds a timezone, an iteration cap and a clock
to the pure functions of :mod:`minstd.periods` and :mod:`minstd.history`.
It keeps no state between calls: every method recomputes from its inputs.

Example:
    >>> engine = ActivityHistoryEngine("Europe/Brussels")
    >>> rows = engine.activity_history("act-1", standards, persisted, logs, now_ms=now)
    >>> stats = engine.range_stats(rows, logs, "30d", now_ms=now)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from .core.time import get_current_utc_ms, resolve_timezone
from .core.validation import validate_timestamp_ms
from .history.documents import write_history_row
from .history.iterator import DEFAULT_MAX_ITERATIONS, compute_standard_history
from .history.merge import merge_activity_history_rows
from .history.range_stats import compute_range_stats
from .history.synthetic import compute_synthetic_current_rows
from .observability.loguru_config import configure_loguru, get_logger, timing_context
from .periods.time_windows import calculate_period_window

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .config.settings import Settings
    from .core.models import HistoryRow, LogSlice, PeriodWindow, RangeStats, Standard
    from .history.documents import HistorySource
    from .history.range_stats import TimeRange
    from .stores import HistoryStore, LogStore, StandardStore

__all__ = ["ActivityHistoryEngine", "create_engine"]

log = get_logger("engine")


class ActivityHistoryEngine:
    """Period windows, history and statistics for one timezone."""

    def __init__(
        self,
        timezone: str = "UTC",
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        default_range: TimeRange = "30d",
        clock: Callable[[], int] = get_current_utc_ms,
    ) -> None:
        """Initialize engine.

        Parameters
        ----------
        timezone
            IANA timezone all windows are computed in
        max_iterations
            Iteration cap passed to the history iterator
        default_range
            Range used by :meth:`range_stats` when none is given
        clock
            Returns "now" in epoch milliseconds when a call omits ``now_ms``

        Raises
        ------
        InvalidInputError
            If the timezone is unknown
        """
        self.timezone = timezone
        self._tz = resolve_timezone(timezone)
        self.max_iterations = max_iterations
        self.default_range = default_range
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Callable[[], int] = get_current_utc_ms) -> ActivityHistoryEngine:
        return cls(
            settings.default_timezone,
            max_iterations=settings.history_max_iterations,
            default_range=settings.default_range,  # type: ignore[arg-type]
            clock=clock,
        )

    def _now(self, now_ms: int | None) -> int:
        if now_ms is None:
            return self._clock()
        validate_timestamp_ms(now_ms)
        return now_ms

    def window_for(self, timestamp_ms: int, standard: Standard) -> PeriodWindow:
        """Window of ``standard`` containing ``timestamp_ms``."""
        snapshot = standard.snapshot
        return calculate_period_window(timestamp_ms, snapshot.cadence, self._tz, snapshot.period_start_preference)

    def standard_history(
        self,
        standard: Standard,
        logs: Sequence[LogSlice],
        *,
        now_ms: int | None = None,
    ) -> list[HistoryRow]:
        """Rows of every period of ``standard`` that has logs, most recent first."""
        return compute_standard_history(
            standard,
            logs,
            self._tz,
            self._now(now_ms),
            max_iterations=self.max_iterations,
        )

    def current_rows(
        self,
        standards: Iterable[Standard],
        logs: Sequence[LogSlice],
        *,
        activity_id: str | None = None,
        now_ms: int | None = None,
    ) -> list[HistoryRow]:
        """Synthetic current-period rows of the active standards."""
        return compute_synthetic_current_rows(
            standards,
            logs,
            self._tz,
            self._now(now_ms),
            activity_id=activity_id,
        )

    def activity_history(
        self,
        activity_id: str,
        standards: Iterable[Standard],
        persisted_rows: Iterable[HistoryRow],
        logs: Sequence[LogSlice],
        *,
        now_ms: int | None = None,
        recalculate_boundaries: bool = False,
    ) -> list[HistoryRow]:
        """Persisted history of an activity merged with its open periods.

        Parameters
        ----------
        recalculate_boundaries
            Recompute persisted rows' windows in this engine's timezone
            before deduplication
        """
        now = self._now(now_ms)

        with timing_context("activity_history", component="engine", activity_id=activity_id) as ctx:
            synthetic = self.current_rows(standards, logs, activity_id=activity_id, now_ms=now)
            merged = merge_activity_history_rows(
                persisted_rows,
                synthetic,
                timezone=self._tz if recalculate_boundaries else None,
            )
            ctx["rows"] = len(merged)

        return merged

    def range_stats(
        self,
        rows: Sequence[HistoryRow],
        logs: Sequence[LogSlice],
        selected_range: TimeRange | None = None,
        *,
        now_ms: int | None = None,
    ) -> RangeStats:
        """Range-accurate totals over the selected range ending now."""
        return compute_range_stats(
            rows,
            logs,
            self._now(now_ms),
            selected_range=selected_range or self.default_range,
        )

    def load_activity_history(
        self,
        activity_id: str,
        *,
        standard_store: StandardStore,
        log_store: LogStore,
        history_store: HistoryStore,
        now_ms: int | None = None,
        recalculate_boundaries: bool = False,
    ) -> list[HistoryRow]:
        """Fetch inputs from the stores and return the merged activity history.

        Logs are requested for the current windows only, up to ``now``.
        """
        now = self._now(now_ms)
        standards = list(standard_store.list_standards(activity_id))
        active = [standard for standard in standards if standard.is_active]

        start_ms = min((self.window_for(now, standard).start_ms for standard in active), default=now)
        logs = list(log_store.list_logs([standard.id for standard in active], start_ms, now))
        persisted = list(history_store.list_history(activity_id))

        log.debug(
            "Loaded activity inputs",
            activity_id=activity_id,
            standards=len(standards),
            logs=len(logs),
            persisted=len(persisted),
        )

        return self.activity_history(
            activity_id,
            active,
            persisted,
            logs,
            now_ms=now,
            recalculate_boundaries=recalculate_boundaries,
        )

    def persist_closed_period(
        self,
        history_store: HistoryStore,
        row: HistoryRow,
        activity_id: str,
        *,
        source: HistorySource = "boundary",
        now_ms: int | None = None,
    ) -> str:
        """Upsert a closed-period row; the caller decides when a period closed."""
        return write_history_row(
            history_store,
            row,
            activity_id,
            generated_at_ms=self._now(now_ms),
            source=source,
        )


def create_engine(settings: Settings | None = None, *, configure_logging: bool = False) -> ActivityHistoryEngine:
    """Create an engine from settings, loading them from the environment if needed.

    With ``configure_logging`` the loguru sinks are set up from the
    settings' log level and directory.
    """
    if settings is None:
        from .config.settings import load_settings

        settings = load_settings()

    if configure_logging:
        configure_loguru(log_dir=settings.log_dir, level=settings.log_level)

    return ActivityHistoryEngine.from_settings(settings)
