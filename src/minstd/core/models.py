"""Immutable records shared by the period engine.

Field names are snake_case; ``to_dict``/``from_dict`` translate to the
camelCase shape used by the stores.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

__all__ = [
    "ACTIVE",
    "ARCHIVED",
    "Cadence",
    "CadenceUnit",
    "ClippedRow",
    "DEFAULT_PERIOD_START_PREFERENCE",
    "HistoryRow",
    "LogAggregate",
    "LogSlice",
    "PeriodRollup",
    "PeriodStartPreference",
    "PeriodStatus",
    "PeriodWindow",
    "RangeStats",
    "SessionConfig",
    "Standard",
    "StandardSnapshot",
    "StandardState",
]

CadenceUnit = Literal["day", "week", "month"]
PeriodStatus = Literal["Met", "In Progress", "Missed"]
StandardState = Literal["active", "archived"]

ACTIVE: StandardState = "active"
ARCHIVED: StandardState = "archived"


@dataclass(frozen=True)
class Cadence:
    """Repeating calendar granularity, e.g. ``Cadence(1, "week")``."""

    interval: int
    unit: CadenceUnit

    def to_dict(self) -> dict[str, Any]:
        return {"interval": self.interval, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cadence:
        return cls(interval=data["interval"], unit=data["unit"])


@dataclass(frozen=True)
class PeriodStartPreference:
    """Where a period starts.

    Attributes
    ----------
    mode : str
        ``"default"`` (Monday for weeks) or ``"weekDay"``
    week_start_day : int | None
        ISO weekday used when ``mode == "weekDay"`` (1=Monday, 7=Sunday)
    """

    mode: Literal["default", "weekDay"] = "default"
    week_start_day: int | None = None

    @classmethod
    def week_day(cls, week_start_day: int) -> PeriodStartPreference:
        return cls(mode="weekDay", week_start_day=week_start_day)

    def to_dict(self) -> dict[str, Any]:
        if self.mode == "weekDay":
            return {"mode": self.mode, "weekStartDay": self.week_start_day}
        return {"mode": self.mode}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PeriodStartPreference:
        if not data:
            return DEFAULT_PERIOD_START_PREFERENCE
        return cls(mode=data.get("mode", "default"), week_start_day=data.get("weekStartDay"))


DEFAULT_PERIOD_START_PREFERENCE = PeriodStartPreference()


@dataclass(frozen=True)
class SessionConfig:
    """How a standard's minimum splits into sessions."""

    session_label: str = "session"
    sessions_per_cadence: int = 1
    volume_per_session: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionLabel": self.session_label,
            "sessionsPerCadence": self.sessions_per_cadence,
            "volumePerSession": self.volume_per_session,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionConfig:
        return cls(
            session_label=data.get("sessionLabel", "session"),
            sessions_per_cadence=data.get("sessionsPerCadence", 1),
            volume_per_session=data.get("volumePerSession", 0),
        )


@dataclass(frozen=True)
class StandardSnapshot:
    """Configuration of a standard at the time a period was evaluated.

    ``minimum`` equals ``sessions_per_cadence * volume_per_session``; use
    :meth:`from_sessions` to build a snapshot that satisfies it.
    """

    minimum: float
    unit: str
    cadence: Cadence
    session_config: SessionConfig = field(default_factory=SessionConfig)
    period_start_preference: PeriodStartPreference = DEFAULT_PERIOD_START_PREFERENCE

    @classmethod
    def from_sessions(
        cls,
        unit: str,
        cadence: Cadence,
        session_config: SessionConfig,
        period_start_preference: PeriodStartPreference = DEFAULT_PERIOD_START_PREFERENCE,
    ) -> StandardSnapshot:
        return cls(
            minimum=session_config.sessions_per_cadence * session_config.volume_per_session,
            unit=unit,
            cadence=cadence,
            session_config=session_config,
            period_start_preference=period_start_preference,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minimum": self.minimum,
            "unit": self.unit,
            "cadence": self.cadence.to_dict(),
            "sessionConfig": self.session_config.to_dict(),
            "periodStartPreference": self.period_start_preference.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StandardSnapshot:
        return cls(
            minimum=data["minimum"],
            unit=data["unit"],
            cadence=Cadence.from_dict(data["cadence"]),
            session_config=SessionConfig.from_dict(data.get("sessionConfig") or {}),
            period_start_preference=PeriodStartPreference.from_dict(data.get("periodStartPreference")),
        )


@dataclass(frozen=True)
class Standard:
    """A recurring goal as supplied by the standard store."""

    id: str
    activity_id: str
    snapshot: StandardSnapshot
    state: StandardState = ACTIVE
    archived_at_ms: int | None = None

    @property
    def is_active(self) -> bool:
        """Active and not archived."""
        return self.state == ACTIVE and self.archived_at_ms is None


@dataclass(frozen=True)
class PeriodWindow:
    """One ``[start_ms, end_ms)`` instance of a cadence in a timezone."""

    start_ms: int
    end_ms: int
    period_key: str
    label: str

    def contains(self, timestamp_ms: float) -> bool:
        return self.start_ms <= timestamp_ms < self.end_ms


@dataclass(frozen=True)
class LogSlice:
    """A logged value, already filtered of soft-deleted entries."""

    id: str
    standard_id: str
    value: float
    occurred_at_ms: int


@dataclass(frozen=True)
class LogAggregate:
    """Sum and count of the logs inside a window."""

    total: float = 0
    count: int = 0


@dataclass(frozen=True)
class PeriodRollup:
    """Evaluated totals of a single period."""

    total: float
    current_sessions: int
    target_sessions: int
    status: PeriodStatus
    progress_percent: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HistoryRow:
    """One period of a standard, persisted or synthesised.

    Attributes
    ----------
    reference_timestamp_ms : int | None
        Instant the persisted row was computed for; used to recompute
        its window. ``None`` for rows built in memory.
    """

    standard_id: str
    period_start_ms: int
    period_end_ms: int
    period_label: str
    period_key: str
    standard_snapshot: StandardSnapshot
    total: float
    current_sessions: int
    target_sessions: int
    status: PeriodStatus
    progress_percent: float
    is_current_period: bool = False
    reference_timestamp_ms: int | None = None

    @property
    def dedup_key(self) -> tuple[str, int]:
        return (self.standard_id, self.period_start_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "standardId": self.standard_id,
            "periodStartMs": self.period_start_ms,
            "periodEndMs": self.period_end_ms,
            "periodLabel": self.period_label,
            "periodKey": self.period_key,
            "standardSnapshot": self.standard_snapshot.to_dict(),
            "total": self.total,
            "currentSessions": self.current_sessions,
            "targetSessions": self.target_sessions,
            "status": self.status,
            "progressPercent": self.progress_percent,
            "isCurrentPeriod": self.is_current_period,
        }


@dataclass(frozen=True)
class ClippedRow:
    """A history row restricted to a selected range."""

    row: HistoryRow
    clip_start_ms: int
    clip_end_ms: int
    clipped_total: float
    met: bool


@dataclass(frozen=True)
class RangeStats:
    """Range-accurate totals over ``[range_start_ms, range_end_ms)``.

    Attributes
    ----------
    percent_met : float
        ``met_count / completed_count`` as a percentage (0..100, two
        decimals); 0 when no period in range has completed
    """

    range_start_ms: int
    range_end_ms: int
    rows: tuple[ClippedRow, ...]
    total_value: float
    met_count: int
    completed_count: int
    percent_met: float

    @property
    def has_data(self) -> bool:
        return bool(self.rows) or self.total_value > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rangeStartMs": self.range_start_ms,
            "rangeEndMs": self.range_end_ms,
            "totalValue": self.total_value,
            "metCount": self.met_count,
            "completedCount": self.completed_count,
            "percentMet": self.percent_met,
            "rows": [
                {**clipped.row.to_dict(), "clippedTotal": clipped.clipped_total, "met": clipped.met}
                for clipped in self.rows
            ],
        }
