"""Tests for ActivityHistoryEngine."""

import pytest

from minstd.config.settings import Settings
from minstd.core.time import MS_PER_DAY
from minstd.core.time import parse_utc_iso8601_ms as ms
from minstd.core.validation import InvalidInputError
from minstd.engine import ActivityHistoryEngine, create_engine

NOW = ms("2025-12-10T14:30:00Z")


@pytest.fixture
def engine():
    return ActivityHistoryEngine("UTC", clock=lambda: NOW)


def test_unknown_timezone_rejected():
    with pytest.raises(InvalidInputError, match="Invalid timezone"):
        ActivityHistoryEngine("Mars/Olympus")


def test_clock_supplies_now(engine, make_standard, make_log):
    logs = [make_log(ms("2025-12-09T08:00:00Z"))]

    rows = engine.standard_history(make_standard(), logs)

    assert rows[0].is_current_period is True
    assert rows[0].status == "In Progress"


def test_explicit_now_overrides_clock(engine, make_standard, make_log):
    logs = [make_log(ms("2025-12-09T08:00:00Z"))]

    rows = engine.standard_history(make_standard(), logs, now_ms=ms("2025-12-20T00:00:00Z"))

    assert rows[0].is_current_period is False
    assert rows[0].status == "Missed"


def test_invalid_now_rejected(engine, make_standard):
    with pytest.raises(InvalidInputError):
        engine.standard_history(make_standard(), [], now_ms=float("inf"))


def test_window_for_uses_engine_timezone(make_standard):
    engine = ActivityHistoryEngine("America/New_York")

    window = engine.window_for(ms("2025-12-10T14:30:00Z"), make_standard(cadence_unit="day"))

    assert window.start_ms == ms("2025-12-10T05:00:00Z")
    assert window.label == "December 10, 2025"


def test_max_iterations_is_applied(make_standard, make_log):
    engine = ActivityHistoryEngine("UTC", max_iterations=3, clock=lambda: NOW)
    logs = [make_log(NOW - 10 * MS_PER_DAY), make_log(NOW - 1 * MS_PER_DAY)]

    rows = engine.standard_history(make_standard(cadence_unit="day"), logs)

    assert [row.period_key for row in rows] == ["2025-12-09"]


def test_activity_history_merges_persisted_and_current(engine, make_standard, make_log, history_store):
    standard = make_standard()
    logs = [
        make_log(ms("2025-12-02T09:00:00Z"), value=60),
        make_log(ms("2025-12-09T09:00:00Z"), value=20),
    ]
    for row in engine.standard_history(standard, logs):
        if not row.is_current_period:
            engine.persist_closed_period(history_store, row, "act-1")

    merged = engine.activity_history("act-1", [standard], history_store.list_history("act-1"), logs)

    assert [(row.period_key, row.total, row.is_current_period) for row in merged] == [
        ("2025-12-08", 20, True),
        ("2025-12-01", 60, False),
    ]


def test_activity_history_skips_other_activities(engine, make_standard):
    standards = [make_standard("a", activity_id="act-1"), make_standard("b", activity_id="act-2")]

    merged = engine.activity_history("act-1", standards, [], [])

    assert [row.standard_id for row in merged] == ["a"]


def test_load_activity_history_queries_current_windows(engine, make_standard, make_log, make_stores):
    standards = [
        make_standard("weekly"),
        make_standard("daily", cadence_unit="day"),
        make_standard("archived", state="archived"),
        make_standard("elsewhere", activity_id="act-2"),
    ]
    logs = [
        make_log(ms("2025-12-08T09:00:00Z"), standard_id="weekly"),
        make_log(ms("2025-12-10T09:00:00Z"), standard_id="daily"),
        make_log(ms("2025-12-09T09:00:00Z"), standard_id="archived"),
        make_log(ms("2025-12-12T09:00:00Z"), standard_id="weekly"),
    ]
    standard_store, log_store, history_store = make_stores(standards, logs)

    merged = engine.load_activity_history(
        "act-1",
        standard_store=standard_store,
        log_store=log_store,
        history_store=history_store,
    )

    assert log_store.calls == [(["weekly", "daily"], ms("2025-12-08T00:00:00Z"), NOW)]
    assert {row.standard_id: row.total for row in merged} == {"weekly": 10, "daily": 10}


def test_load_activity_history_includes_persisted_rows(engine, make_standard, make_log, make_stores):
    standard = make_standard()
    old_log = make_log(ms("2025-11-25T09:00:00Z"), value=55)
    standard_store, log_store, history_store = make_stores([standard], [old_log])
    closed = engine.standard_history(standard, [old_log])[0]
    doc_id = engine.persist_closed_period(history_store, closed, "act-1", source="resume")

    merged = engine.load_activity_history(
        "act-1",
        standard_store=standard_store,
        log_store=log_store,
        history_store=history_store,
    )

    assert doc_id == f"act-1__std-1__{ms('2025-11-24T00:00:00Z')}"
    assert history_store.documents[doc_id]["generatedAtMs"] == NOW
    assert [(row.period_key, row.status) for row in merged] == [("2025-12-08", "In Progress"), ("2025-11-24", "Met")]


def test_recalculate_boundaries(make_standard, make_log, history_store):
    utc_engine = ActivityHistoryEngine("UTC", clock=lambda: NOW)
    tokyo_engine = ActivityHistoryEngine("Asia/Tokyo", clock=lambda: NOW)
    standard = make_standard()
    closed = utc_engine.standard_history(standard, [make_log(ms("2025-12-02T12:00:00Z"))])[0]
    utc_engine.persist_closed_period(history_store, closed, "act-1")
    persisted = history_store.list_history("act-1")

    plain = tokyo_engine.activity_history("act-1", [standard], persisted, [])
    recalculated = tokyo_engine.activity_history("act-1", [standard], persisted, [], recalculate_boundaries=True)

    assert plain[1].period_start_ms == ms("2025-12-01T00:00:00Z")
    assert recalculated[1].period_start_ms == ms("2025-11-30T15:00:00Z")


def test_range_stats_uses_default_range(make_standard, make_log):
    engine = ActivityHistoryEngine("UTC", default_range="7d", clock=lambda: NOW)
    logs = [make_log(NOW - 2 * MS_PER_DAY, value=5), make_log(NOW - 12 * MS_PER_DAY, value=7)]
    rows = engine.activity_history("act-1", [make_standard()], [], logs)

    default_stats = engine.range_stats(rows, logs)
    all_stats = engine.range_stats(rows, logs, "All")

    assert default_stats.range_start_ms == NOW - 7 * MS_PER_DAY
    assert default_stats.total_value == 5
    assert all_stats.total_value == 12


def test_from_settings():
    settings = Settings(default_timezone="Europe/Brussels", history_max_iterations=5, default_range="90d")

    engine = ActivityHistoryEngine.from_settings(settings, clock=lambda: NOW)

    assert engine.timezone == "Europe/Brussels"
    assert engine.max_iterations == 5
    assert engine.default_range == "90d"


def test_create_engine_with_settings():
    engine = create_engine(Settings(default_timezone="Asia/Tokyo"))

    assert engine.timezone == "Asia/Tokyo"
