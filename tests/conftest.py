"""Shared pytest configuration for the test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from minstd.core.models import (  # noqa: E402
    Cadence,
    HistoryRow,
    LogSlice,
    PeriodStartPreference,
    SessionConfig,
    Standard,
    StandardSnapshot,
)


@pytest.fixture
def make_standard():
    """Factory for standards with a session-based snapshot."""

    def _make(
        standard_id: str = "std-1",
        *,
        activity_id: str = "act-1",
        cadence_unit: str = "week",
        sessions: int = 1,
        volume: float = 50,
        week_start_day: int | None = None,
        state: str = "active",
        archived_at_ms: int | None = None,
    ) -> Standard:
        preference = (
            PeriodStartPreference.week_day(week_start_day) if week_start_day else PeriodStartPreference()
        )
        snapshot = StandardSnapshot.from_sessions(
            unit="calls",
            cadence=Cadence(1, cadence_unit),
            session_config=SessionConfig("session", sessions, volume),
            period_start_preference=preference,
        )
        return Standard(
            id=standard_id,
            activity_id=activity_id,
            snapshot=snapshot,
            state=state,
            archived_at_ms=archived_at_ms,
        )

    return _make


@pytest.fixture
def make_log():
    """Factory for log slices; ids are generated when omitted."""
    counter = {"next": 0}

    def _make(occurred_at_ms: int, value: float = 10, standard_id: str = "std-1", log_id: str | None = None) -> LogSlice:
        counter["next"] += 1
        return LogSlice(
            id=log_id or f"log-{counter['next']}",
            standard_id=standard_id,
            value=value,
            occurred_at_ms=occurred_at_ms,
        )

    return _make


@pytest.fixture
def make_row(make_standard):
    """Factory for history rows of a weekly standard."""

    def _make(
        standard_id: str = "std-1",
        *,
        start_ms: int,
        end_ms: int,
        total: float = 0,
        status: str = "Missed",
        sessions: int = 1,
        volume: float = 50,
        is_current_period: bool = False,
        reference_timestamp_ms: int | None = None,
    ) -> HistoryRow:
        snapshot = make_standard(standard_id, sessions=sessions, volume=volume).snapshot
        return HistoryRow(
            standard_id=standard_id,
            period_start_ms=start_ms,
            period_end_ms=end_ms,
            period_label="",
            period_key=str(start_ms),
            standard_snapshot=snapshot,
            total=total,
            current_sessions=1 if total else 0,
            target_sessions=sessions,
            status=status,
            progress_percent=0.0,
            is_current_period=is_current_period,
            reference_timestamp_ms=reference_timestamp_ms,
        )

    return _make


class InMemoryStandardStore:
    def __init__(self, standards=()):
        self.standards = list(standards)

    def list_standards(self, activity_id):
        return [standard for standard in self.standards if standard.activity_id == activity_id]


class InMemoryLogStore:
    def __init__(self, logs=()):
        self.logs = list(logs)
        self.calls = []

    def list_logs(self, standard_ids, start_ms=None, end_ms=None):
        self.calls.append((list(standard_ids), start_ms, end_ms))
        return [
            entry
            for entry in self.logs
            if entry.standard_id in standard_ids
            and (start_ms is None or entry.occurred_at_ms >= start_ms)
            and (end_ms is None or entry.occurred_at_ms < end_ms)
        ]


class InMemoryHistoryStore:
    def __init__(self):
        self.documents = {}

    def list_history(self, activity_id):
        from minstd.history.documents import history_row_from_document

        return [
            history_row_from_document(document)
            for document in self.documents.values()
            if document["activityId"] == activity_id
        ]

    def upsert_history(self, doc_id, document):
        self.documents[doc_id] = document


@pytest.fixture
def history_store():
    return InMemoryHistoryStore()


@pytest.fixture
def make_stores(history_store):
    """Build standard and log stores around the shared history store."""

    def _make(standards=(), logs=()):
        return InMemoryStandardStore(standards), InMemoryLogStore(logs), history_store

    return _make
