"""Persisted history document shape.

Closed periods are stored under a deterministic id so repeated writes for
the same period overwrite one document. Documents reaching
``history_row_from_document`` are assumed to have been filtered for
shape by the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from ..core.models import HistoryRow, StandardSnapshot

if TYPE_CHECKING:
    from ..stores import HistoryStore

__all__ = [
    "HistorySource",
    "build_activity_history_doc_id",
    "history_row_from_document",
    "history_row_to_document",
    "write_history_row",
]

HistorySource = Literal["boundary", "resume", "log-edit"]


def build_activity_history_doc_id(activity_id: str, standard_id: str, period_start_ms: int) -> str:
    """Deterministic document id: ``activityId__standardId__periodStartMs``.

    Example
    -------
    >>> build_activity_history_doc_id("act1", "std1", 1765152000000)
    'act1__std1__1765152000000'
    """
    return f"{activity_id}__{standard_id}__{period_start_ms}"


def history_row_to_document(
    row: HistoryRow,
    activity_id: str,
    *,
    generated_at_ms: int,
    source: HistorySource = "boundary",
) -> dict[str, Any]:
    """Serialise a closed-period row for the history store."""
    reference_ms = row.reference_timestamp_ms
    if reference_ms is None:
        reference_ms = row.period_start_ms

    document = row.to_dict()
    document.pop("isCurrentPeriod")
    document.update(
        {
            "id": build_activity_history_doc_id(activity_id, row.standard_id, row.period_start_ms),
            "activityId": activity_id,
            "referenceTimestampMs": reference_ms,
            "generatedAtMs": generated_at_ms,
            "source": source,
        }
    )
    return document


def history_row_from_document(document: dict[str, Any]) -> HistoryRow:
    """Rebuild a persisted row.

    ``referenceTimestampMs`` falls back to ``periodStartMs`` and vice
    versa; boundaries missing from older documents are left for
    ``recalculate_historical_boundaries`` to fill in.
    """
    reference_ms = document.get("referenceTimestampMs", document.get("periodStartMs"))
    period_start_ms = document.get("periodStartMs", reference_ms)

    return HistoryRow(
        standard_id=document["standardId"],
        period_start_ms=period_start_ms,
        period_end_ms=document.get("periodEndMs", period_start_ms),
        period_label=document.get("periodLabel", ""),
        period_key=document.get("periodKey") or f"{document['standardId']}_{period_start_ms}",
        standard_snapshot=StandardSnapshot.from_dict(document["standardSnapshot"]),
        total=document["total"],
        current_sessions=document["currentSessions"],
        target_sessions=document["targetSessions"],
        status=document["status"],
        progress_percent=document["progressPercent"],
        is_current_period=False,
        reference_timestamp_ms=reference_ms,
    )


def write_history_row(
    store: HistoryStore,
    row: HistoryRow,
    activity_id: str,
    *,
    generated_at_ms: int,
    source: HistorySource = "boundary",
) -> str:
    """Upsert a closed-period row into ``store`` and return its document id."""
    document = history_row_to_document(row, activity_id, generated_at_ms=generated_at_ms, source=source)
    store.upsert_history(document["id"], document)
    return document["id"]
