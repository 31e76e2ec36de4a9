"""Contracts of the stores the engine reads from and writes to.

The engine trusts these collaborators: logs arrive without soft-deleted
entries, and persisted history arrives well-formed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .core.models import HistoryRow, LogSlice, Standard

__all__ = ["HistoryStore", "LogStore", "StandardStore"]


class StandardStore(Protocol):
    """Supplies standards with their current snapshot and state."""

    def list_standards(self, activity_id: str) -> Iterable[Standard]:
        """Standards referencing ``activity_id``, active and archived."""
        ...


class LogStore(Protocol):
    """Supplies logs, excluding soft-deleted entries."""

    def list_logs(
        self,
        standard_ids: Sequence[str],
        start_ms: int | None = None,
        end_ms: int | None = None,
    ) -> Iterable[LogSlice]:
        """Logs of ``standard_ids`` in ``[start_ms, end_ms)`` when bounds are given."""
        ...


class HistoryStore(Protocol):
    """Persists closed-period rows with upsert semantics."""

    def list_history(self, activity_id: str) -> Iterable[HistoryRow]:
        """Persisted rows of an activity."""
        ...

    def upsert_history(self, doc_id: str, document: dict[str, Any]) -> None:
        """Create or overwrite the document stored under ``doc_id``."""
        ...
