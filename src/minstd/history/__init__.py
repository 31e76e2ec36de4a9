"""History reconstruction, merging and range statistics."""

from .aggregator import aggregate_logs, compute_period_rollup
from .documents import build_activity_history_doc_id, history_row_from_document, history_row_to_document
from .iterator import DEFAULT_MAX_ITERATIONS, compute_standard_history
from .merge import merge_activity_history_rows, recalculate_historical_boundaries
from .range_stats import clip_rows_to_range, compute_range_stats, resolve_range_start
from .synthetic import build_current_progress, compute_synthetic_current_rows

__all__ = [
    # Aggregation
    "aggregate_logs",
    "compute_period_rollup",
    # History
    "DEFAULT_MAX_ITERATIONS",
    "compute_standard_history",
    "compute_synthetic_current_rows",
    "build_current_progress",
    # Merge
    "merge_activity_history_rows",
    "recalculate_historical_boundaries",
    # Range
    "resolve_range_start",
    "clip_rows_to_range",
    "compute_range_stats",
    # Documents
    "build_activity_history_doc_id",
    "history_row_to_document",
    "history_row_from_document",
]
