"""Logging and timing instrumentation."""

from .loguru_config import configure_loguru, get_logger, log_timing, timing_context

__all__ = [
    "configure_loguru",
    "get_logger",
    "log_timing",
    "timing_context",
]
