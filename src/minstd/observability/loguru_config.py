"""Loguru sinks, component loggers and operation timing for the engine.

Records carry a ``component`` (periods, history, engine, config) in their
extras. File sinks write serialised JSONL; timing records go to their own
file so slow history rebuilds can be inspected separately.

The engine itself never adds sinks; applications embedding it call
``configure_loguru`` once at startup.
"""

from __future__ import annotations

import functools
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "COMPONENTS",
    "configure_loguru",
    "get_logger",
    "log_timing",
    "timing_context",
]

F = TypeVar("F", bound=Callable[..., Any])

COMPONENTS = ("periods", "history", "engine", "config")


def configure_loguru(
    *,
    log_dir: Path | str | None = None,
    level: str = "INFO",
    rotation: str = "100 MB",
    retention: str = "10 days",
    enable_console: bool = True,
    enable_timing_logs: bool = True,
) -> None:
    """Configure loguru sinks.

    Parameters
    ----------
    log_dir
        Directory for JSONL log files; no file sinks when ``None``
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    rotation
        Log rotation policy (e.g., "100 MB", "1 day")
    retention
        Log retention policy (e.g., "10 days", "1 week")
    enable_console
        Enable stderr output
    enable_timing_logs
        Write timing records to a separate ``timing.jsonl``

    Example
    -------
    >>> configure_loguru(log_dir=Path("logs"), level="DEBUG")
    """
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=_ensure_component,
        )

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "minstd.jsonl",
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            serialize=True,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

        if enable_timing_logs:
            logger.add(
                log_dir / "timing.jsonl",
                format="{message}",
                level="DEBUG",
                rotation=rotation,
                retention=retention,
                serialize=True,
                enqueue=True,
                filter=lambda record: record["extra"].get("timing", False),
            )

    logger.bind(component="config").info(
        "Loguru configured", log_dir=str(log_dir) if log_dir else None, level=level
    )


def _ensure_component(record: dict[str, Any]) -> bool:
    record["extra"].setdefault("component", "minstd")
    return True


def get_logger(component: str = "minstd") -> Any:
    """Get logger bound to a component (periods, history, engine, config)."""
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "minstd",
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Time an operation and log START/END records at DEBUG.

    Yields
    ------
    dict
        Context dictionary; extra keys set by the caller are logged with END

    Example
    -------
    >>> with timing_context("merge_history", component="history") as ctx:
    ...     rows = merge(...)
    ...     ctx["rows"] = len(rows)
    """
    start_ns = time.perf_counter_ns()
    context: dict[str, Any] = {**metadata}
    bound = logger.bind(component=component, timing=True, operation=operation)

    bound.debug(f"START: {operation}", phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ns = time.perf_counter_ns() - start_ns
        bound.debug(
            f"END: {operation}",
            phase="end",
            duration_ms=duration_ns / 1_000_000,
            **context,
        )


def log_timing(component: str = "minstd") -> Callable[[F], F]:
    """Decorator that wraps a function call in :func:`timing_context`."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with timing_context(f"{func.__module__}.{func.__name__}", component=component):
                return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
