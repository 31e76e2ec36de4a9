"""Cadence presets and standard summary formatting."""

from __future__ import annotations

from typing import Any

from ..core.models import Cadence, CadenceUnit, SessionConfig
from ..core.validation import InvalidInputError, ValidationResult, check_cadence

__all__ = [
    "CADENCE_PRESETS",
    "create_custom_cadence",
    "format_standard_summary",
    "get_cadence_preset",
    "is_preset_cadence",
    "normalize_unit",
    "validate_cadence_input",
]

CADENCE_PRESETS: dict[str, Cadence] = {
    "daily": Cadence(interval=1, unit="day"),
    "weekly": Cadence(interval=1, unit="week"),
    "monthly": Cadence(interval=1, unit="month"),
}

MAX_UNIT_LENGTH = 40


def get_cadence_preset(preset: str) -> Cadence:
    """Look up a preset cadence by name (``daily``, ``weekly``, ``monthly``)."""
    try:
        return CADENCE_PRESETS[preset]
    except KeyError as exc:
        raise InvalidInputError(f"Unknown cadence preset: {preset!r}") from exc


def is_preset_cadence(cadence: Cadence | None, preset: str) -> bool:
    if cadence is None:
        return False
    return CADENCE_PRESETS.get(preset) == cadence


def validate_cadence_input(interval: Any, unit: Any) -> ValidationResult:
    """Validate user-entered cadence fields."""
    return check_cadence(interval, unit)


def create_custom_cadence(interval: Any, unit: CadenceUnit | None) -> Cadence | None:
    """Build a cadence from user input, or ``None`` if it is invalid."""
    if not validate_cadence_input(interval, unit):
        return None
    return Cadence(interval=interval, unit=unit)  # type: ignore[arg-type]


def normalize_unit(unit: str) -> str:
    """Trim and lower-case a unit label.

    Raises
    ------
    InvalidInputError
        If the unit is blank or longer than 40 characters
    """
    trimmed = unit.strip()
    if not trimmed:
        raise InvalidInputError("Unit cannot be blank")
    if len(trimmed) > MAX_UNIT_LENGTH:
        raise InvalidInputError(f"Unit cannot exceed {MAX_UNIT_LENGTH} characters")
    return trimmed.lower()


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_standard_summary(
    minimum: float,
    unit: str,
    cadence: Cadence,
    session_config: SessionConfig | None = None,
) -> str:
    """Format a standard as a one-line summary.

    Examples
    --------
    >>> format_standard_summary(1000, "calls", Cadence(1, "week"))
    '1000 calls / week'
    >>> format_standard_summary(50, "minutes", Cadence(2, "day"))
    '50 minutes / 2 days'
    >>> format_standard_summary(75, "minutes", Cadence(1, "week"), SessionConfig("session", 5, 15))
    '5 sessions × 15 minutes = 75 minutes / week'
    """
    normalized_unit = normalize_unit(unit)

    if cadence.interval == 1:
        cadence_text = cadence.unit
    else:
        cadence_text = f"{cadence.interval} {cadence.unit}s"

    if session_config is not None and session_config.sessions_per_cadence > 1:
        return (
            f"{session_config.sessions_per_cadence} {session_config.session_label}s × "
            f"{_format_number(session_config.volume_per_session)} {normalized_unit} = "
            f"{_format_number(minimum)} {normalized_unit} / {cadence_text}"
        )

    return f"{_format_number(minimum)} {normalized_unit} / {cadence_text}"
