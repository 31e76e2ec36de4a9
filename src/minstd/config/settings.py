"""Centralized configuration for the period engine.

Loads configuration from a .env file (or a YAML mapping) and provides
typed access to settings. Invalid values produce clear errors naming the
variable to fix.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.validation import InvalidInputError, validate_timezone

__all__ = [
    "ConfigError",
    "Settings",
    "generate_example_env",
    "get_settings",
    "load_env_file",
    "load_settings",
]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
RANGES = ("7d", "30d", "90d", "All")


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Engine settings.

    Attributes
    ----------
    default_timezone : str
        IANA timezone used when a caller does not pass one
    history_max_iterations : int
        Iteration cap of the history iterator
    log_level : str
        Logging level
    log_dir : Path | None
        Directory for JSONL logs; console only when unset
    default_range : str
        Range preset used for statistics (7d, 30d, 90d, All)
    """

    default_timezone: str = "UTC"
    history_max_iterations: int = 1000
    log_level: str = "INFO"
    log_dir: Path | None = None
    default_range: str = "30d"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.log_dir and isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

        try:
            validate_timezone(self.default_timezone)
        except InvalidInputError as exc:
            raise ConfigError(
                f"MINSTD_DEFAULT_TZ must be an IANA timezone (e.g. Europe/Brussels), got {self.default_timezone!r}"
            ) from exc

        if (
            isinstance(self.history_max_iterations, bool)
            or not isinstance(self.history_max_iterations, int)
            or self.history_max_iterations < 1
        ):
            raise ConfigError(
                f"MINSTD_HISTORY_MAX_ITERATIONS must be a positive integer, got {self.history_max_iterations!r}"
            )

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"MINSTD_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

        if self.default_range not in RANGES:
            raise ConfigError(f"MINSTD_DEFAULT_RANGE must be one of {', '.join(RANGES)}, got {self.default_range!r}")

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, otherwise from os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Raises
        ------
        ConfigError
            If settings are invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        try:
            return cls(
                default_timezone=os.environ.get("MINSTD_DEFAULT_TZ", "UTC"),
                history_max_iterations=int(os.environ.get("MINSTD_HISTORY_MAX_ITERATIONS", "1000")),
                log_level=os.environ.get("MINSTD_LOG_LEVEL", "INFO"),
                log_dir=Path(os.environ["MINSTD_LOG_DIR"]) if "MINSTD_LOG_DIR" in os.environ else None,
                default_range=os.environ.get("MINSTD_DEFAULT_RANGE", "30d"),
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML mapping with the same keys as the dataclass.

        Unknown keys are rejected.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data: Any = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read settings from {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")

        try:
            return cls(**data)
        except TypeError as exc:
            raise ConfigError(f"Invalid settings in {path}: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_timezone": self.default_timezone,
            "history_max_iterations": self.history_max_iterations,
            "log_level": self.log_level,
            "log_dir": str(self.log_dir) if self.log_dir else None,
            "default_range": self.default_range,
        }


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file) as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ[key] = value


# Global settings instance
_settings: Settings | None = None


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from environment and keep them as the current settings."""
    global _settings
    _settings = Settings.from_env(env_file)
    return _settings


def get_settings() -> Settings:
    """Get current settings.

    Raises
    ------
    ConfigError
        If settings not loaded
    """
    if _settings is None:
        raise ConfigError("Settings not loaded. Call load_settings() first.")
    return _settings


def generate_example_env(output_path: Path | None = None) -> str:
    """Generate example .env file with all settings.

    Parameters
    ----------
    output_path
        Optional path to write .env file

    Returns
    -------
    str
        Example .env contents
    """
    example = """# Minimum standards engine configuration
# Copy this to .env and adjust values

# Default timezone (optional, default: UTC)
# Examples: UTC, America/New_York, Europe/Brussels
MINSTD_DEFAULT_TZ=UTC

# Maximum periods visited when rebuilding history (optional, default: 1000)
MINSTD_HISTORY_MAX_ITERATIONS=1000

# Default statistics range (optional, default: 30d)
# Options: 7d, 30d, 90d, All
MINSTD_DEFAULT_RANGE=30d

# Log level (optional, default: INFO)
# Options: DEBUG, INFO, WARNING, ERROR, CRITICAL
MINSTD_LOG_LEVEL=INFO

# Log directory for JSONL logs (optional, console only if not set)
# MINSTD_LOG_DIR=logs
"""

    if output_path:
        output_path.write_text(example)

    return example
