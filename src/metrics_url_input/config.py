"""
Configuration dataclasses for the metrics URL input engine.

This module defines the probe, auto-refresh, suggestion and logging settings,
and loads them from environment variables (optionally via a .env file) or
from a JSON document.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models import DEFAULT_URL_SUGGESTIONS, UrlSuggestionTable


VALID_LOG_LEVELS = ("debug", "info", "warn", "error")
VALID_OUTPUT_FORMATS = ("json", "text", "both")


@dataclass
class ProbeConfig:
    """Availability probe settings."""

    timeout_seconds: float = 15.0
    accept_header: str = "text/plain"
    expected_content_type: str = "text/plain"
    follow_redirects: bool = True
    verify_tls: bool = True

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


@dataclass
class RefreshConfig:
    """Auto-refresh timer settings."""

    interval_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")


@dataclass
class SuggestionConfig:
    """Completion settings."""

    max_suggestions: int = 5
    table: UrlSuggestionTable = DEFAULT_URL_SUGGESTIONS

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise ValueError(f"max_suggestions must be at least 1, got {self.max_suggestions}")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'

    def __post_init__(self) -> None:
        self.level = self.level.lower()
        if self.level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}")
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {self.output_format}")


@dataclass
class FormConfig:
    """Main configuration combining all sub-configurations."""

    probe: ProbeConfig = field(default_factory=ProbeConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    suggestions: SuggestionConfig = field(default_factory=SuggestionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def create_default_config() -> FormConfig:
    """Create a configuration with the standard 15s probe / 10s refresh settings."""
    return FormConfig()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env(env_file: Optional[Path] = None) -> FormConfig:
    """
    Build a configuration from METRICS_* environment variables.

    Args:
        env_file: Optional .env file loaded (without overriding existing
                  variables) before reading the environment

    Returns:
        FormConfig with defaults for unset or unparseable numbers

    Raises:
        ValueError: If a parsed value is out of range
    """
    if env_file is not None:
        load_dotenv(env_file)

    return FormConfig(
        probe=ProbeConfig(
            timeout_seconds=_float_env("METRICS_PROBE_TIMEOUT", 15.0),
            verify_tls=_bool_env("METRICS_VERIFY_TLS", True),
        ),
        refresh=RefreshConfig(
            interval_seconds=_float_env("METRICS_REFRESH_INTERVAL", 10.0),
        ),
        suggestions=SuggestionConfig(
            max_suggestions=_int_env("METRICS_MAX_SUGGESTIONS", 5),
        ),
        logging=LoggingConfig(
            level=os.getenv("METRICS_LOG_LEVEL", "info"),
            output_format=os.getenv("METRICS_LOG_FORMAT", "text"),
        ),
    )


def load_config_from_file(config_path: Path) -> Optional[FormConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        FormConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        probe_data = data.get("probe", {})
        refresh_data = data.get("refresh", {})
        suggestion_data = data.get("suggestions", {})
        logging_data = data.get("logging", {})

        return FormConfig(
            probe=ProbeConfig(
                timeout_seconds=probe_data.get("timeout_seconds", 15.0),
                accept_header=probe_data.get("accept_header", "text/plain"),
                expected_content_type=probe_data.get("expected_content_type", "text/plain"),
                follow_redirects=probe_data.get("follow_redirects", True),
                verify_tls=probe_data.get("verify_tls", True),
            ),
            refresh=RefreshConfig(
                interval_seconds=refresh_data.get("interval_seconds", 10.0),
            ),
            suggestions=SuggestionConfig(
                max_suggestions=suggestion_data.get("max_suggestions", 5),
            ),
            logging=LoggingConfig(
                level=logging_data.get("level", "info"),
                output_format=logging_data.get("output_format", "text"),
            ),
        )

    except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None
