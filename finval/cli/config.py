"""Settings file loading and validation.

This module handles loading settings from JSON and YAML files, merging CLI
arguments with file-based settings (with CLI taking precedence), validating
the merged values, and building the runtime collaborators they describe.

Settings files can specify:
- rate_limit_enabled: Whether hook validation is throttled
- rate_limit_window_seconds: Length of a rate-limit window
- rate_limit_max_attempts: Attempts allowed per window
- past_years / future_years: Date window used by ``check-date``
- max_summary_errors: Errors shown before a summary is truncated
- log_level: Default log level (debug, info, warning, error)
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from finval.cli.output import LOG_LEVELS
from finval.core.exceptions import ConfigError
from finval.validation.rate_limit import FixedWindowRateLimiter

__all__ = [
    "ConfigError",
    "ValidatorSettings",
    "build_rate_limiter",
    "load_config",
    "merge_config",
    "settings_from_config",
    "validate_config",
]


@dataclass
class ValidatorSettings:
    """Resolved settings for a CLI run."""

    rate_limit_window_seconds: float = 60.0
    rate_limit_max_attempts: int = 10
    rate_limit_enabled: bool = False
    past_years: int = 1
    future_years: int = 1
    max_summary_errors: int = 3
    log_level: str = "warning"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


SETTING_NAMES = frozenset(f.name for f in fields(ValidatorSettings))


def load_config(path: Path) -> dict[str, Any]:
    """Load settings from a JSON or YAML file.

    Format is determined by file extension (.json, .yaml, .yml); other
    extensions are tried as JSON first, then YAML.

    Args:
        path: Path to settings file

    Returns:
        Settings dictionary (empty for an empty YAML document)

    Raises:
        ConfigError: If the file is missing, unparseable, or not a mapping

    Example:
        >>> config = load_config(Path("finval.yaml"))
        >>> config["rate_limit_max_attempts"]
        5
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", file_path=str(path))

    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            loaded = json.loads(content)
        elif path.suffix in (".yaml", ".yml"):
            loaded = yaml.safe_load(content)
        else:
            try:
                loaded = json.loads(content)
            except json.JSONDecodeError:
                loaded = yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", file_path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", file_path=str(path)) from e
    except OSError as e:
        raise ConfigError(f"Failed to load config from {path}: {e}", file_path=str(path)) from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping, got {type(loaded).__name__}",
            file_path=str(path),
        )
    return loaded


def merge_config(base: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    """Merge CLI arguments into base settings.

    Only non-None override values are applied, so file values are used when
    an argument was not given.

    Example:
        >>> merge_config({"past_years": 2, "log_level": "info"}, log_level="debug", past_years=None)
        {'past_years': 2, 'log_level': 'debug'}
    """
    merged = base.copy()
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate settings structure and values.

    Returns:
        List of validation error messages (empty list if valid)

    Example:
        >>> validate_config({"rate_limit_max_attempts": 0, "colour": "blue"})
        ['Unknown setting: colour', 'rate_limit_max_attempts must be a positive integer']
    """
    errors = [f"Unknown setting: {key}" for key in config if key not in SETTING_NAMES]

    window = config.get("rate_limit_window_seconds")
    if window is not None and (not _is_number(window) or window <= 0):
        errors.append("rate_limit_window_seconds must be a positive number")

    for key in ("rate_limit_max_attempts", "max_summary_errors"):
        value = config.get(key)
        if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 1):
            errors.append(f"{key} must be a positive integer")

    for key in ("past_years", "future_years"):
        value = config.get(key)
        if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
            errors.append(f"{key} must be a non-negative integer")

    enabled = config.get("rate_limit_enabled")
    if enabled is not None and not isinstance(enabled, bool):
        errors.append("rate_limit_enabled must be true or false")

    level = config.get("log_level")
    if level is not None and (not isinstance(level, str) or level.lower() not in LOG_LEVELS):
        errors.append(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

    return errors


def settings_from_config(config: dict[str, Any]) -> ValidatorSettings:
    """Build settings from a dictionary, rejecting invalid values.

    Raises:
        ConfigError: If ``validate_config`` reports any problem
    """
    errors = validate_config(config)
    if errors:
        raise ConfigError("Invalid configuration", errors=errors)
    return ValidatorSettings(**config)


def build_rate_limiter(settings: ValidatorSettings) -> FixedWindowRateLimiter | None:
    """Create the rate limiter described by ``settings``, or None when disabled."""
    if not settings.rate_limit_enabled:
        return None
    return FixedWindowRateLimiter(
        window_seconds=float(settings.rate_limit_window_seconds),
        max_attempts=settings.rate_limit_max_attempts,
    )
