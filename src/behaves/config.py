"""Behaves configuration management.

Loads configuration from .behaves/config.yaml with sensible defaults.
All settings can be overridden via environment variables (BEHAVES_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .behaves/config.yaml (project-local)
3. ~/.behaves/config.yaml (user-global)
4. Built-in defaults
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Literal

import yaml

from behaves.errors import ErrorCode, config_error

logger = logging.getLogger(__name__)

ReportFormat = Literal["text", "json"]

_ENV_PREFIX = "BEHAVES_"
_REPORT_FORMATS = ("text", "json")


@dataclass(frozen=True, slots=True)
class BehavesConfig:
    """Root configuration for behaves."""

    exit_hook: bool = True
    """Run pending conformance checks when the interpreter exits."""

    report_format: ReportFormat = "text"
    """How the exit hook renders failures ("text" or "json")."""

    debug: bool = False
    """Default to DEBUG logging."""

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type in ("bool", bool) and not isinstance(value, bool):
                raise config_error(ErrorCode.CONFIG_INVALID, key=f.name, detail=f"expected a boolean, got {value!r}")
        if self.report_format not in _REPORT_FORMATS:
            raise config_error(
                ErrorCode.CONFIG_INVALID,
                key="report_format",
                detail=f"expected one of {', '.join(_REPORT_FORMATS)}, got {self.report_format!r}",
            )


# Global config instance (lazy-loaded, thread-safe)
_config: BehavesConfig | None = None
_config_lock = threading.Lock()


def _coerce(value: str) -> Any:
    if value.lower() in ("true", "yes", "1"):
        return True
    if value.lower() in ("false", "no", "0"):
        return False
    return value


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides.

    Examples:
        BEHAVES_EXIT_HOOK=false
        BEHAVES_REPORT_FORMAT=json
    """
    known = {f.name for f in fields(BehavesConfig)}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        name = key[len(_ENV_PREFIX):].lower()
        if name in known:
            config_dict[name] = _coerce(value)
    return config_dict


def _read_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise config_error(ErrorCode.CONFIG_PARSE_ERROR, path=str(path), detail=str(e), cause=e) from e
    if not isinstance(data, dict):
        raise config_error(ErrorCode.CONFIG_PARSE_ERROR, path=str(path), detail="top level must be a mapping")
    return data


def _dict_to_config(data: dict[str, Any]) -> BehavesConfig:
    known = {f.name for f in fields(BehavesConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise config_error(ErrorCode.CONFIG_INVALID, key=unknown[0], detail="unknown setting")
    return BehavesConfig(**data)


def load_config(path: str | Path | None = None) -> BehavesConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (BEHAVES_*)
    2. Explicit path if provided
    3. .behaves/config.yaml (project-local)
    4. ~/.behaves/config.yaml (user-global)
    5. Built-in defaults

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged BehavesConfig instance.
    """
    global _config

    config_dict: dict[str, Any] = asdict(BehavesConfig())

    config_paths = []
    if path:
        config_paths.append(Path(path))
    config_paths.extend([
        Path(".behaves/config.yaml"),
        Path.home() / ".behaves" / "config.yaml",
    ])

    for config_path in config_paths:
        if config_path.exists():
            config_dict.update(_read_file(config_path))
            logger.debug("Loaded config from %s", config_path)
            break  # Use first found config

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> BehavesConfig:
    """Get the current configuration, loading if needed."""
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    with _config_lock:
        _config = None
