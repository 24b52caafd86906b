"""Logging configuration for behaves.

Provides centralized logging setup with sensible defaults:
- Default: WARNING level (quiet operation)
- --debug flag: DEBUG level with full context
- BEHAVES_DEBUG=true or BEHAVES_LOG_LEVEL=DEBUG env vars: Override for CI/scripting
- Config file: debug: true in .behaves/config.yaml (persistent)

Usage:
    from behaves.logging import configure_logging
    configure_logging(debug=args.debug)

Priority for level resolution (highest to lowest):
    1. Explicit `level` parameter (programmatic override)
    2. BEHAVES_LOG_LEVEL env var (any level: DEBUG, INFO, WARNING, etc.)
    3. BEHAVES_DEBUG=true env var (simple boolean)
    4. `debug=True` parameter (--debug flag)
    5. Config file: debug: true
    6. WARNING (default)
"""

import logging
import os
import sys

# Format includes module path for tracing issues
_DEBUG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
_DEFAULT_FORMAT = "%(name)s: %(message)s"

_LOGGER_NAME = "behaves"


def _config_debug() -> bool:
    """Read the debug setting from config, treating a broken config as off."""
    from behaves.config import get_config
    from behaves.errors import BehavesError

    try:
        return get_config().debug
    except BehavesError as e:
        sys.stderr.write(f"Warning: ignoring config for logging: {e}\n")
        return False


def configure_logging(
    *,
    debug: bool = False,
    level: int | str | None = None,
    stream: object = None,
) -> None:
    """Configure logging for the behaves package.

    Only the ``behaves`` logger is touched, so host applications keep their
    own root logger setup.

    Args:
        debug: Enable DEBUG level with detailed format
        level: Override log level (int or string like "DEBUG", "INFO")
               Also reads BEHAVES_LOG_LEVEL env var
        stream: Output stream (default: stderr)
    """
    resolved_level: int
    if level is not None:
        resolved_level = _parse_level(level)
    elif env_level := os.environ.get("BEHAVES_LOG_LEVEL"):
        resolved_level = _parse_level(env_level)
    elif os.environ.get("BEHAVES_DEBUG", "").lower() in ("true", "1", "yes"):
        resolved_level = logging.DEBUG
    elif debug or _config_debug():
        resolved_level = logging.DEBUG
    else:
        resolved_level = logging.WARNING

    fmt = _DEBUG_FORMAT if resolved_level <= logging.DEBUG else _DEFAULT_FORMAT

    package_logger = logging.getLogger(_LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)
    package_logger.propagate = False

    package_logger.debug(
        "Logging configured: level=%s, debug=%s",
        logging.getLevelName(resolved_level),
        debug,
    )


def _parse_level(level: int | str) -> int:
    """Parse log level from int or string."""
    if isinstance(level, int):
        return level
    numeric = getattr(logging, level.upper(), None)
    if isinstance(numeric, int):
        return numeric
    try:
        return int(level)
    except ValueError:
        return logging.WARNING
