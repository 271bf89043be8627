"""Logging setup shared by every railflow module.

All modules log through children of the ``railflow`` logger, which owns a
single stdout handler. The initial level is INFO unless the
``RAILFLOW_LOG_LEVEL`` environment variable names another one (e.g.
``RAILFLOW_LOG_LEVEL=debug``).
"""

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "railflow"
LOG_LEVEL_ENV = "RAILFLOW_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def parse_level(level: Union[int, str]) -> int:
    """Turn a level name ("debug", "WARNING") or number into a logging level.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return value


def _initial_level(default: int) -> int:
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not env_level:
        return default
    try:
        return parse_level(env_level)
    except ValueError:
        return default


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the stdout handler on the ``railflow`` logger once.

    Later calls are no-ops until ``reset_logging`` runs.

    Args:
        level: Level used when ``RAILFLOW_LOG_LEVEL`` is unset.
        format_string: Record format, DEFAULT_FORMAT when omitted.
        handler: Handler to install instead of a stdout StreamHandler.
    """
    global _ROOT_LOGGER_CONFIGURED
    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_initial_level(level))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # pytest's caplog listens on the global root logger
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a railflow module, usually called with ``__name__``."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Set the level of the ``railflow`` logger and its handlers."""
    setup_root_logger()
    value = parse_level(level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(value)
    for handler in root_logger.handlers:
        handler.setLevel(value)


def configure_cli_logging(verbose: bool = False, quiet: bool = False) -> int:
    """Apply the CLI verbosity flags. ``verbose`` wins over ``quiet``.

    Returns:
        The level that was set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    set_global_log_level(level)
    return level


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the handler and level so the next call reconfigures (for tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
