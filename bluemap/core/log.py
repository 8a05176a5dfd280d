"""
Core logging functionality for bluemap.

Every record goes to a per-type log file under the user's data directory.
``print_and_log`` additionally echoes non-debug lines to stdout so the CLI
and library callers see the same text that ends up in the logs.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from . import config

# Re-export log type constants for external modules
LOG__GENERAL = config.LOG__GENERAL
LOG__DEBUG = config.LOG__DEBUG

_LOG_PATHS: Dict[str, Path] = {
    LOG__GENERAL: config.LOG_DIR / "general.log",
    LOG__DEBUG: config.LOG_DIR / "debug.log",
}

_formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

_handlers: Dict[str, logging.Handler] = {}
for log_type, path in _LOG_PATHS.items():
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(_formatter)
    _handlers[log_type] = handler

# Debug file receives everything; general file only INFO and above
_handlers[LOG__DEBUG].setLevel(logging.DEBUG)
_handlers[LOG__GENERAL].setLevel(logging.INFO)

# Root logger for bluemap
_logger = logging.getLogger("bluemap")
_logger.setLevel(getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO))
for handler in _handlers.values():
    _logger.addHandler(handler)

del log_type, path, handler

_LEVEL_FOR_TYPE = {
    LOG__GENERAL: logging.INFO,
    LOG__DEBUG: logging.DEBUG,
}


def set_level(level: str) -> None:
    """Change the level of the package root logger (e.g. ``"DEBUG"``)."""
    _logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def logging__debug_log(msg: str) -> None:
    """Write to debug log."""
    _logger.debug(msg)


def logging__general_log(msg: str) -> None:
    """Write to general log."""
    _logger.info(msg)


def print_and_log(output_string: str, log_type: str = LOG__GENERAL) -> None:
    """Print to stdout and log to the specified log type."""
    if log_type != LOG__DEBUG:
        print(output_string)
    _logger.log(_LEVEL_FOR_TYPE.get(log_type, logging.INFO), output_string)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger with the specified name.

    Names under the ``bluemap.`` namespace are attached to the package root
    logger so they share its file handlers.
    """
    if not name:
        return _logger
    if name == "bluemap" or name.startswith("bluemap."):
        return logging.getLogger(name)
    return _logger.getChild(name)
