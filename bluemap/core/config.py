"""
Core configuration settings for bluemap.
"""

import logging
import os
from pathlib import Path

import yaml

# Base paths
DATA_DIR = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local/share")) / "bluemap"
CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "bluemap"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Logging configuration
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Log types
LOG__GENERAL = "GENERAL"
LOG__DEBUG = "DEBUG"

# Default adapter
DEFAULT_ADAPTER = "hci0"

# Bus selectors
BUS_SYSTEM = "system"
BUS_SESSION = "session"

# Default timeout values
DBUS_TIMEOUT_MS = 1000  # every round trip blocks at most this long
TRANSFER_POLL_INTERVAL = 0.5  # seconds between OBEX status reads
LOG_LEVEL = "INFO"

# Keys accepted in config.yaml, mapped onto the module globals above
_OVERRIDABLE = {
    "dbus_timeout_ms": ("DBUS_TIMEOUT_MS", int),
    "transfer_poll_interval": ("TRANSFER_POLL_INTERVAL", float),
    "log_level": ("LOG_LEVEL", str),
    "default_adapter": ("DEFAULT_ADAPTER", str),
}


def load_overrides(path=None):
    """Apply overrides from *path* (default ``CONFIG_FILE``) if it exists.

    Returns the dictionary of applied settings.  Unknown keys are ignored.
    A file that is not valid YAML, whose top level is not a mapping, or
    that holds a value of the wrong type raises
    :class:`bluemap.core.errors.BluemapError` and applies nothing.  A
    ``log_level`` override is pushed to the ``bluemap`` logger at once.
    """
    path = Path(path) if path is not None else CONFIG_FILE
    if not path.exists():
        return {}

    # errors imports log, which reads this module; import only on failure
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        from bluemap.core.errors import BluemapError

        raise BluemapError(f"Malformed configuration file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        from bluemap.core.errors import BluemapError

        raise BluemapError(f"Configuration file {path} must contain a mapping")

    applied = {}
    for key, value in data.items():
        if key not in _OVERRIDABLE:
            continue
        attr, cast = _OVERRIDABLE[key]
        try:
            applied[attr] = cast(value)
        except (TypeError, ValueError) as exc:
            from bluemap.core.errors import BluemapError

            raise BluemapError(f"Invalid value for '{key}' in {path}: {value!r}") from exc

    globals().update(applied)
    if "LOG_LEVEL" in applied:
        level = getattr(logging, applied["LOG_LEVEL"].upper(), logging.INFO)
        logging.getLogger("bluemap").setLevel(level)
    return applied


load_overrides()
