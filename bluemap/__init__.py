"""
bluemap - BlueZ managed-object access and proxy layer
"""

__version__ = "0.3.0"

# ---------------------------------------------------------------------------
# Initialise logging on *package import* so every code path (even when the
# CLI is not used) writes to the per-user log files.
# ---------------------------------------------------------------------------
import importlib as _importlib

_importlib.import_module("bluemap.core.log")  # noqa: F401 – side-effect import

from bluemap.core.errors import (  # noqa: E402
    BluemapError,
    CallTimeoutError,
    NoSuchMethodError,
    NoSuchPropertyError,
    NotFoundError,
    RemoteRejectedError,
    RemoteUnavailableError,
    TypeMismatchError,
)

__all__ = [
    "__version__",
    "BluemapError",
    "CallTimeoutError",
    "NoSuchMethodError",
    "NoSuchPropertyError",
    "NotFoundError",
    "RemoteRejectedError",
    "RemoteUnavailableError",
    "TypeMismatchError",
]
