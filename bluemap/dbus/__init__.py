"""
D-Bus transport functionality for bluemap.
"""

# Sub-modules are loaded lazily on first attribute access so that
# `from bluemap.dbus import proxy` never drags in more than it needs.

from importlib import import_module as _import_module
from types import ModuleType as _ModuleType
from typing import TYPE_CHECKING as _TYPE_CHECKING

__all__ = ["connection", "proxy"]


def __getattr__(name: str) -> _ModuleType:  # pragma: no cover – import meta-hook
    if name in __all__:
        module = _import_module(f"{__name__}.{name}")
        globals()[name] = module  # cache for subsequent look-ups
        return module
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


if _TYPE_CHECKING:  # pragma: no cover – mypy/pylance only
    from . import connection  # noqa: F401
    from . import proxy  # noqa: F401
