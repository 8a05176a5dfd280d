"""
Private D-Bus connections.

Each proxy call opens its own private connection and closes it when the call
returns, so nothing here is shared or pooled.  The factory that creates
connections can be replaced (``set_bus_factory``) which is how the test-suite
substitutes an in-memory bus.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import dbus
import dbus.exceptions

from bluemap.core import config
from bluemap.core.errors import RemoteUnavailableError
from bluemap.core.log import get_logger

logger = get_logger(__name__)

BusFactory = Callable[[str], Any]


def default_bus_factory(bus_type: str):
    """Open a new private connection to the system or session bus."""
    if bus_type == config.BUS_SESSION:
        return dbus.SessionBus(private=True)
    if bus_type == config.BUS_SYSTEM:
        return dbus.SystemBus(private=True)
    raise ValueError(f"Unknown bus type: {bus_type!r}")


_bus_factory: BusFactory = default_bus_factory


def set_bus_factory(factory: Optional[BusFactory]) -> BusFactory:
    """Install *factory* (``None`` restores the default); returns the previous one."""
    global _bus_factory
    previous = _bus_factory
    _bus_factory = factory or default_bus_factory
    return previous


def open_bus(bus_type: str = config.BUS_SYSTEM):
    """Return a fresh connection, mapping connection failures to RemoteUnavailableError."""
    try:
        bus = _bus_factory(bus_type)
    except dbus.exceptions.DBusException as exc:
        raise RemoteUnavailableError(
            f"{bus_type} bus", exc.get_dbus_message() or str(exc), exc.get_dbus_name()
        ) from exc
    logger.debug("Opened private %s bus connection", bus_type)
    return bus


def close_bus(bus) -> None:
    close = getattr(bus, "close", None)
    if close is not None:
        close()
