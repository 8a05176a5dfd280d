"""
Generic property/method proxy.

``get_property``, ``set_property`` and ``call_method`` are the only three
ways bluemap talks to a remote object.  Each opens an independent private
connection (unless the caller hands in one it owns), performs exactly one
blocking round trip bounded by ``config.DBUS_TIMEOUT_MS`` and closes the
connection again.  Nothing is retried; every D-Bus failure is mapped to a
:class:`~bluemap.core.errors.BluemapError` subclass and raised.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import dbus.exceptions

from bluemap.bt_ref.constants import (
    BLUEZ_ROOT_PATH,
    BLUEZ_SERVICE_NAME,
    DBUS_OM_IFACE,
    DBUS_PROPERTIES,
)
from bluemap.core import config
from bluemap.core.errors import MEMBER_METHOD, MEMBER_PROPERTY, map_dbus_error
from bluemap.core.log import get_logger
from bluemap.dbus.connection import close_bus, open_bus

logger = get_logger(__name__)


def _round_trip(
    invoke: Callable[[Any, float], Any],
    *,
    service: str,
    path: str,
    interface: str,
    member: str,
    member_kind: str,
    bus_type: str,
    bus=None,
    timeout_ms: Optional[int] = None,
):
    if timeout_ms is None:
        timeout_ms = config.DBUS_TIMEOUT_MS
    owned = bus is None
    if owned:
        bus = open_bus(bus_type)
    try:
        logger.debug("%s %s.%s on %s (%s)", member_kind, interface, member, path, service)
        remote = bus.get_object(service, path, introspect=False)
        return invoke(remote, timeout_ms / 1000.0)
    except dbus.exceptions.DBusException as exc:
        raise map_dbus_error(exc, interface, path, member, member_kind, timeout_ms) from exc
    finally:
        if owned:
            close_bus(bus)


def get_property(
    interface: str,
    object_path: str,
    name: str,
    *,
    service: str = BLUEZ_SERVICE_NAME,
    bus_type: str = config.BUS_SYSTEM,
    bus=None,
    timeout_ms: Optional[int] = None,
) -> Any:
    """Return the raw wire value of *interface*.*name* on *object_path*."""
    return _round_trip(
        lambda remote, timeout: remote.Get(
            interface, name, dbus_interface=DBUS_PROPERTIES, timeout=timeout
        ),
        service=service,
        path=object_path,
        interface=interface,
        member=name,
        member_kind=MEMBER_PROPERTY,
        bus_type=bus_type,
        bus=bus,
        timeout_ms=timeout_ms,
    )


def set_property(
    interface: str,
    object_path: str,
    name: str,
    value: Any,
    *,
    service: str = BLUEZ_SERVICE_NAME,
    bus_type: str = config.BUS_SYSTEM,
    bus=None,
    timeout_ms: Optional[int] = None,
) -> None:
    """Write *value* (already encoded) to *interface*.*name* on *object_path*."""
    _round_trip(
        lambda remote, timeout: remote.Set(
            interface, name, value, dbus_interface=DBUS_PROPERTIES, timeout=timeout
        ),
        service=service,
        path=object_path,
        interface=interface,
        member=name,
        member_kind=MEMBER_PROPERTY,
        bus_type=bus_type,
        bus=bus,
        timeout_ms=timeout_ms,
    )


def call_method(
    interface: str,
    object_path: str,
    method: str,
    *args: Any,
    service: str = BLUEZ_SERVICE_NAME,
    bus_type: str = config.BUS_SYSTEM,
    bus=None,
    timeout_ms: Optional[int] = None,
) -> Any:
    """Invoke *interface*.*method* and return its raw reply (``None`` for void methods)."""
    return _round_trip(
        lambda remote, timeout: getattr(remote, method)(
            *args, dbus_interface=interface, timeout=timeout
        ),
        service=service,
        path=object_path,
        interface=interface,
        member=method,
        member_kind=MEMBER_METHOD,
        bus_type=bus_type,
        bus=bus,
        timeout_ms=timeout_ms,
    )


def get_managed_objects(
    service: str = BLUEZ_SERVICE_NAME,
    *,
    root_path: str = BLUEZ_ROOT_PATH,
    bus_type: str = config.BUS_SYSTEM,
    bus=None,
    timeout_ms: Optional[int] = None,
):
    """Return the daemon's ``a{oa{sa{sv}}}`` object map in one round trip."""
    return call_method(
        DBUS_OM_IFACE,
        root_path,
        "GetManagedObjects",
        service=service,
        bus_type=bus_type,
        bus=bus,
        timeout_ms=timeout_ms,
    )
