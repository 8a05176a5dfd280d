"""Discovery session scoped to one adapter.

A session is a thin bracket around ``StartDiscovery``/``StopDiscovery``.  It
keeps nothing but the adapter path and its own private system-bus
connection, so it cannot tell whether discovery is currently running and does
not try to: a second ``start_discovery`` or a ``stop_discovery`` without a
prior start goes straight to BlueZ, which decides whether that is an error.

Discovery is *not* stopped when a session is dropped.  Callers either call
``stop_discovery`` themselves or use the :meth:`DiscoverySession.discovering`
context manager, which always stops on exit.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

import dbus

from bluemap.bt_ref.constants import ADAPTER_INTERFACE, BLUEZ_SERVICE_NAME
from bluemap.ble_ops.conversion import (
    decode_object_path,
    encode_int16,
    encode_options,
    encode_string,
    encode_uint16,
)
from bluemap.core import config
from bluemap.core.log import print_and_log, LOG__DEBUG
from bluemap.dbus import proxy
from bluemap.dbus.connection import close_bus, open_bus

__all__ = ["DiscoverySession"]


class DiscoverySession:
    """StartDiscovery/StopDiscovery bracket for the adapter at *adapter_path*."""

    def __init__(self, adapter_path: str, bus):
        self.adapter_path = decode_object_path(adapter_path)
        self._bus = bus

    @classmethod
    def create_session(cls, adapter) -> "DiscoverySession":
        """Open a dedicated connection for *adapter* (handle or path); no daemon call."""
        adapter_path = getattr(adapter, "object_path", adapter)
        return cls(adapter_path, open_bus(config.BUS_SYSTEM))

    def _call(self, method: str, *args):
        return proxy.call_method(
            ADAPTER_INTERFACE,
            self.adapter_path,
            method,
            *args,
            service=BLUEZ_SERVICE_NAME,
            bus_type=config.BUS_SYSTEM,
            bus=self._bus,
        )

    def start_discovery(self) -> None:
        self._call("StartDiscovery")
        print_and_log(f"[*] Discovery started on {self.adapter_path}", LOG__DEBUG)

    def stop_discovery(self) -> None:
        self._call("StopDiscovery")
        print_and_log(f"[*] Discovery stopped on {self.adapter_path}", LOG__DEBUG)

    def set_discovery_filter(
        self,
        uuids: Optional[List[str]] = None,
        rssi: Optional[int] = None,
        pathloss: Optional[int] = None,
    ) -> None:
        """Restrict discovery to *uuids* and/or an RSSI or pathloss threshold."""
        discovery_filter = {
            "UUIDs": dbus.Array([encode_string(u) for u in (uuids or [])], signature="s")
        }
        if rssi is not None:
            discovery_filter["RSSI"] = encode_int16(rssi)
        if pathloss is not None:
            discovery_filter["Pathloss"] = encode_uint16(pathloss)
        self._call("SetDiscoveryFilter", encode_options(discovery_filter))

    @contextmanager
    def discovering(self) -> Iterator["DiscoverySession"]:
        """Start discovery for the ``with`` block and always stop it afterwards."""
        self.start_discovery()
        try:
            yield self
        finally:
            self.stop_discovery()

    def close(self) -> None:
        """Release the session's bus connection (does not stop discovery)."""
        if self._bus is not None:
            close_bus(self._bus)
            self._bus = None

    def __repr__(self) -> str:
        return f"DiscoverySession({self.adapter_path!r})"
