"""Object-path identity shared by every domain handle.

A handle is nothing but an object path plus the :class:`EntityKind` of the
class it belongs to.  It holds no connection: every property read, write or
method call goes through :mod:`bluemap.dbus.proxy` which opens a fresh one.
Two handles are equal when they are of the same kind and name the same path.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from bluemap.ble_ops.conversion import decode_object_path
from bluemap.dbus import proxy
from bluemap.dbuslayer.manager import EntityKind

T = TypeVar("T")

__all__ = ["RemoteEntity"]


class RemoteEntity:
    """Base class for Adapter, Device, GATT and OBEX handles."""

    KIND: EntityKind

    __slots__ = ("_object_path", "_bus")

    def __init__(self, object_path: str, bus=None):
        self._object_path = decode_object_path(object_path)
        # Only OBEX transfers reuse their session's connection
        self._bus = bus

    @property
    def object_path(self) -> str:
        return self._object_path

    @property
    def interface(self) -> str:
        return self.KIND.interface

    def get_id(self) -> str:
        return self._object_path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RemoteEntity):
            return NotImplemented
        return self.KIND == other.KIND and self._object_path == other._object_path

    def __hash__(self) -> int:
        return hash((self.KIND.interface, self._object_path))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._object_path!r})"

    # ------------------------------------------------------------------
    # Dispatch through the proxy
    # ------------------------------------------------------------------
    def _target(self) -> dict:
        return {"service": self.KIND.service, "bus_type": self.KIND.bus_type, "bus": self._bus}

    def get_property(self, name: str, decoder: Optional[Callable[[Any], T]] = None):
        """Read *name* on this object's interface, narrowed by *decoder* if given."""
        value = proxy.get_property(self.KIND.interface, self._object_path, name, **self._target())
        return decoder(value) if decoder is not None else value

    def set_property(self, name: str, value: Any) -> None:
        proxy.set_property(self.KIND.interface, self._object_path, name, value, **self._target())

    def call_method(self, method: str, *args: Any, interface: Optional[str] = None):
        return proxy.call_method(
            interface or self.KIND.interface, self._object_path, method, *args, **self._target()
        )
