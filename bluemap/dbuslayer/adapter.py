"""
Adapter D-Bus Interface
Handle for a local Bluetooth controller (``org.bluez.Adapter1``).
"""

from __future__ import annotations

from typing import List

from bluemap.ble_ops.conversion import (
    decode_bool,
    decode_int,
    decode_string,
    decode_string_list,
    encode_bool,
    encode_object_path,
    encode_string,
    encode_uint32,
)
from bluemap.ble_ops.modalias import Modalias, parse_modalias
from bluemap.core.errors import NotFoundError
from bluemap.core.log import get_logger
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.device import Device
from bluemap.dbuslayer.remote import RemoteEntity

logger = get_logger(__name__)

__all__ = ["Adapter"]


class Adapter(RemoteEntity):
    """Core adapter class for Bluetooth operations."""

    KIND = manager.ADAPTER

    @classmethod
    def init(cls) -> "Adapter":
        """Return the first adapter BlueZ reports.

        Raises NotFoundError when the daemon exposes no adapter at all.
        """
        adapters = manager.list_adapters()
        if not adapters:
            raise NotFoundError("Bluetooth adapter")
        logger.debug("Using adapter %s", adapters[0])
        return cls(adapters[0])

    @classmethod
    def create_adapter(cls, object_path: str) -> "Adapter":
        """Return the adapter at *object_path* if BlueZ currently lists it."""
        for adapter in manager.list_adapters():
            if adapter == object_path:
                return cls(adapter)
        raise NotFoundError(f"Bluetooth adapter {object_path}")

    # Devices ------------------------------------------------------------
    def get_device_list(self) -> List[str]:
        return manager.list_devices(self.object_path)

    def get_devices(self) -> List[Device]:
        return [Device(path) for path in self.get_device_list()]

    def get_first_device(self) -> Device:
        devices = self.get_device_list()
        if not devices:
            raise NotFoundError(f"Device on {self.object_path}")
        return Device(devices[0])

    # Properties ---------------------------------------------------------
    def get_address(self) -> str:
        return self.get_property("Address", decode_string)

    def get_name(self) -> str:
        return self.get_property("Name", decode_string)

    def get_alias(self) -> str:
        return self.get_property("Alias", decode_string)

    def set_alias(self, value: str) -> None:
        self.set_property("Alias", encode_string(value))

    def get_class(self) -> int:
        return self.get_property("Class", lambda v: decode_int(v, 32, signed=False))

    def is_powered(self) -> bool:
        return self.get_property("Powered", decode_bool)

    def set_powered(self, value: bool) -> None:
        self.set_property("Powered", encode_bool(value))

    def is_discoverable(self) -> bool:
        return self.get_property("Discoverable", decode_bool)

    def set_discoverable(self, value: bool) -> None:
        self.set_property("Discoverable", encode_bool(value))

    def is_pairable(self) -> bool:
        return self.get_property("Pairable", decode_bool)

    def set_pairable(self, value: bool) -> None:
        self.set_property("Pairable", encode_bool(value))

    def get_pairable_timeout(self) -> int:
        return self.get_property("PairableTimeout", lambda v: decode_int(v, 32, signed=False))

    def set_pairable_timeout(self, value: int) -> None:
        self.set_property("PairableTimeout", encode_uint32(value))

    def get_discoverable_timeout(self) -> int:
        return self.get_property("DiscoverableTimeout", lambda v: decode_int(v, 32, signed=False))

    def set_discoverable_timeout(self, value: int) -> None:
        self.set_property("DiscoverableTimeout", encode_uint32(value))

    def is_discovering(self) -> bool:
        return self.get_property("Discovering", decode_bool)

    def get_uuids(self) -> List[str]:
        return self.get_property("UUIDs", decode_string_list)

    def get_modalias(self) -> Modalias:
        return self.get_property("Modalias", lambda v: parse_modalias(decode_string(v)))

    def get_vendor_id_source(self) -> str:
        return self.get_modalias().source

    def get_vendor_id(self) -> int:
        return self.get_modalias().vendor

    def get_product_id(self) -> int:
        return self.get_modalias().product

    def get_device_id(self) -> int:
        return self.get_modalias().device

    # Methods ------------------------------------------------------------
    def remove_device(self, device) -> None:
        path = getattr(device, "object_path", device)
        self.call_method("RemoveDevice", encode_object_path(path))
