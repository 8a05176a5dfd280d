"""Simple GATT Service handle (``org.bluez.GattService1``)."""

from __future__ import annotations

from typing import List

from bluemap.ble_ops.conversion import (
    decode_bool,
    decode_object_path,
    decode_object_path_list,
    decode_string,
)
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.characteristic import GattCharacteristic
from bluemap.dbuslayer.remote import RemoteEntity

__all__ = ["GattService"]


class GattService(RemoteEntity):
    KIND = manager.GATT_SERVICE

    def get_uuid(self) -> str:
        return self.get_property("UUID", decode_string)

    def is_primary(self) -> bool:
        return self.get_property("Primary", decode_bool)

    def get_device(self) -> str:
        return self.get_property("Device", decode_object_path)

    def get_includes(self) -> List[str]:
        return self.get_property("Includes", decode_object_path_list)

    def get_gatt_characteristics(self) -> List[str]:
        return manager.list_characteristics(self.object_path)

    def get_characteristics(self) -> List[GattCharacteristic]:
        """Get the characteristics for this service.

        Returns
        -------
        list
            List of GattCharacteristic handles, in the order BlueZ lists them
        """
        return [GattCharacteristic(path) for path in self.get_gatt_characteristics()]
