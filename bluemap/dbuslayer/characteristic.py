"""Simple abstraction of a GATT Characteristic as exposed by BlueZ.

Values are never cached: ``get_value`` re-reads the ``Value`` property and
``read_value`` performs a fresh ``ReadValue`` round trip every time.
"""

from __future__ import annotations

from typing import List, Optional

from bluemap.ble_ops.conversion import (
    decode_bool,
    decode_bytes,
    decode_object_path,
    decode_string,
    decode_string_list,
    encode_bytes,
    encode_offset_options,
)
from bluemap.core.log import print_and_log, LOG__DEBUG
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.descriptor import GattDescriptor
from bluemap.dbuslayer.remote import RemoteEntity

__all__ = ["GattCharacteristic"]


class GattCharacteristic(RemoteEntity):
    """Lightweight wrapper around the BlueZ *GattCharacteristic1* interface."""

    KIND = manager.GATT_CHARACTERISTIC

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def get_uuid(self) -> str:
        return self.get_property("UUID", decode_string)

    def get_service(self) -> str:
        return self.get_property("Service", decode_object_path)

    def get_value(self) -> bytes:
        return self.get_property("Value", decode_bytes)

    def is_notifying(self) -> bool:
        return self.get_property("Notifying", decode_bool)

    def get_flags(self) -> List[str]:
        return self.get_property("Flags", decode_string_list)

    def get_gatt_descriptors(self) -> List[str]:
        return manager.list_descriptors(self.object_path)

    def get_descriptors(self) -> List[GattDescriptor]:
        return [GattDescriptor(path) for path in self.get_gatt_descriptors()]

    # ------------------------------------------------------------------
    # Read / Write helpers
    # ------------------------------------------------------------------
    def read_value(self, offset: Optional[int] = None) -> bytes:
        raw = self.call_method("ReadValue", encode_offset_options(offset))
        result = decode_bytes(raw)
        print_and_log(
            f"[DEBUG] Read {len(result)} bytes from characteristic {self.object_path}",
            LOG__DEBUG,
        )
        return result

    def write_value(self, values, offset: Optional[int] = None) -> None:
        array = encode_bytes(values)
        self.call_method("WriteValue", array, encode_offset_options(offset))
        print_and_log(
            f"[DEBUG] Wrote {len(array)} bytes to characteristic {self.object_path}",
            LOG__DEBUG,
        )

    # ------------------------------------------------------------------
    # Notifications (BlueZ-side only; values are observed by re-reading)
    # ------------------------------------------------------------------
    def start_notify(self) -> None:
        self.call_method("StartNotify")

    def stop_notify(self) -> None:
        self.call_method("StopNotify")
