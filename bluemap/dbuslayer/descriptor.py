"""Minimal wrapper for BlueZ GATT Descriptor objects."""

from __future__ import annotations

from typing import List, Optional

from bluemap.ble_ops.conversion import (
    decode_bytes,
    decode_object_path,
    decode_string,
    decode_string_list,
    encode_bytes,
    encode_offset_options,
)
from bluemap.core.log import print_and_log, LOG__DEBUG
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.remote import RemoteEntity

__all__ = ["GattDescriptor"]


class GattDescriptor(RemoteEntity):
    KIND = manager.GATT_DESCRIPTOR

    def get_uuid(self) -> str:
        return self.get_property("UUID", decode_string)

    def get_characteristic(self) -> str:
        return self.get_property("Characteristic", decode_object_path)

    def get_value(self) -> bytes:
        return self.get_property("Value", decode_bytes)

    def get_flags(self) -> List[str]:
        return self.get_property("Flags", decode_string_list)

    def read_value(self, offset: Optional[int] = None) -> bytes:
        raw = self.call_method("ReadValue", encode_offset_options(offset))
        return decode_bytes(raw)

    def write_value(self, values, offset: Optional[int] = None) -> None:
        array = encode_bytes(values)
        self.call_method("WriteValue", array, encode_offset_options(offset))
        print_and_log(
            f"[DEBUG] Wrote {len(array)} bytes to descriptor {self.object_path}", LOG__DEBUG
        )
