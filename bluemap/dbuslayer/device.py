"""Handle for a remote Bluetooth peer (``org.bluez.Device1``)."""

from __future__ import annotations

from typing import Dict, List

from bluemap.ble_ops.conversion import (
    decode_bool,
    decode_byte_map,
    decode_int,
    decode_object_path,
    decode_string,
    decode_string_byte_map,
    decode_string_list,
    encode_bool,
    encode_string,
)
from bluemap.ble_ops.modalias import Modalias, parse_modalias
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.remote import RemoteEntity
from bluemap.dbuslayer.service import GattService

__all__ = ["Device"]


def _uint16(value):
    return decode_int(value, 16, signed=False)


def _int16(value):
    return decode_int(value, 16, signed=True)


class Device(RemoteEntity):
    KIND = manager.DEVICE

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def get_address(self) -> str:
        return self.get_property("Address", decode_string)

    def get_name(self) -> str:
        return self.get_property("Name", decode_string)

    def get_icon(self) -> str:
        return self.get_property("Icon", decode_string)

    def get_class(self) -> int:
        return self.get_property("Class", lambda v: decode_int(v, 32, signed=False))

    def get_appearance(self) -> int:
        return self.get_property("Appearance", _uint16)

    def get_uuids(self) -> List[str]:
        return self.get_property("UUIDs", decode_string_list)

    def is_paired(self) -> bool:
        return self.get_property("Paired", decode_bool)

    def is_connected(self) -> bool:
        return self.get_property("Connected", decode_bool)

    def is_trusted(self) -> bool:
        return self.get_property("Trusted", decode_bool)

    def set_trusted(self, value: bool) -> None:
        self.set_property("Trusted", encode_bool(value))

    def is_blocked(self) -> bool:
        return self.get_property("Blocked", decode_bool)

    def set_blocked(self, value: bool) -> None:
        self.set_property("Blocked", encode_bool(value))

    def get_alias(self) -> str:
        return self.get_property("Alias", decode_string)

    def set_alias(self, value: str) -> None:
        self.set_property("Alias", encode_string(value))

    def get_adapter(self) -> str:
        return self.get_property("Adapter", decode_object_path)

    def is_legacy_pairing(self) -> bool:
        return self.get_property("LegacyPairing", decode_bool)

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

    def get_rssi(self) -> int:
        return self.get_property("RSSI", _int16)

    def get_tx_power(self) -> int:
        return self.get_property("TxPower", _int16)

    def get_manufacturer_data(self) -> Dict[int, bytes]:
        return self.get_property("ManufacturerData", decode_byte_map)

    def get_service_data(self) -> Dict[str, bytes]:
        return self.get_property("ServiceData", decode_string_byte_map)

    def is_services_resolved(self) -> bool:
        return self.get_property("ServicesResolved", decode_bool)

    def get_gatt_services(self) -> List[str]:
        return manager.list_services(self.object_path)

    def get_services(self) -> List[GattService]:
        return [GattService(path) for path in self.get_gatt_services()]

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------
    def connect(self) -> None:
        self.call_method("Connect")

    def disconnect(self) -> None:
        self.call_method("Disconnect")

    def connect_profile(self, uuid: str) -> None:
        self.call_method("ConnectProfile", encode_string(uuid))

    def disconnect_profile(self, uuid: str) -> None:
        self.call_method("DisconnectProfile", encode_string(uuid))

    def pair(self) -> None:
        self.call_method("Pair")

    def cancel_pairing(self) -> None:
        self.call_method("CancelPairing")
