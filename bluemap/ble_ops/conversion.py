"""bluemap.ble_ops.conversion – narrowing and widening of D-Bus wire values.

Property reads and method replies arrive as dbus-python types.  The
``decode_*`` helpers narrow them to plain Python values of one expected shape
and raise :class:`~bluemap.core.errors.TypeMismatchError` otherwise.  The
``encode_*`` helpers do the inverse for method arguments and property writes
so the daemon always receives the exact D-Bus signature it expects.
"""
from __future__ import annotations

import binascii as _binascii
from typing import Any, Dict, List, Mapping

import dbus

from bluemap.core.errors import TypeMismatchError

# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _is_boolean(value: Any) -> bool:
    return isinstance(value, (bool, dbus.Boolean))


def decode_bool(value: Any) -> bool:
    if not _is_boolean(value):
        raise TypeMismatchError("boolean", value)
    return bool(value)


def decode_int(value: Any, bits: int = 32, signed: bool = True) -> int:
    """Return *value* as ``int`` after checking it fits the given width."""
    if _is_boolean(value) or not isinstance(value, int):
        raise TypeMismatchError(f"{'int' if signed else 'uint'}{bits}", value)
    value = int(value)
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise TypeMismatchError(f"{'int' if signed else 'uint'}{bits}", value)
    return value


def decode_byte(value: Any) -> int:
    return decode_int(value, bits=8, signed=False)


def decode_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError("string", value)
    return str(value)


def decode_object_path(value: Any) -> str:
    if not isinstance(value, str) or not value.startswith("/"):
        raise TypeMismatchError("object path", value)
    return str(value)


def decode_string_list(value: Any) -> List[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise TypeMismatchError("array of strings", value)
    return [decode_string(item) for item in value]


def decode_object_path_list(value: Any) -> List[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise TypeMismatchError("array of object paths", value)
    return [decode_object_path(item) for item in value]


def decode_bytes(value: Any) -> bytes:
    """Return a byte-array value (``ay``) as ``bytes``."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, (list, tuple)):
        try:
            return bytes(decode_byte(item) for item in value)
        except TypeMismatchError:
            raise TypeMismatchError("array of bytes", value) from None
    raise TypeMismatchError("array of bytes", value)


def decode_byte_map(value: Any) -> Dict[int, bytes]:
    """Decode ``a{qv}`` dictionaries such as *ManufacturerData*."""
    if not isinstance(value, Mapping):
        raise TypeMismatchError("dictionary of uint16 to bytes", value)
    return {decode_int(k, bits=16, signed=False): decode_bytes(v) for k, v in value.items()}


def decode_string_byte_map(value: Any) -> Dict[str, bytes]:
    """Decode ``a{sv}`` dictionaries such as *ServiceData*."""
    if not isinstance(value, Mapping):
        raise TypeMismatchError("dictionary of string to bytes", value)
    return {decode_string(k): decode_bytes(v) for k, v in value.items()}


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_bool(value: Any) -> dbus.Boolean:
    if not _is_boolean(value):
        raise TypeMismatchError("boolean", value)
    return dbus.Boolean(bool(value))


def encode_string(value: Any) -> dbus.String:
    if not isinstance(value, str):
        raise TypeMismatchError("string", value)
    return dbus.String(value)


def encode_object_path(value: Any) -> dbus.ObjectPath:
    return dbus.ObjectPath(decode_object_path(value))


def encode_int16(value: Any) -> dbus.Int16:
    return dbus.Int16(decode_int(value, bits=16, signed=True))


def encode_uint16(value: Any) -> dbus.UInt16:
    return dbus.UInt16(decode_int(value, bits=16, signed=False))


def encode_uint32(value: Any) -> dbus.UInt32:
    return dbus.UInt32(decode_int(value, bits=32, signed=False))


def encode_bytes(values: Any) -> dbus.Array:
    raw = decode_bytes(values)
    return dbus.Array([dbus.Byte(b) for b in raw], signature="y")


def encode_options(options: Mapping[str, Any] | None = None) -> dbus.Dictionary:
    """Build an ``a{sv}`` dictionary; str/bool values are tagged explicitly."""
    result = dbus.Dictionary({}, signature="sv")
    for key, value in (options or {}).items():
        if isinstance(value, (bool, dbus.Boolean)):
            value = dbus.Boolean(bool(value))
        elif isinstance(value, str) and not isinstance(value, (dbus.ObjectPath, dbus.Signature)):
            value = dbus.String(value)
        result[encode_string(key)] = value
    return result


def encode_offset_options(offset: int | None) -> dbus.Dictionary:
    """Options dictionary for GATT ReadValue/WriteValue."""
    if offset is None:
        return encode_options()
    return encode_options({"offset": encode_uint16(offset)})


def convert__dbus_to_hex(string_byte_array):  # noqa: D401
    """Return hex string (lowercase, no prefix) of byte-array."""
    if not string_byte_array:
        return ""
    return _binascii.hexlify(bytes(string_byte_array)).decode()
