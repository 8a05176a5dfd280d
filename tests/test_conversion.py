import dbus
import pytest

from bluemap.ble_ops.conversion import (
    convert__dbus_to_hex,
    decode_bool,
    decode_byte_map,
    decode_bytes,
    decode_int,
    decode_object_path,
    decode_object_path_list,
    decode_string,
    decode_string_list,
    encode_bool,
    encode_bytes,
    encode_int16,
    encode_offset_options,
    encode_options,
    encode_string,
    encode_uint16,
)
from bluemap.ble_ops.modalias import Modalias, format_modalias_info, parse_modalias
from bluemap.core.errors import TypeMismatchError


def test_decode_bool_accepts_dbus_boolean():
    assert decode_bool(dbus.Boolean(True)) is True
    assert decode_bool(False) is False


@pytest.mark.parametrize("value", [1, "true", dbus.String("yes"), None])
def test_decode_bool_rejects_other_shapes(value):
    with pytest.raises(TypeMismatchError):
        decode_bool(value)


def test_decode_int_checks_width_and_sign():
    assert decode_int(dbus.Int16(-61), 16) == -61
    assert decode_int(dbus.UInt16(0xFFFF), 16, signed=False) == 0xFFFF
    with pytest.raises(TypeMismatchError):
        decode_int(0x10000, 16, signed=False)
    with pytest.raises(TypeMismatchError):
        decode_int(-1, 32, signed=False)


def test_decode_int_rejects_booleans_and_strings():
    with pytest.raises(TypeMismatchError):
        decode_int(dbus.Boolean(True))
    with pytest.raises(TypeMismatchError):
        decode_int("12")


def test_decode_string_and_paths():
    assert decode_string(dbus.String("hci0-alias")) == "hci0-alias"
    assert decode_object_path(dbus.ObjectPath("/org/bluez/hci0")) == "/org/bluez/hci0"
    with pytest.raises(TypeMismatchError):
        decode_string(42)
    with pytest.raises(TypeMismatchError):
        decode_object_path("org/bluez/hci0")


def test_decode_lists():
    uuids = dbus.Array([dbus.String("a"), dbus.String("b")], signature="s")
    assert decode_string_list(uuids) == ["a", "b"]
    assert decode_object_path_list(dbus.Array([], signature="o")) == []
    with pytest.raises(TypeMismatchError):
        decode_string_list("ab")
    with pytest.raises(TypeMismatchError):
        decode_object_path_list([dbus.String("not-a-path")])


def test_decode_bytes_from_byte_array_and_list():
    assert decode_bytes(dbus.Array([dbus.Byte(1), dbus.Byte(255)], signature="y")) == b"\x01\xff"
    assert decode_bytes(dbus.ByteArray(b"\x00\x10")) == b"\x00\x10"
    with pytest.raises(TypeMismatchError):
        decode_bytes([256])
    with pytest.raises(TypeMismatchError):
        decode_bytes("0x01")


def test_decode_byte_map():
    value = dbus.Dictionary(
        {dbus.UInt16(0x004C): dbus.Array([dbus.Byte(2), dbus.Byte(21)], signature="y")},
        signature="qv",
    )
    assert decode_byte_map(value) == {0x004C: b"\x02\x15"}
    with pytest.raises(TypeMismatchError):
        decode_byte_map([1, 2])


def test_encoders_tag_wire_types():
    assert isinstance(encode_bool(True), dbus.Boolean)
    assert isinstance(encode_string("x"), dbus.String)
    assert isinstance(encode_int16(-20), dbus.Int16)
    assert isinstance(encode_uint16(20), dbus.UInt16)
    array = encode_bytes([1, 2, 3])
    assert array.signature == "y"
    assert [int(b) for b in array] == [1, 2, 3]
    with pytest.raises(TypeMismatchError):
        encode_string(5)
    with pytest.raises(TypeMismatchError):
        encode_int16(40000)


def test_encode_options_builds_string_variant_dictionary():
    options = encode_options({"Target": "opp", "Flag": True})
    assert options.signature == "sv"
    assert isinstance(options["Target"], dbus.String)
    assert isinstance(options["Flag"], dbus.Boolean)


def test_offset_options():
    assert dict(encode_offset_options(None)) == {}
    options = encode_offset_options(4)
    assert isinstance(options["offset"], dbus.UInt16)
    assert int(options["offset"]) == 4


def test_convert_to_hex():
    assert convert__dbus_to_hex(b"\x5a\x01") == "5a01"
    assert convert__dbus_to_hex(b"") == ""


def test_parse_modalias_splits_identifiers():
    assert parse_modalias("bluetooth:v1234p5678dABCD") == Modalias("bluetooth", 0x1234, 0x5678, 0xABCD)
    assert parse_modalias(dbus.String("usb:v1D6Bp0246d0540")).vendor == 0x1D6B


@pytest.mark.parametrize(
    "value",
    [
        "bluetooth",
        "bluetooth:",
        ":v1234p5678dABCD",
        "bluetooth:v123p5678dABCD",
        "bluetooth:v1234x5678dABCD",
        "bluetooth:v1234p5678dABCDE",
        "bluetooth:vZZZZp5678dABCD",
        42,
    ],
)
def test_parse_modalias_rejects_malformed(value):
    with pytest.raises(TypeMismatchError):
        parse_modalias(value)


def test_format_modalias_info_names_known_vendor():
    text = format_modalias_info("bluetooth:v004Cp0302d0100")
    assert "Apple, Inc." in text
    assert "Bluetooth SIG" in text
    assert "Product: 0x0302" in text
