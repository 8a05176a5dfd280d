#!/usr/bin/python3
"""Modalias parsing utilities for bluemap.

BlueZ exposes a device's vendor/product/version triple through the
``Modalias`` property in the Linux kernel's modalias format, e.g.
``bluetooth:v004Cp0302d0100`` or ``usb:v1D6Bp0246d0540``.

For more information on modalias format, see:
https://wiki.archlinux.org/title/Modalias
"""
from __future__ import annotations

import re
from typing import NamedTuple

from bluemap.core.errors import TypeMismatchError

# Second segment is exactly "v" + 4 hex, "p" + 4 hex, "d" + 4 hex
_IDS_RX = re.compile(r"^v([0-9A-Fa-f]{4})p([0-9A-Fa-f]{4})d([0-9A-Fa-f]{4})$")

# Vendor ID sources as published by the Device ID profile
_SOURCES = {
    "bluetooth": "Bluetooth SIG",
    "usb": "USB Implementer's Forum",
}

_VENDORS = {
    0x004C: "Apple, Inc.",
    0x0006: "Microsoft",
    0x0075: "Samsung Electronics Co. Ltd.",
    0x00E0: "Google",
    0x1D6B: "Linux Foundation",
    0x8086: "Intel Corporation",
}


class Modalias(NamedTuple):
    source: str
    vendor: int
    product: int
    device: int


def parse_modalias(modalias: str) -> Modalias:
    """Split *modalias* into its source and three 16-bit identifiers.

    Raises
    ------
    TypeMismatchError
        If the value is not a string of the form ``source:vXXXXpXXXXdXXXX``.
    """
    if not isinstance(modalias, str):
        raise TypeMismatchError("modalias string", modalias)
    source, sep, ids = modalias.partition(":")
    if not sep or not source:
        raise TypeMismatchError("modalias 'source:vXXXXpXXXXdXXXX'", modalias)
    match = _IDS_RX.match(ids)
    if match is None:
        raise TypeMismatchError("modalias 'source:vXXXXpXXXXdXXXX'", modalias)
    vendor, product, device = (int(group, 16) for group in match.groups())
    return Modalias(source, vendor, product, device)


def format_modalias_info(modalias: str) -> str:
    """Format modalias information for display.

    Args:
        modalias: A modalias string (e.g., 'bluetooth:v004Cp0302d0100')

    Returns:
        str: Formatted modalias information string
    """
    info = parse_modalias(modalias)
    vendor_name = _VENDORS.get(info.vendor, f"Unknown (0x{info.vendor:04X})")
    source_name = _SOURCES.get(info.source, info.source)
    return (f"{modalias} (Source: {source_name}, Vendor: {vendor_name}, "
            f"Product: 0x{info.product:04X}, Device ID: 0x{info.device:04X})")
