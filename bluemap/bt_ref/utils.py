"""
Bluetooth utility functions.
"""

from . import constants

__all__ = [
    "device_address_to_path",
    "get_name_from_uuid",
]


def device_address_to_path(bdaddr, adapter_path):
    # e.g.convert 12:34:44:00:66:D5 on adapter hci0 to /org/bluez/hci0/dev_12_34_44_00_66_D5
    path = adapter_path + "/dev_" + bdaddr.upper().replace(":", "_")
    return path


def get_name_from_uuid(uuid):
    return constants.UUID_NAMES.get(str(uuid).lower(), "Unknown")
