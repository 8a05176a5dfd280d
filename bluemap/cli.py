"""
Command-line interface for bluemap.
"""

import argparse
import sys
import time

# Ensure logging subsystem is initialised immediately
import bluemap.core.log  # noqa: F401

from . import __version__
from bluemap.ble_ops.conversion import convert__dbus_to_hex
from bluemap.ble_ops.modalias import format_modalias_info
from bluemap.bt_ref.constants import BLUEZ_NAMESPACE
from bluemap.bt_ref.utils import device_address_to_path, get_name_from_uuid
from bluemap.core import config
from bluemap.core.errors import BluemapError, NoSuchPropertyError, NotFoundError, TypeMismatchError
from bluemap.core.log import print_and_log, set_level, LOG__DEBUG, LOG__GENERAL
from bluemap.dbuslayer import (
    Adapter,
    Device,
    DiscoverySession,
    ObexSession,
    SessionTarget,
    TransferStatus,
)
from bluemap.dbuslayer import manager


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        prog="bluemap",
        description="bluemap - walk and drive BlueZ objects over D-Bus",
    )
    parser.add_argument("--version", action="version", version=f"bluemap {__version__}")
    parser.add_argument("--debug", action="store_true", help="Log debug records")

    subparsers = parser.add_subparsers(dest="mode", required=True, help="Operation mode")

    subparsers.add_parser("adapters", help="List adapter object paths")

    devices_parser = subparsers.add_parser("devices", help="List devices known to an adapter")
    devices_parser.add_argument("--adapter", help="Adapter object path (default: first adapter)")

    discover_parser = subparsers.add_parser("discover", help="Run discovery and list devices")
    discover_parser.add_argument("--adapter", help="Adapter object path (default: first adapter)")
    discover_parser.add_argument("--seconds", type=int, default=5, help="Polling rounds, one per second")
    discover_parser.add_argument("--uuid", action="append", default=[], help="Service UUID filter (repeatable)")

    info_parser = subparsers.add_parser("info", help="Show a device's properties")
    info_parser.add_argument("device", help="Device object path or bus address")

    gatt_parser = subparsers.add_parser("gatt", help="Walk a device's GATT database and read values")
    gatt_parser.add_argument("device", help="Device object path or bus address")
    gatt_parser.add_argument("--connect", action="store_true", help="Connect before walking")

    send_parser = subparsers.add_parser("send-file", help="Push a file over OBEX Object Push")
    send_parser.add_argument("device", help="Device object path or bus address")
    send_parser.add_argument("file", help="Local file to send")
    send_parser.add_argument(
        "--target",
        choices=[t.value for t in SessionTarget],
        default=SessionTarget.OPP.value,
        help="OBEX session target",
    )

    return parser.parse_args(args)


def _adapter_from(path):
    return Adapter.create_adapter(path) if path else Adapter.init()


def _device_from(target):
    """Accept an object path or a bus address on the default adapter."""
    if target.startswith("/"):
        return Device(target)
    return Device(device_address_to_path(target, BLUEZ_NAMESPACE + config.DEFAULT_ADAPTER))


def _cmd_adapters(_args):
    adapters = manager.list_adapters()
    if not adapters:
        raise NotFoundError("Bluetooth adapter")
    for path in adapters:
        print_and_log(path)
    return 0


def _cmd_devices(args):
    adapter = _adapter_from(args.adapter)
    for device in adapter.get_devices():
        print_and_log(f"{device.object_path} {device.get_alias()}")
    return 0


def _cmd_discover(args, sleep=time.sleep):
    adapter = _adapter_from(args.adapter)
    session = DiscoverySession.create_session(adapter)
    try:
        if args.uuid:
            session.set_discovery_filter(args.uuid)
        with session.discovering():
            for _ in range(max(args.seconds, 1)):
                if adapter.get_device_list():
                    break
                sleep(1.0)
    finally:
        session.close()

    devices = adapter.get_device_list()
    if not devices:
        raise NotFoundError("Device")
    print_and_log(f"{len(devices)} device(s) found")
    for path in devices:
        print_and_log(path)
    return 0


def _optional(getter, render=str):
    try:
        return render(getter())
    except (NoSuchPropertyError, TypeMismatchError) as exc:
        print_and_log(f"[*] {exc}", LOG__DEBUG)
        return "-"


def _cmd_info(args):
    device = _device_from(args.device)
    print_and_log(f"Device {device.object_path}")
    print_and_log(f"  Address: {_optional(device.get_address)}")
    print_and_log(f"  Alias: {_optional(device.get_alias)}")
    print_and_log(f"  Adapter: {_optional(device.get_adapter)}")
    print_and_log(f"  Connected: {_optional(device.is_connected)}")
    print_and_log(f"  RSSI: {_optional(device.get_rssi)}")
    print_and_log(f"  Modalias: {_optional(lambda: device.get_property('Modalias'), format_modalias_info)}")
    try:
        manufacturer_data = device.get_manufacturer_data()
    except NoSuchPropertyError:
        manufacturer_data = {}
    for company, data in manufacturer_data.items():
        print_and_log(f"  ManufacturerData[0x{company:04X}]: {convert__dbus_to_hex(data)}")
    return 0


def _read_or_error(handle):
    try:
        return handle.read_value().hex()
    except BluemapError as exc:
        return f"<{exc}>"


def _cmd_gatt(args):
    device = _device_from(args.device)
    if args.connect:
        device.connect()
    for service in device.get_services():
        uuid = service.get_uuid()
        print_and_log(f"{service.object_path} {uuid} ({get_name_from_uuid(uuid)})")
        for characteristic in service.get_characteristics():
            uuid = characteristic.get_uuid()
            print_and_log(f"  {characteristic.object_path} {uuid} ({get_name_from_uuid(uuid)})")
            print_and_log(f"    Value: {_read_or_error(characteristic)}")
            for descriptor in characteristic.get_descriptors():
                print_and_log(f"    {descriptor.object_path} {descriptor.get_uuid()}")
                print_and_log(f"      Value: {_read_or_error(descriptor)}")
    return 0


def _cmd_send_file(args):
    target = _device_from(args.device)
    with ObexSession.create_session(target, SessionTarget(args.target)) as session:
        transfer = session.send_file(args.file)
        print_and_log(f"[*] Sending {transfer.name} via {transfer.object_path}")
        status = transfer.wait_until_complete()
    if status is not TransferStatus.COMPLETE:
        print_and_log(f"[-] Transfer did not complete (status: {status.value if status else 'unknown'})")
        return 1
    print_and_log("[+] Transfer complete")
    return 0


_COMMANDS = {
    "adapters": _cmd_adapters,
    "devices": _cmd_devices,
    "discover": _cmd_discover,
    "info": _cmd_info,
    "gatt": _cmd_gatt,
    "send-file": _cmd_send_file,
}


def main(argv=None):
    args = parse_args(argv)
    if args.debug:
        set_level("DEBUG")
    print_and_log(f"[*] bluemap {args.mode} (timeout {config.DBUS_TIMEOUT_MS} ms)", LOG__DEBUG)
    try:
        return _COMMANDS[args.mode](args)
    except BluemapError as exc:
        print_and_log(f"[-] {exc}", LOG__GENERAL)
        return exc.code or 1


if __name__ == "__main__":
    sys.exit(main())
