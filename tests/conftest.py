from __future__ import annotations

import os
import tempfile

# Keep log and config files out of the real home directory; must run before
# bluemap is imported because its config module resolves paths at import.
_SANDBOX = tempfile.mkdtemp(prefix="bluemap-tests-")
os.environ["XDG_DATA_HOME"] = os.path.join(_SANDBOX, "data")
os.environ["XDG_CONFIG_HOME"] = os.path.join(_SANDBOX, "config")

from collections import OrderedDict  # noqa: E402
from typing import Any, Callable, Dict, List, Tuple  # noqa: E402

import dbus  # noqa: E402
import dbus.exceptions  # noqa: E402
import pytest  # noqa: E402

from bluemap.dbus.connection import set_bus_factory  # noqa: E402

BLUEZ = "org.bluez"
OBEX = "org.bluez.obex"
PROPS = "org.freedesktop.DBus.Properties"


def dbus_error(name: str, message: str = "") -> dbus.exceptions.DBusException:
    return dbus.exceptions.DBusException(message or name, name=name)


class FakeDaemon:
    """In-memory stand-in for bluetoothd/obexd reachable through FakeBus."""

    def __init__(self) -> None:
        self.objects: Dict[str, "OrderedDict[str, Dict[str, Dict[str, Any]]]"] = {
            BLUEZ: OrderedDict(),
            OBEX: OrderedDict(),
        }
        self.handlers: Dict[Tuple[str, str], Callable[..., Any]] = {}
        self.errors: Dict[Tuple[str, str], dbus.exceptions.DBusException] = {}
        self.calls: List[Tuple[str, str, str, str, tuple]] = []
        self.timeouts: List[float] = []
        self.silent = False
        self.opened: List[str] = []
        self.closed = 0

    def add_object(self, path: str, interface: str, props: Dict[str, Any] | None = None, service: str = BLUEZ):
        entry = self.objects[service].setdefault(path, OrderedDict())
        entry[interface] = dict(props or {})
        return path

    def on(self, interface: str, member: str, handler: Callable[..., Any]) -> None:
        self.handlers[(interface, member)] = handler

    def fail(self, interface: str, member: str, name: str, message: str = "") -> None:
        self.errors[(interface, member)] = dbus_error(name, message)

    def _enter(self, service, path, interface, member, args, timeout):
        self.timeouts.append(timeout)
        self.calls.append((service, path, interface, member, args))
        if self.silent:
            raise dbus_error(
                "org.freedesktop.DBus.Error.NoReply",
                "Did not receive a reply. Possible causes include: the remote application did not send a reply",
            )
        error = self.errors.get((interface, member))
        if error is not None:
            raise error

    def get(self, service, path, interface, name, timeout):
        self._enter(service, path, PROPS, "Get", (interface, name), timeout)
        error = self.errors.get((interface, name))
        if error is not None:
            raise error
        obj = self.objects[service].get(path)
        if obj is None:
            raise dbus_error("org.freedesktop.DBus.Error.UnknownObject", f"Method \"Get\" doesn't exist on {path}")
        if interface not in obj:
            raise dbus_error("org.freedesktop.DBus.Error.InvalidArgs", f"No such interface '{interface}'")
        if name not in obj[interface]:
            raise dbus_error("org.freedesktop.DBus.Error.InvalidArgs", f"No such property '{name}'")
        return obj[interface][name]

    def set(self, service, path, interface, name, value, timeout):
        self._enter(service, path, PROPS, "Set", (interface, name, value), timeout)
        error = self.errors.get((interface, name))
        if error is not None:
            raise error
        obj = self.objects[service].get(path)
        if obj is None or interface not in obj:
            raise dbus_error("org.freedesktop.DBus.Error.UnknownObject", path)
        obj[interface][name] = value

    def invoke(self, service, path, interface, method, args, timeout):
        self._enter(service, path, interface, method, args, timeout)
        if interface == "org.freedesktop.DBus.ObjectManager" and method == "GetManagedObjects":
            return OrderedDict(
                (p, OrderedDict((i, dict(props)) for i, props in ifaces.items()))
                for p, ifaces in self.objects[service].items()
            )
        handler = self.handlers.get((interface, method))
        if handler is not None:
            return handler(path, *args)
        return None

    def methods_called(self, method: str) -> List[Tuple[str, str, str, str, tuple]]:
        return [call for call in self.calls if call[3] == method]


class FakeRemote:
    def __init__(self, daemon: FakeDaemon, service: str, path: str) -> None:
        self._daemon = daemon
        self._service = service
        self._path = path

    def Get(self, interface, name, dbus_interface=None, timeout=None):  # noqa: N802
        assert dbus_interface == PROPS
        return self._daemon.get(self._service, self._path, interface, name, timeout)

    def Set(self, interface, name, value, dbus_interface=None, timeout=None):  # noqa: N802
        assert dbus_interface == PROPS
        return self._daemon.set(self._service, self._path, interface, name, value, timeout)

    def __getattr__(self, method):
        def _call(*args, dbus_interface=None, timeout=None):
            return self._daemon.invoke(self._service, self._path, dbus_interface, method, args, timeout)

        return _call


class FakeBus:
    def __init__(self, daemon: FakeDaemon, bus_type: str) -> None:
        self.daemon = daemon
        self.bus_type = bus_type
        self.closed = False

    def get_object(self, service, path, introspect=True):
        return FakeRemote(self.daemon, service, path)

    def close(self):
        self.closed = True
        self.daemon.closed += 1


@pytest.fixture
def daemon():
    fake = FakeDaemon()

    def factory(bus_type):
        fake.opened.append(bus_type)
        return FakeBus(fake, bus_type)

    set_bus_factory(factory)
    try:
        yield fake
    finally:
        set_bus_factory(None)


@pytest.fixture
def bluez_tree(daemon):
    """Two adapters, three devices, one GATT service with two characteristics."""
    daemon.add_object("/org/bluez", "org.bluez.AgentManager1")
    daemon.add_object("/org/bluez/hci0", "org.bluez.Adapter1", {
        "Address": dbus.String("00:11:22:33:44:55"),
        "Alias": dbus.String("hci0-alias"),
        "Powered": dbus.Boolean(True),
        "Modalias": dbus.String("usb:v1D6Bp0246d0540"),
    })
    daemon.add_object("/org/bluez/hci1", "org.bluez.Adapter1", {
        "Address": dbus.String("66:77:88:99:AA:BB"),
    })
    daemon.add_object("/org/bluez/hci0/dev_AA_BB_CC_DD_EE_01", "org.bluez.Device1", {
        "Address": dbus.String("AA:BB:CC:DD:EE:01"),
        "Adapter": dbus.ObjectPath("/org/bluez/hci0"),
        "Alias": dbus.String("Thermometer"),
        "Connected": dbus.Boolean(False),
        "RSSI": dbus.Int16(-61),
        "Modalias": dbus.String("bluetooth:v1234p5678dABCD"),
        "ManufacturerData": dbus.Dictionary(
            {dbus.UInt16(0x004C): dbus.Array([dbus.Byte(2), dbus.Byte(21)], signature="y")},
            signature="qv",
        ),
        "UUIDs": dbus.Array([dbus.String("0000180f-0000-1000-8000-00805f9b34fb")], signature="s"),
    })
    daemon.add_object("/org/bluez/hci1/dev_AA_BB_CC_DD_EE_02", "org.bluez.Device1", {
        "Address": dbus.String("AA:BB:CC:DD:EE:02"),
        "Adapter": dbus.ObjectPath("/org/bluez/hci1"),
    })
    daemon.add_object("/org/bluez/hci0/dev_AA_BB_CC_DD_EE_03", "org.bluez.Device1", {
        "Address": dbus.String("AA:BB:CC:DD:EE:03"),
        "Adapter": dbus.ObjectPath("/org/bluez/hci0"),
    })
    service = "/org/bluez/hci0/dev_AA_BB_CC_DD_EE_01/service000c"
    daemon.add_object(service, "org.bluez.GattService1", {
        "UUID": dbus.String("0000180f-0000-1000-8000-00805f9b34fb"),
        "Device": dbus.ObjectPath("/org/bluez/hci0/dev_AA_BB_CC_DD_EE_01"),
        "Primary": dbus.Boolean(True),
        "Includes": dbus.Array([], signature="o"),
    })
    for handle in ("000d", "0010"):
        daemon.add_object(f"{service}/char{handle}", "org.bluez.GattCharacteristic1", {
            "UUID": dbus.String("00002a19-0000-1000-8000-00805f9b34fb"),
            "Service": dbus.ObjectPath(service),
            "Flags": dbus.Array([dbus.String("read"), dbus.String("notify")], signature="s"),
            "Value": dbus.Array([dbus.Byte(0x5A)], signature="y"),
        })
    daemon.add_object(f"{service}/char000d/desc000f", "org.bluez.GattDescriptor1", {
        "UUID": dbus.String("00002902-0000-1000-8000-00805f9b34fb"),
        "Characteristic": dbus.ObjectPath(f"{service}/char000d"),
    })
    return daemon
