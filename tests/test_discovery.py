import dbus
import pytest

from bluemap.core.errors import RemoteRejectedError
from bluemap.dbuslayer import Adapter, DiscoverySession

ADAPTER_IFACE = "org.bluez.Adapter1"


def _methods(daemon):
    return [call[3] for call in daemon.calls]


def test_create_session_makes_no_daemon_call(bluez_tree):
    session = DiscoverySession.create_session(Adapter("/org/bluez/hci0"))
    assert session.adapter_path == "/org/bluez/hci0"
    assert bluez_tree.calls == []
    assert bluez_tree.opened == ["system"]


def test_start_and_stop_share_the_session_connection(bluez_tree):
    session = DiscoverySession.create_session("/org/bluez/hci0")
    session.start_discovery()
    session.stop_discovery()
    assert _methods(bluez_tree) == ["StartDiscovery", "StopDiscovery"]
    assert all(call[1] == "/org/bluez/hci0" and call[2] == ADAPTER_IFACE for call in bluez_tree.calls)
    assert bluez_tree.opened == ["system"]
    session.close()
    assert bluez_tree.closed == 1


def test_stop_without_start_is_forwarded(bluez_tree):
    session = DiscoverySession.create_session("/org/bluez/hci0")
    session.stop_discovery()
    assert _methods(bluez_tree) == ["StopDiscovery"]


def test_daemon_refusal_surfaces_as_remote_rejected(bluez_tree):
    bluez_tree.fail(ADAPTER_IFACE, "StopDiscovery", "org.bluez.Error.Failed", "No discovery started")
    session = DiscoverySession.create_session("/org/bluez/hci0")
    with pytest.raises(RemoteRejectedError):
        session.stop_discovery()


def test_discovering_context_always_stops(bluez_tree):
    session = DiscoverySession.create_session("/org/bluez/hci0")
    with pytest.raises(RuntimeError):
        with session.discovering():
            raise RuntimeError("boom")
    assert _methods(bluez_tree) == ["StartDiscovery", "StopDiscovery"]


def test_set_discovery_filter_encoding(bluez_tree):
    session = DiscoverySession.create_session("/org/bluez/hci0")
    session.set_discovery_filter(["0000180f-0000-1000-8000-00805f9b34fb"], rssi=-70, pathloss=20)
    (_, _, _, _, (discovery_filter,)), = bluez_tree.methods_called("SetDiscoveryFilter")
    assert discovery_filter.signature == "sv"
    assert discovery_filter["UUIDs"].signature == "s"
    assert list(discovery_filter["UUIDs"]) == ["0000180f-0000-1000-8000-00805f9b34fb"]
    assert isinstance(discovery_filter["RSSI"], dbus.Int16)
    assert isinstance(discovery_filter["Pathloss"], dbus.UInt16)


def test_set_discovery_filter_defaults_to_empty_uuid_list(bluez_tree):
    session = DiscoverySession.create_session("/org/bluez/hci0")
    session.set_discovery_filter()
    (_, _, _, _, (discovery_filter,)), = bluez_tree.methods_called("SetDiscoveryFilter")
    assert set(discovery_filter.keys()) == {"UUIDs"}
    assert list(discovery_filter["UUIDs"]) == []
