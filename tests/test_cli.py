import dbus
import pytest

from bluemap import cli
from bluemap.bt_ref.constants import RESULT_ERR_NOT_FOUND

DEVICE_PATH = "/org/bluez/hci0/dev_AA_BB_CC_DD_EE_01"


def test_adapters_lists_paths(bluez_tree, capsys):
    assert cli.main(["adapters"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["/org/bluez/hci0", "/org/bluez/hci1"]


def test_adapters_without_any_adapter(daemon, capsys):
    assert cli.main(["adapters"]) == RESULT_ERR_NOT_FOUND
    assert "not found" in capsys.readouterr().out


def test_devices_defaults_to_first_adapter(bluez_tree, capsys):
    bluez_tree.objects["org.bluez"]["/org/bluez/hci0/dev_AA_BB_CC_DD_EE_03"]["org.bluez.Device1"]["Alias"] = (
        dbus.String("Scale")
    )
    assert cli.main(["devices"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        f"{DEVICE_PATH} Thermometer",
        "/org/bluez/hci0/dev_AA_BB_CC_DD_EE_03 Scale",
    ]


def test_info_accepts_bus_address(bluez_tree, capsys):
    assert cli.main(["info", "AA:BB:CC:DD:EE:01"]) == 0
    out = capsys.readouterr().out
    assert f"Device {DEVICE_PATH}" in out
    assert "Vendor: Unknown (0x1234)" in out
    assert "ManufacturerData[0x004C]: 0215" in out


def test_info_tolerates_missing_properties(bluez_tree, capsys):
    assert cli.main(["info", "/org/bluez/hci1/dev_AA_BB_CC_DD_EE_02"]) == 0
    out = capsys.readouterr().out
    assert "Alias: -" in out
    assert "Modalias: -" in out


def test_discover_brackets_discovery(bluez_tree, capsys):
    assert cli.main(["discover", "--seconds", "2", "--uuid", "180f"]) == 0
    methods = [call[3] for call in bluez_tree.calls if call[2] == "org.bluez.Adapter1"]
    assert methods == ["SetDiscoveryFilter", "StartDiscovery", "StopDiscovery"]
    assert "2 device(s) found" in capsys.readouterr().out


def test_gatt_walk_reports_read_failures(bluez_tree, capsys):
    bluez_tree.fail("org.bluez.GattCharacteristic1", "ReadValue", "org.bluez.Error.NotPermitted", "Read not permitted")
    assert cli.main(["gatt", DEVICE_PATH]) == 0
    out = capsys.readouterr().out
    assert "Battery Service" in out
    assert "Battery Level" in out
    assert "Read not permitted" in out


def test_timeout_maps_to_exit_code(bluez_tree, capsys):
    bluez_tree.silent = True
    code = cli.main(["adapters"])
    assert code not in (0, None)
    assert "timed out" in capsys.readouterr().out


def test_subcommand_required():
    with pytest.raises(SystemExit):
        cli.main([])


def test_info_on_object_without_device_interface(bluez_tree, capsys):
    assert cli.main(["info", "/org/bluez/hci0"]) == 0
    out = capsys.readouterr().out
    assert "Address: -" in out
    assert "Alias: -" in out
