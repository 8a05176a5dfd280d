#!/usr/bin/python3

# D-Bus interfaces
DBUS_PROPERTIES = "org.freedesktop.DBus.Properties"
DBUS_OM_IFACE = "org.freedesktop.DBus.ObjectManager"

# BlueZ
BLUEZ_SERVICE_NAME = "org.bluez"
BLUEZ_NAMESPACE = "/org/bluez/"
BLUEZ_ROOT_PATH = "/"

# Adapter and Device Interfaces
ADAPTER_INTERFACE = BLUEZ_SERVICE_NAME + ".Adapter1"
DEVICE_INTERFACE = BLUEZ_SERVICE_NAME + ".Device1"

# GATT Interfaces
GATT_SERVICE_INTERFACE = BLUEZ_SERVICE_NAME + ".GattService1"
GATT_CHARACTERISTIC_INTERFACE = BLUEZ_SERVICE_NAME + ".GattCharacteristic1"
GATT_DESCRIPTOR_INTERFACE = BLUEZ_SERVICE_NAME + ".GattDescriptor1"

# OBEX (obexd lives on the session bus)
OBEX_SERVICE_NAME = BLUEZ_SERVICE_NAME + ".obex"
OBEX_ROOT_PATH = "/org/bluez/obex"
OBEX_CLIENT_INTERFACE = OBEX_SERVICE_NAME + ".Client1"
OBEX_OBJECT_PUSH_INTERFACE = OBEX_SERVICE_NAME + ".ObjectPush1"
OBEX_TRANSFER_INTERFACE = OBEX_SERVICE_NAME + ".Transfer1"
OBEX_SESSION_INTERFACE = OBEX_SERVICE_NAME + ".Session1"

# Back-reference properties naming the parent object path
ADAPTER_BACK_REFERENCE = "Adapter"
DEVICE_BACK_REFERENCE = "Device"
SERVICE_BACK_REFERENCE = "Service"
CHARACTERISTIC_BACK_REFERENCE = "Characteristic"

# Result Codes
RESULT_OK = 0
RESULT_ERR = 1
RESULT_ERR_NOT_FOUND = 9
RESULT_ERR_METHOD_SIGNATURE_NOT_EXIST = 10
RESULT_ERR_NO_REPLY = 14
RESULT_ERR_UNKNOWN_SERVCE = 17
RESULT_ERR_METHOD_CALL_FAIL = 21
RESULT_ERR_TYPE_MISMATCH = 27
RESULT_ERR_UNKNOWN_PROPERTY = 28

# Names printed by the CLI GATT walk
UUID_NAMES = {
    "00001800-0000-1000-8000-00805f9b34fb": "Generic Access Service",
    "00001801-0000-1000-8000-00805f9b34fb": "Generic Attribute Service",
    "0000180a-0000-1000-8000-00805f9b34fb": "Device Information Service",
    "0000180f-0000-1000-8000-00805f9b34fb": "Battery Service",
    "00001812-0000-1000-8000-00805f9b34fb": "Human Interface Device Service",
    "00002a00-0000-1000-8000-00805f9b34fb": "Device Name",
    "00002a01-0000-1000-8000-00805f9b34fb": "Appearance",
    "00002a19-0000-1000-8000-00805f9b34fb": "Battery Level",
    "00002a24-0000-1000-8000-00805f9b34fb": "Model Number String",
    "00002a29-0000-1000-8000-00805f9b34fb": "Manufacturer Name String",
    "00002902-0000-1000-8000-00805f9b34fb": "Client Characteristic Configuration",
    "00002901-0000-1000-8000-00805f9b34fb": "Characteristic User Description",
}
