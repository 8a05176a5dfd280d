"""Managed-object resolver.

BlueZ does not publish a tree: ``GetManagedObjects`` returns one flat map of
object path → interface → properties.  The hierarchy is rebuilt here by two
filters applied to that map: interface membership selects candidates of the
wanted kind, and a back-reference property (a device's ``Adapter``, a
characteristic's ``Service`` ...) selects the ones owned by a given parent.

The filters are pure functions over a snapshot; every ``list_*`` call fetches
a fresh snapshot and nothing is cached between calls, because membership can
change on the daemon side at any time.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, List, NamedTuple, Optional

from bluemap.bt_ref.constants import (
    ADAPTER_BACK_REFERENCE,
    ADAPTER_INTERFACE,
    BLUEZ_ROOT_PATH,
    BLUEZ_SERVICE_NAME,
    CHARACTERISTIC_BACK_REFERENCE,
    DEVICE_BACK_REFERENCE,
    DEVICE_INTERFACE,
    GATT_CHARACTERISTIC_INTERFACE,
    GATT_DESCRIPTOR_INTERFACE,
    GATT_SERVICE_INTERFACE,
    OBEX_SERVICE_NAME,
    OBEX_SESSION_INTERFACE,
    OBEX_TRANSFER_INTERFACE,
    SERVICE_BACK_REFERENCE,
)
from bluemap.ble_ops.conversion import decode_object_path
from bluemap.core import config
from bluemap.core.log import get_logger
from bluemap.dbus import proxy

__all__ = [
    "RemoteObject",
    "EntityKind",
    "ADAPTER",
    "DEVICE",
    "GATT_SERVICE",
    "GATT_CHARACTERISTIC",
    "GATT_DESCRIPTOR",
    "OBEX_SESSION",
    "OBEX_TRANSFER",
    "snapshot",
    "objects_from_managed",
    "filter_by_interface",
    "filter_children",
    "list_children",
    "list_kind",
    "list_adapters",
    "list_devices",
    "list_services",
    "list_characteristics",
    "list_descriptors",
    "list_obex_sessions",
    "list_transfers",
]

logger = get_logger(__name__)


class RemoteObject(NamedTuple):
    """One entry of a managed-object snapshot."""

    path: str
    interfaces: FrozenSet[str]
    properties: Dict[str, Dict[str, Any]]


class EntityKind(NamedTuple):
    """Where objects of one role live and how they point at their parent."""

    role: str
    interface: str
    back_reference: Optional[str]
    service: str
    bus_type: str
    root_path: str = BLUEZ_ROOT_PATH


ADAPTER = EntityKind("adapter", ADAPTER_INTERFACE, None, BLUEZ_SERVICE_NAME, config.BUS_SYSTEM)
DEVICE = EntityKind(
    "device", DEVICE_INTERFACE, ADAPTER_BACK_REFERENCE, BLUEZ_SERVICE_NAME, config.BUS_SYSTEM
)
GATT_SERVICE = EntityKind(
    "gatt_service", GATT_SERVICE_INTERFACE, DEVICE_BACK_REFERENCE, BLUEZ_SERVICE_NAME, config.BUS_SYSTEM
)
GATT_CHARACTERISTIC = EntityKind(
    "gatt_characteristic",
    GATT_CHARACTERISTIC_INTERFACE,
    SERVICE_BACK_REFERENCE,
    BLUEZ_SERVICE_NAME,
    config.BUS_SYSTEM,
)
GATT_DESCRIPTOR = EntityKind(
    "gatt_descriptor",
    GATT_DESCRIPTOR_INTERFACE,
    CHARACTERISTIC_BACK_REFERENCE,
    BLUEZ_SERVICE_NAME,
    config.BUS_SYSTEM,
)
OBEX_SESSION = EntityKind("obex_session", OBEX_SESSION_INTERFACE, None, OBEX_SERVICE_NAME, config.BUS_SESSION)
OBEX_TRANSFER = EntityKind(
    "obex_transfer", OBEX_TRANSFER_INTERFACE, "Session", OBEX_SERVICE_NAME, config.BUS_SESSION
)


def _path_of(parent) -> str:
    """Accept either a handle (anything with ``object_path``) or a plain path."""
    return str(getattr(parent, "object_path", parent))


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

def objects_from_managed(managed) -> List[RemoteObject]:
    """Turn a raw ``GetManagedObjects`` reply into RemoteObjects, keeping daemon order."""
    objects: List[RemoteObject] = []
    for path, interfaces in managed.items():
        properties = {str(name): dict(props) for name, props in interfaces.items()}
        objects.append(RemoteObject(str(path), frozenset(properties), properties))
    return objects


def snapshot(
    service: str = BLUEZ_SERVICE_NAME,
    bus_type: str = config.BUS_SYSTEM,
    root_path: str = BLUEZ_ROOT_PATH,
) -> List[RemoteObject]:
    """Fetch the full object map from the daemon (one round trip)."""
    managed = proxy.get_managed_objects(service, root_path=root_path, bus_type=bus_type)
    objects = objects_from_managed(managed)
    logger.debug("Snapshot of %s holds %d objects", service, len(objects))
    return objects


# ---------------------------------------------------------------------------
# Pure filters
# ---------------------------------------------------------------------------

def filter_by_interface(objects: Iterable[RemoteObject], interface: str) -> List[str]:
    return [obj.path for obj in objects if interface in obj.interfaces]


def filter_children(
    objects: Iterable[RemoteObject],
    child_interface: str,
    back_reference: str,
    parent_path: str,
) -> List[str]:
    """Paths implementing *child_interface* whose *back_reference* equals *parent_path*.

    Order follows the snapshot.  Objects without the back-reference property
    are skipped; a back-reference that is not an object path raises
    :class:`~bluemap.core.errors.TypeMismatchError`.
    """
    children: List[str] = []
    for obj in objects:
        if child_interface not in obj.interfaces:
            continue
        props = obj.properties.get(child_interface, {})
        if back_reference not in props:
            logger.debug("%s has no %s property; skipped", obj.path, back_reference)
            continue
        if decode_object_path(props[back_reference]) == parent_path:
            children.append(obj.path)
    return children


# ---------------------------------------------------------------------------
# Daemon-backed listings
# ---------------------------------------------------------------------------

def list_children(
    child_interface: str,
    back_reference: str,
    parent,
    *,
    service: str = BLUEZ_SERVICE_NAME,
    bus_type: str = config.BUS_SYSTEM,
    root_path: str = BLUEZ_ROOT_PATH,
) -> List[str]:
    objects = snapshot(service, bus_type, root_path)
    return filter_children(objects, child_interface, back_reference, _path_of(parent))


def list_kind(kind: EntityKind, parent=None) -> List[str]:
    """List objects of *kind*, restricted to *parent* when the kind has a back-reference."""
    objects = snapshot(kind.service, kind.bus_type, kind.root_path)
    if kind.back_reference is None or parent is None:
        return filter_by_interface(objects, kind.interface)
    return filter_children(objects, kind.interface, kind.back_reference, _path_of(parent))


def list_adapters() -> List[str]:
    return list_kind(ADAPTER)


def list_devices(adapter) -> List[str]:
    return list_kind(DEVICE, adapter)


def list_services(device) -> List[str]:
    return list_kind(GATT_SERVICE, device)


def list_characteristics(service) -> List[str]:
    return list_kind(GATT_CHARACTERISTIC, service)


def list_descriptors(characteristic) -> List[str]:
    return list_kind(GATT_DESCRIPTOR, characteristic)


def list_obex_sessions() -> List[str]:
    return list_kind(OBEX_SESSION)


def list_transfers(session) -> List[str]:
    return list_kind(OBEX_TRANSFER, session)
