"""
D-Bus Layer for bluemap
Domain handles, the managed-object resolver and the two long-running
session types (discovery and OBEX transfer).
"""

from .adapter import Adapter
from .characteristic import GattCharacteristic
from .descriptor import GattDescriptor
from .device import Device
from .discovery import DiscoverySession
from .obex import ObexSession, ObexTransfer, SessionTarget, TransferStatus
from .service import GattService

__all__ = [
    "Adapter",
    "Device",
    "GattService",
    "GattCharacteristic",
    "GattDescriptor",
    "DiscoverySession",
    "ObexSession",
    "ObexTransfer",
    "SessionTarget",
    "TransferStatus",
]
