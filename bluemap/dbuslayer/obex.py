"""bluemap.dbuslayer.obex – OBEX sessions and file transfers via *obexd*.

obexd lives on the *session* bus under ``org.bluez.obex``.  A session is
created with ``Client1.CreateSession`` and a file is pushed with
``ObjectPush1.SendFile``, which returns a transfer object whose ``Status``
property moves through queued → active → complete (or error).  Progress is
only observed by re-reading that property; no signals are used.
"""

from __future__ import annotations

import os
import time
from enum import Enum
from typing import Callable, Optional

from bluemap.bt_ref.constants import (
    OBEX_CLIENT_INTERFACE,
    OBEX_OBJECT_PUSH_INTERFACE,
    OBEX_ROOT_PATH,
    OBEX_SERVICE_NAME,
)
from bluemap.ble_ops.conversion import (
    decode_int,
    decode_object_path,
    decode_string,
    encode_object_path,
    encode_options,
    encode_string,
)
from bluemap.core import config
from bluemap.core.errors import BluemapError, TypeMismatchError
from bluemap.core.log import get_logger
from bluemap.dbus import proxy
from bluemap.dbus.connection import close_bus, open_bus
from bluemap.dbuslayer import manager
from bluemap.dbuslayer.remote import RemoteEntity

logger = get_logger(__name__)

__all__ = ["SessionTarget", "TransferStatus", "ObexSession", "ObexTransfer"]


class SessionTarget(Enum):
    FTP = "ftp"
    MAP = "map"
    OPP = "opp"
    PBAP = "pbap"
    SYNC = "sync"


class TransferStatus(Enum):
    QUEUED = "queued"
    ACTIVE = "active"
    COMPLETE = "complete"
    SUSPENDED = "suspended"
    ERROR = "error"

    @classmethod
    def from_wire(cls, value) -> "TransferStatus":
        text = decode_string(value)
        try:
            return cls(text)
        except ValueError:
            raise TypeMismatchError("transfer status", text) from None


def _first_path(reply) -> str:
    """SendFile/CreateSession replies are either a path or (path, properties)."""
    if isinstance(reply, tuple):
        if not reply:
            raise TypeMismatchError("object path", reply)
        reply = reply[0]
    return decode_object_path(reply)


class ObexSession(RemoteEntity):
    """One obexd client session, bound to the connection that created it."""

    KIND = manager.OBEX_SESSION

    @classmethod
    def create_session(cls, device, target: SessionTarget = SessionTarget.OPP) -> "ObexSession":
        """Open a session to *device* (a Device handle or a bus address).

        https://git.kernel.org/pub/scm/bluetooth/bluez.git/tree/doc/obex-api.txt
        """
        address = device.get_address() if hasattr(device, "get_address") else str(device)
        target = SessionTarget(target)
        bus = open_bus(config.BUS_SESSION)
        try:
            reply = proxy.call_method(
                OBEX_CLIENT_INTERFACE,
                OBEX_ROOT_PATH,
                "CreateSession",
                encode_string(address),
                encode_options({"Target": target.value}),
                service=OBEX_SERVICE_NAME,
                bus_type=config.BUS_SESSION,
                bus=bus,
            )
            session_path = _first_path(reply)
        except BluemapError:
            close_bus(bus)
            raise
        logger.debug("OBEX %s session %s created for %s", target.value, session_path, address)
        return cls(session_path, bus)

    @property
    def session_path(self) -> str:
        return self.object_path

    def remove_session(self) -> None:
        proxy.call_method(
            OBEX_CLIENT_INTERFACE,
            OBEX_ROOT_PATH,
            "RemoveSession",
            encode_object_path(self.object_path),
            service=OBEX_SERVICE_NAME,
            bus_type=config.BUS_SESSION,
            bus=self._bus,
        )

    def send_file(self, file_path: str) -> "ObexTransfer":
        return ObexTransfer.send_file(self, file_path)

    def close(self) -> None:
        """Release the session's bus connection (does not remove the session)."""
        if self._bus is not None:
            close_bus(self._bus)
            self._bus = None

    def __enter__(self) -> "ObexSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.remove_session()
        finally:
            self.close()


class ObexTransfer(RemoteEntity):
    """A transfer object plus the base name of the file being pushed."""

    KIND = manager.OBEX_TRANSFER

    def __init__(self, object_path: str, name: Optional[str] = None, bus=None):
        super().__init__(object_path, bus)
        self.name = name

    @classmethod
    def send_file(cls, session: ObexSession, file_path: str) -> "ObexTransfer":
        reply = proxy.call_method(
            OBEX_OBJECT_PUSH_INTERFACE,
            session.object_path,
            "SendFile",
            encode_string(str(file_path)),
            service=OBEX_SERVICE_NAME,
            bus_type=config.BUS_SESSION,
            bus=session._bus,
        )
        transfer_path = _first_path(reply)
        name = os.path.basename(str(file_path)) or str(file_path)
        logger.debug("Transfer %s started for %s", transfer_path, name)
        return cls(transfer_path, name, session._bus)

    @property
    def transfer_path(self) -> str:
        return self.object_path

    # Properties ---------------------------------------------------------
    def status(self) -> TransferStatus:
        return self.get_property("Status", TransferStatus.from_wire)

    def get_name(self) -> str:
        return self.get_property("Name", decode_string)

    def get_size(self) -> int:
        return self.get_property("Size", lambda v: decode_int(v, 64, signed=False))

    def get_transferred(self) -> int:
        return self.get_property("Transferred", lambda v: decode_int(v, 64, signed=False))

    def get_filename(self) -> str:
        return self.get_property("Filename", decode_string)

    # Methods ------------------------------------------------------------
    def cancel(self) -> None:
        self.call_method("Cancel")

    def suspend(self) -> None:
        self.call_method("Suspend")

    def resume(self) -> None:
        self.call_method("Resume")

    def wait_until_complete(
        self,
        poll_interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        max_polls: Optional[int] = None,
    ) -> Optional[TransferStatus]:
        """Poll ``Status`` until the transfer completes.

        Sleeps *poll_interval* seconds (default ``config.TRANSFER_POLL_INTERVAL``)
        before every read.  Stops early when the status is ``error``, when a
        read fails, or after *max_polls* reads.  Poll failures are logged,
        not raised.

        Returns the last status read, or ``None`` if the last read failed.
        A return value other than ``TransferStatus.COMPLETE`` means the
        transfer did not finish.  *max_polls* must be at least 1.
        """
        if max_polls is not None and max_polls < 1:
            raise ValueError(f"max_polls must be at least 1, got {max_polls}")
        interval = config.TRANSFER_POLL_INTERVAL if poll_interval is None else poll_interval
        status: Optional[TransferStatus] = None
        polls = 0
        while max_polls is None or polls < max_polls:
            sleep(interval)
            polls += 1
            try:
                status = self.status()
            except BluemapError as exc:
                logger.warning("Stopped waiting on %s: %s", self.object_path, exc)
                return None
            if status in (TransferStatus.COMPLETE, TransferStatus.ERROR):
                break
        logger.debug("Transfer %s finished waiting with %s after %d polls", self.object_path, status, polls)
        return status
