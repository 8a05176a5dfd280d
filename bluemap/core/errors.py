#!/usr/bin/python3

"""Core error classes for bluemap.

Every failure the library raises derives from :class:`BluemapError`, which
carries a human-readable message plus a ``RESULT_ERR_*`` integer code so
callers can branch either on the exception type or on ``.code``.
"""

from __future__ import annotations

import re
from typing import Optional

import dbus.exceptions

from bluemap.bt_ref.constants import (
    RESULT_ERR,
    RESULT_ERR_METHOD_CALL_FAIL,
    RESULT_ERR_METHOD_SIGNATURE_NOT_EXIST,
    RESULT_ERR_NO_REPLY,
    RESULT_ERR_NOT_FOUND,
    RESULT_ERR_TYPE_MISMATCH,
    RESULT_ERR_UNKNOWN_PROPERTY,
    RESULT_ERR_UNKNOWN_SERVCE,
)
from bluemap.core import log as _core_log

# InvalidArgs messages that mean the property or its interface is absent
_NO_SUCH_PROPERTY_RX = re.compile(
    r"(no such property|no such interface|property .* not found|unknown property|doesn't exist)",
    re.IGNORECASE,
)

# Member kinds used when mapping D-Bus errors
MEMBER_PROPERTY = "property"
MEMBER_METHOD = "method"


class BluemapError(Exception):
    """Base exception for every failure raised by bluemap.

    The `.code` attribute maps to bt_ref.constants RESULT_* values.
    ``dbus_name`` holds the originating D-Bus error name, if any.
    """

    def __init__(self, message: str, code: int = RESULT_ERR, dbus_name: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.dbus_name = dbus_name


class RemoteUnavailableError(BluemapError):
    """Raised when the bus or the BlueZ service cannot be reached."""

    def __init__(self, target: str, reason: Optional[str] = None, dbus_name: Optional[str] = None):
        msg = f"D-Bus endpoint unavailable: {target}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, RESULT_ERR_UNKNOWN_SERVCE, dbus_name)
        self.target = target


class CallTimeoutError(BluemapError):
    """Raised when a D-Bus round trip gets no reply within the bound."""

    def __init__(self, operation: str, timeout_ms: Optional[int] = None, dbus_name: Optional[str] = None):
        msg = f"Operation timed out: {operation}"
        if timeout_ms is not None:
            msg += f" (after {timeout_ms} ms)"
        super().__init__(msg, RESULT_ERR_NO_REPLY, dbus_name)
        self.operation = operation
        self.timeout_ms = timeout_ms


class NoSuchPropertyError(BluemapError):
    """Raised when the daemon reports a property, interface or object absent."""

    def __init__(self, interface: str, name: str, path: str, dbus_name: Optional[str] = None):
        super().__init__(
            f"No property {interface}.{name} on {path}",
            RESULT_ERR_UNKNOWN_PROPERTY,
            dbus_name,
        )
        self.interface = interface
        self.name = name
        self.path = path


class NoSuchMethodError(BluemapError):
    """Raised when the daemon reports a method, interface or object absent."""

    def __init__(self, interface: str, name: str, path: str, dbus_name: Optional[str] = None):
        super().__init__(
            f"No method {interface}.{name} on {path}",
            RESULT_ERR_METHOD_SIGNATURE_NOT_EXIST,
            dbus_name,
        )
        self.interface = interface
        self.name = name
        self.path = path


class TypeMismatchError(BluemapError):
    """Raised when a wire value does not have the expected shape."""

    def __init__(self, expected: str, value):
        super().__init__(
            f"Expected {expected}, got {type(value).__name__}: {value!r}",
            RESULT_ERR_TYPE_MISMATCH,
        )
        self.expected = expected
        self.value = value


class NotFoundError(BluemapError):
    """Raised when a lookup that requires at least one result finds none."""

    def __init__(self, what: str):
        super().__init__(f"{what} not found", RESULT_ERR_NOT_FOUND)
        self.what = what


class RemoteRejectedError(BluemapError):
    """Raised when BlueZ declines a request (e.g. pairing failed)."""

    def __init__(self, operation: str, reason: str = "", dbus_name: Optional[str] = None):
        msg = f"Remote rejected {operation}"
        if dbus_name:
            msg += f": {dbus_name}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, RESULT_ERR_METHOD_CALL_FAIL, dbus_name)
        self.operation = operation
        self.reason = reason


# D-Bus error names grouped by the kind they map onto
_UNAVAILABLE_NAMES = {
    "org.freedesktop.DBus.Error.ServiceUnknown",
    "org.freedesktop.DBus.Error.NameHasNoOwner",
    "org.freedesktop.DBus.Error.NoServer",
    "org.freedesktop.DBus.Error.NoNetwork",
    "org.freedesktop.DBus.Error.Disconnected",
    "org.freedesktop.DBus.Error.FileNotFound",
    "org.freedesktop.DBus.Error.AccessDenied",
    "org.freedesktop.DBus.Error.Spawn.ServiceNotFound",
    "org.freedesktop.DBus.Error.Spawn.ExecFailed",
}
_TIMEOUT_NAMES = {
    "org.freedesktop.DBus.Error.NoReply",
    "org.freedesktop.DBus.Error.Timeout",
    "org.freedesktop.DBus.Error.TimedOut",
}
_ABSENT_NAMES = {
    "org.freedesktop.DBus.Error.UnknownObject",
    "org.freedesktop.DBus.Error.UnknownInterface",
    "org.freedesktop.DBus.Error.UnknownProperty",
    "org.freedesktop.DBus.Error.UnknownMethod",
}


def map_dbus_error(
    exc: dbus.exceptions.DBusException,
    interface: str,
    path: str,
    member: str,
    member_kind: str = MEMBER_METHOD,
    timeout_ms: Optional[int] = None,
) -> BluemapError:
    """Return the bluemap error matching *exc*.

    Parameters
    ----------
    exc : dbus.exceptions.DBusException
        The D-Bus exception to map
    interface, path, member : str
        The call that failed, used for the error message
    member_kind : str
        ``MEMBER_PROPERTY`` or ``MEMBER_METHOD``; decides whether an absent
        interface/object maps to NoSuchPropertyError or NoSuchMethodError
    timeout_ms : int, optional
        The bound that was in force, reported on timeouts

    Returns
    -------
    BluemapError
        A BluemapError subclass instance with the D-Bus name attached
    """
    name = exc.get_dbus_name() or ""
    msg = exc.get_dbus_message() or str(exc)
    operation = f"{interface}.{member} on {path}"

    _core_log.logging__debug_log(f"[BluemapError] {operation}: {name}: {msg}")

    if name in _TIMEOUT_NAMES:
        return CallTimeoutError(operation, timeout_ms, name)
    if name in _UNAVAILABLE_NAMES:
        return RemoteUnavailableError(operation, msg, name)
    if name in _ABSENT_NAMES:
        if member_kind == MEMBER_PROPERTY:
            return NoSuchPropertyError(interface, member, path, name)
        return NoSuchMethodError(interface, member, path, name)
    if (
        name == "org.freedesktop.DBus.Error.InvalidArgs"
        and member_kind == MEMBER_PROPERTY
        and _NO_SUCH_PROPERTY_RX.search(msg)
    ):
        return NoSuchPropertyError(interface, member, path, name)

    return RemoteRejectedError(operation, msg, name or None)


__all__ = [
    "BluemapError",
    "RemoteUnavailableError",
    "CallTimeoutError",
    "NoSuchPropertyError",
    "NoSuchMethodError",
    "TypeMismatchError",
    "NotFoundError",
    "RemoteRejectedError",
    "MEMBER_PROPERTY",
    "MEMBER_METHOD",
    "map_dbus_error",
]
