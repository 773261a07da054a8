"""Capture-library constants, status codes and link-type extension helpers."""

from __future__ import annotations

import enum

VERSION_MAJOR = 2
VERSION_MINOR = 4

ERRBUF_SIZE = 256
BUF_SIZE = 1024
RPCAP_HOSTLIST_SIZE = 1024

NETMASK_UNKNOWN = 0xFFFFFFFF

SRC_FILE_STRING = "file://"
SRC_IF_STRING = "rpcap://"

CHAR_ENC_LOCAL = 0x00000000
CHAR_ENC_UTF_8 = 0x00000001

INVALID_SOCKET = -1

_FCS_PRESENT_BIT = 0x04000000
_FCS_LENGTH_MASK = 0xF0000000
_FCS_LENGTH_SHIFT = 28


class ErrorCode(enum.IntEnum):
    """Negative status codes reported by capture operations."""

    GENERIC = -1
    BREAK = -2
    NOT_ACTIVATED = -3
    ACTIVATED = -4
    NO_SUCH_DEVICE = -5
    RFMON_NOTSUP = -6
    NOT_RFMON = -7
    PERM_DENIED = -8
    IFACE_NOT_UP = -9
    CANTSET_TSTAMP_TYPE = -10
    PROMISC_PERM_DENIED = -11
    TSTAMP_PRECISION_NOTSUP = -12


class WarningCode(enum.IntEnum):
    """Positive status codes that signal a warning, not a failure."""

    GENERIC = 1
    PROMISC_NOTSUP = 2
    TSTAMP_TYPE_NOTSUP = 3


class Direction(enum.IntEnum):
    """Packet directions a capture can be restricted to."""

    INOUT = 0
    IN = 1
    OUT = 2


class TimestampType(enum.IntEnum):
    """Sources of packet time stamps."""

    HOST = 0
    HOST_LOWPREC = 1
    HOST_HIPREC = 2
    ADAPTER = 3
    ADAPTER_UNSYNCED = 4
    HOST_HIPREC_UNSYNCED = 5


class TimestampPrecision(enum.IntEnum):
    """Resolution of packet time stamps."""

    MICRO = 0
    NANO = 1


class OpenFlag(enum.IntFlag):
    """Flags accepted when opening a capture source."""

    NONE = 0
    PROMISCUOUS = 0x00000001
    DATATX_UDP = 0x00000002
    NOCAPTURE_RPCAP = 0x00000004
    NOCAPTURE_LOCAL = 0x00000008
    MAX_RESPONSIVENESS = 0x00000010


class InterfaceFlag(enum.IntFlag):
    """Flags describing a capture interface."""

    NONE = 0
    LOOPBACK = 0x00000001
    UP = 0x00000002
    RUNNING = 0x00000004
    WIRELESS = 0x00000008
    CONNECTION_STATUS = 0x00000030


class ConnectionStatus(enum.IntEnum):
    """Connection status stored in the interface flag bits."""

    UNKNOWN = 0x00000000
    CONNECTED = 0x00000010
    DISCONNECTED = 0x00000020
    NOT_APPLICABLE = 0x00000030

    @classmethod
    def from_flags(cls, flags: int) -> "ConnectionStatus":
        """Extract the connection status from interface flags."""
        return cls(int(flags) & InterfaceFlag.CONNECTION_STATUS)


class SourceType(enum.IntEnum):
    """Kinds of capture source named by a source string."""

    FILE = 2
    IFLOCAL = 3
    IFREMOTE = 4


class SamplingMethod(enum.IntEnum):
    """Packet sampling methods."""

    NOSAMP = 0
    ONE_EVERY_N = 1
    FIRST_AFTER_N_MS = 2


class AuthType(enum.IntEnum):
    """Remote authentication methods."""

    NULL = 0
    PASSWORD = 1


class CaptureMode(enum.IntEnum):
    """Operating modes of a capture adapter."""

    CAPT = 0
    STAT = 1
    MON = 2


_STATUS_TEXT: dict[int, str] = {
    0: "success",
    ErrorCode.GENERIC: "generic error code",
    ErrorCode.BREAK: "loop terminated by pcap_breakloop",
    ErrorCode.NOT_ACTIVATED: "the capture needs to be activated",
    ErrorCode.ACTIVATED: (
        "the operation can't be performed on already activated captures"
    ),
    ErrorCode.NO_SUCH_DEVICE: "no such device exists",
    ErrorCode.RFMON_NOTSUP: "this device doesn't support rfmon (monitor) mode",
    ErrorCode.NOT_RFMON: "operation supported only in monitor mode",
    ErrorCode.PERM_DENIED: "no permission to open the device",
    ErrorCode.IFACE_NOT_UP: "interface isn't up",
    ErrorCode.CANTSET_TSTAMP_TYPE: (
        "this device doesn't support setting the time stamp type"
    ),
    ErrorCode.PROMISC_PERM_DENIED: (
        "you don't have permission to capture in promiscuous mode"
    ),
    ErrorCode.TSTAMP_PRECISION_NOTSUP: (
        "the requested time stamp precision is not supported"
    ),
    WarningCode.GENERIC: "generic warning code",
    WarningCode.PROMISC_NOTSUP: "this device doesn't support promiscuous mode",
    WarningCode.TSTAMP_TYPE_NOTSUP: (
        "the requested time stamp type is not supported"
    ),
}


def status_to_str(code: int) -> str:
    """Return a human-readable description of a status code."""
    try:
        return _STATUS_TEXT[int(code)]
    except KeyError:
        return f"unknown error: {int(code)}"


def lt_fcs_length_present(value: int) -> bool:
    """Tell whether an extended link type carries an FCS length."""
    return bool(value & _FCS_PRESENT_BIT)


def lt_fcs_length(value: int) -> int:
    """Return the FCS length encoded in an extended link type."""
    return (value & _FCS_LENGTH_MASK) >> _FCS_LENGTH_SHIFT


def lt_fcs_datalink_ext(value: int) -> int:
    """Encode an FCS length into the extended link-type bits."""
    return ((value & 0xF) << _FCS_LENGTH_SHIFT) | _FCS_PRESENT_BIT


class PcapError(Exception):
    """Raised when a capture operation fails."""

    def __init__(self, message: str = "", code: int = ErrorCode.GENERIC) -> None:
        self.code = int(code)
        self.message = message or status_to_str(self.code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message