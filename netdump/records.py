"""Capture file headers, per-packet headers, interface records and source strings."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from netdump.constants import (
    BUF_SIZE,
    SRC_FILE_STRING,
    SRC_IF_STRING,
    VERSION_MAJOR,
    VERSION_MINOR,
    AuthType,
    ConnectionStatus,
    InterfaceFlag,
    PcapError,
    SamplingMethod,
    SourceType,
)

MAGIC_MICROSECONDS = 0xA1B2C3D4
MAGIC_NANOSECONDS = 0xA1B23C4D
_KNOWN_MAGICS = frozenset({MAGIC_MICROSECONDS, MAGIC_NANOSECONDS})

LINKTYPE_ETHERNET = 1
DEFAULT_SNAPLEN = 65535

_SRC_IF_SSL_STRING = "rpcaps://"

_FILE_HEADER_FORMAT = "IHHiIII"
_FILE_HEADER_SIZE = struct.calcsize("<" + _FILE_HEADER_FORMAT)
_PACKET_HEADER = struct.Struct("<IIII")


@dataclass
class FileHeader:
    """The record that opens a capture savefile."""

    magic: int = MAGIC_MICROSECONDS
    version_major: int = VERSION_MAJOR
    version_minor: int = VERSION_MINOR
    thiszone: int = 0
    sigfigs: int = 0
    snaplen: int = DEFAULT_SNAPLEN
    linktype: int = LINKTYPE_ETHERNET

    SIZE = _FILE_HEADER_SIZE

    def pack(self) -> bytes:
        """Encode the header in little-endian byte order."""
        try:
            return struct.pack(
                "<" + _FILE_HEADER_FORMAT,
                self.magic,
                self.version_major,
                self.version_minor,
                self.thiszone,
                self.sigfigs,
                self.snaplen,
                self.linktype,
            )
        except struct.error as exc:
            raise ValueError(f"file header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "FileHeader":
        """Decode a header, detecting the byte order from the magic number."""
        if len(data) < _FILE_HEADER_SIZE:
            raise ValueError(
                f"file header needs {_FILE_HEADER_SIZE} bytes, got {len(data)}"
            )
        chunk = bytes(data[:_FILE_HEADER_SIZE])
        fields = struct.unpack("<" + _FILE_HEADER_FORMAT, chunk)
        if fields[0] not in _KNOWN_MAGICS:
            swapped = struct.unpack(">" + _FILE_HEADER_FORMAT, chunk)
            if swapped[0] in _KNOWN_MAGICS:
                fields = swapped
        return cls(*fields)

    @property
    def nanosecond_timestamps(self) -> bool:
        """Tell whether packet time stamps carry nanoseconds."""
        return self.magic == MAGIC_NANOSECONDS


@dataclass
class PacketHeader:
    """Per-packet time stamp and lengths."""

    ts_sec: int = 0
    ts_usec: int = 0
    caplen: int = 0
    length: int = 0

    SIZE = _PACKET_HEADER.size

    def pack(self) -> bytes:
        """Encode the header as stored in a savefile."""
        try:
            return _PACKET_HEADER.pack(
                self.ts_sec, self.ts_usec, self.caplen, self.length
            )
        except struct.error as exc:
            raise ValueError(f"packet header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "PacketHeader":
        """Decode a savefile packet header."""
        if len(data) < _PACKET_HEADER.size:
            raise ValueError(
                f"packet header needs {_PACKET_HEADER.size} bytes, got {len(data)}"
            )
        return cls(*_PACKET_HEADER.unpack(bytes(data[: _PACKET_HEADER.size])))

    @property
    def timestamp(self) -> float:
        """The time stamp in seconds since the epoch."""
        return self.ts_sec + self.ts_usec / 1_000_000


@dataclass
class Stat:
    """Capture statistics."""

    recv: int = 0
    drop: int = 0
    ifdrop: int = 0
    capt: int = 0
    sent: int = 0
    netdrop: int = 0


@dataclass
class Address:
    """One address of an interface, with its netmask and peer addresses."""

    addr: str | None = None
    netmask: str | None = None
    broadaddr: str | None = None
    dstaddr: str | None = None


@dataclass
class Interface:
    """A capture interface and its addresses."""

    name: str
    description: str | None = None
    addresses: list[Address] = field(default_factory=list)
    flags: InterfaceFlag = InterfaceFlag.NONE

    def __post_init__(self) -> None:
        self.flags = InterfaceFlag(int(self.flags))

    @property
    def connection_status(self) -> ConnectionStatus:
        """The connection status held in the flag bits."""
        return ConnectionStatus.from_flags(self.flags)

    @property
    def is_loopback(self) -> bool:
        """Whether the interface is a loopback interface."""
        return bool(self.flags & InterfaceFlag.LOOPBACK)

    @property
    def is_up(self) -> bool:
        """Whether the interface is up."""
        return bool(self.flags & InterfaceFlag.UP)


@dataclass
class RemoteAuth:
    """Credentials for a remote capture server."""

    type: AuthType = AuthType.NULL
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.type = AuthType(int(self.type))


@dataclass
class Sampling:
    """Packet sampling settings."""

    method: SamplingMethod = SamplingMethod.NOSAMP
    value: int = 0

    def __post_init__(self) -> None:
        self.method = SamplingMethod(int(self.method))


@dataclass(frozen=True)
class Source:
    """The parts of a capture source string."""

    kind: SourceType
    host: str = ""
    port: str = ""
    name: str = ""
    secure: bool = False


def parse_source(source: str) -> Source:
    """Split a capture source string into its kind, host, port and name."""
    if source.startswith(SRC_FILE_STRING):
        return Source(SourceType.FILE, name=source[len(SRC_FILE_STRING):])

    for scheme, secure in ((SRC_IF_STRING, False), (_SRC_IF_SSL_STRING, True)):
        if source.startswith(scheme):
            rest = source[len(scheme):]
            break
    else:
        return Source(SourceType.IFLOCAL, name=source)

    location, slash, name = rest.partition("/")
    if not slash:
        return Source(SourceType.IFLOCAL, name=rest, secure=secure)
    if not location:
        return Source(SourceType.IFLOCAL, name=name, secure=secure)

    if location.startswith("["):
        host, bracket, tail = location[1:].partition("]")
        if not bracket:
            raise PcapError(f"missing closing bracket in host of {source!r}")
        if tail and not tail.startswith(":"):
            raise PcapError(f"unexpected text after host in {source!r}")
        port = tail[1:]
    else:
        host, _, port = location.partition(":")

    if not host:
        raise PcapError(f"empty host in {source!r}")
    if len(host) >= BUF_SIZE or len(port) >= BUF_SIZE:
        raise PcapError("host or port too long")
    return Source(SourceType.IFREMOTE, host, port, name, secure)


def create_source(
    kind: SourceType | int,
    host: str | None = None,
    port: str | None = None,
    name: str | None = None,
) -> str:
    """Build a capture source string from its parts."""
    try:
        kind = SourceType(int(kind))
    except ValueError:
        raise PcapError("The interface type is not valid") from None

    if kind is SourceType.FILE:
        if not name:
            raise PcapError("The file name cannot be empty")
        return SRC_FILE_STRING + name

    if kind is SourceType.IFREMOTE:
        if not host:
            raise PcapError("The host cannot be empty for a remote source")
        location = f"[{host}]" if ":" in host else host
        if port:
            location += f":{port}"
        return f"{SRC_IF_STRING}{location}/{name or ''}"

    if not name:
        raise PcapError("The interface name cannot be empty")
    return SRC_IF_STRING + name