"""Linux "cooked" capture link-layer headers (SLL and SLL2)."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

SLL_HDR_LEN = 16
SLL2_HDR_LEN = 20
SLL_ADDRLEN = 8

_SLL = struct.Struct(">HHH8sH")
_SLL2 = struct.Struct(">HHIHBB8s")


class PacketType(enum.IntEnum):
    """Where a cooked-capture packet was headed."""

    HOST = 0
    BROADCAST = 1
    MULTICAST = 2
    OTHERHOST = 3
    OUTGOING = 4


class SllProtocol(enum.IntEnum):
    """Protocol values that are not Ethernet types."""

    P_802_3 = 0x0001
    P_802_2 = 0x0004
    CAN = 0x000C
    CANFD = 0x000D


def _normalise_address(addr: bytes) -> bytes:
    raw = bytes(addr)
    if len(raw) > SLL_ADDRLEN:
        raise ValueError(
            f"link-layer address holds at most {SLL_ADDRLEN} bytes, got {len(raw)}"
        )
    return raw.ljust(SLL_ADDRLEN, b"\x00")


def _require(data: bytes, size: int, what: str) -> bytes:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")
    return bytes(data[:size])


@dataclass(frozen=True)
class SllHeader:
    """The 16-byte cooked-capture header; all fields but the address are big-endian."""

    pkttype: int = PacketType.HOST
    hatype: int = 0
    halen: int = 0
    addr: bytes = b""
    protocol: int = 0

    SIZE = SLL_HDR_LEN

    def __post_init__(self) -> None:
        object.__setattr__(self, "addr", _normalise_address(self.addr))

    def pack(self) -> bytes:
        """Encode the header as it appears on the wire."""
        try:
            return _SLL.pack(
                self.pkttype, self.hatype, self.halen, self.addr, self.protocol
            )
        except struct.error as exc:
            raise ValueError(f"SLL header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "SllHeader":
        """Decode the header from the start of a packet."""
        pkttype, hatype, halen, addr, protocol = _SLL.unpack(
            _require(data, SLL_HDR_LEN, "SLL header")
        )
        return cls(pkttype, hatype, halen, addr, protocol)

    @property
    def link_address(self) -> bytes:
        """The meaningful part of the link-layer address."""
        return self.addr[: min(self.halen, SLL_ADDRLEN)]


@dataclass(frozen=True)
class Sll2Header:
    """The 20-byte second-version cooked-capture header."""

    protocol: int = 0
    reserved_mbz: int = 0
    if_index: int = 0
    hatype: int = 0
    pkttype: int = PacketType.HOST
    halen: int = 0
    addr: bytes = b""

    SIZE = SLL2_HDR_LEN

    def __post_init__(self) -> None:
        object.__setattr__(self, "addr", _normalise_address(self.addr))

    def pack(self) -> bytes:
        """Encode the header as it appears on the wire."""
        try:
            return _SLL2.pack(
                self.protocol,
                self.reserved_mbz,
                self.if_index,
                self.hatype,
                self.pkttype,
                self.halen,
                self.addr,
            )
        except struct.error as exc:
            raise ValueError(f"SLL2 header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "Sll2Header":
        """Decode the header from the start of a packet."""
        return cls(*_SLL2.unpack(_require(data, SLL2_HDR_LEN, "SLL2 header")))

    @property
    def link_address(self) -> bytes:
        """The meaningful part of the link-layer address."""
        return self.addr[: min(self.halen, SLL_ADDRLEN)]