"""Capture UDP datagrams on an Ethernet interface and print their endpoints."""

from __future__ import annotations

import argparse
import ipaddress
import socket
import struct
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from netdump.constants import OpenFlag, PcapError
from netdump.records import Interface, PacketHeader
from netdump.constants import InterfaceFlag

ETHERNET_HEADER_LEN = 14
ETHERTYPE_IPV4 = 0x0800
IPPROTO_UDP = 17
DEFAULT_SNAPLEN = 65536
DEFAULT_READ_TIMEOUT_MS = 1000

_ETH_P_ALL = 0x0003
_ARPHRD_ETHER = 1
_SOL_PACKET = 263
_PACKET_ADD_MEMBERSHIP = 1
_PACKET_MR_PROMISC = 1
_PACKET_MREQ = struct.Struct("iHH8s")

_IFF_UP = 0x1
_IFF_LOOPBACK = 0x8
_IFF_RUNNING = 0x40

_IPV4 = struct.Struct(">BBHHHBBH4s4s")
_UDP = struct.Struct(">HHHH")


@dataclass(frozen=True)
class IPv4Header:
    """The fixed part of an IPv4 header."""

    ver_ihl: int
    tos: int
    tlen: int
    identification: int
    flags_fo: int
    ttl: int
    proto: int
    crc: int
    saddr: ipaddress.IPv4Address
    daddr: ipaddress.IPv4Address

    SIZE = _IPV4.size

    @classmethod
    def unpack(cls, data: bytes) -> "IPv4Header":
        """Decode the header from the start of ``data``."""
        if len(data) < _IPV4.size:
            raise ValueError(f"IPv4 header needs {_IPV4.size} bytes, got {len(data)}")
        fields = _IPV4.unpack(bytes(data[: _IPV4.size]))
        *head, saddr, daddr = fields
        return cls(*head, ipaddress.IPv4Address(saddr), ipaddress.IPv4Address(daddr))

    @property
    def version(self) -> int:
        """The IP version number."""
        return self.ver_ihl >> 4

    @property
    def header_length(self) -> int:
        """The header length in bytes, options included."""
        return (self.ver_ihl & 0xF) * 4


@dataclass(frozen=True)
class UdpHeader:
    """A UDP header, ports and lengths in host order."""

    sport: int
    dport: int
    length: int
    crc: int

    SIZE = _UDP.size

    @classmethod
    def unpack(cls, data: bytes) -> "UdpHeader":
        """Decode the header from the start of ``data``."""
        if len(data) < _UDP.size:
            raise ValueError(f"UDP header needs {_UDP.size} bytes, got {len(data)}")
        return cls(*_UDP.unpack(bytes(data[: _UDP.size])))


@dataclass(frozen=True)
class UdpPacket:
    """The IPv4 and UDP headers of a captured Ethernet frame."""

    ip: IPv4Header
    udp: UdpHeader
    payload: bytes

    def __str__(self) -> str:
        return (
            f"{self.ip.saddr}.{self.udp.sport} -> {self.ip.daddr}.{self.udp.dport}"
        )


def parse_udp_packet(data: bytes) -> UdpPacket:
    """Decode the IPv4 and UDP headers of an Ethernet frame."""
    ip = IPv4Header.unpack(data[ETHERNET_HEADER_LEN:])
    udp_start = ETHERNET_HEADER_LEN + ip.header_length
    udp = UdpHeader.unpack(data[udp_start:])
    return UdpPacket(ip, udp, bytes(data[udp_start + UdpHeader.SIZE:]))


def is_ip_udp(data: bytes) -> bool:
    """Tell whether an Ethernet frame carries a UDP datagram over IPv4."""
    if len(data) < ETHERNET_HEADER_LEN + IPv4Header.SIZE:
        return False
    (ethertype,) = struct.unpack(">H", data[12:14])
    return ethertype == ETHERTYPE_IPV4 and data[ETHERNET_HEADER_LEN + 9] == IPPROTO_UDP


def format_packet(header: PacketHeader, data: bytes) -> str:
    """Render one captured UDP packet as a line of text."""
    packet = parse_udp_packet(data)
    clock = time.strftime("%H:%M:%S", time.localtime(header.ts_sec))
    return f"{clock}.{header.ts_usec:06d} len:{header.length} {packet}"


def _read_flags(name: str) -> InterfaceFlag:
    try:
        raw = int(Path("/sys/class/net", name, "flags").read_text().strip(), 16)
    except (OSError, ValueError):
        return InterfaceFlag.NONE
    flags = InterfaceFlag.NONE
    if raw & _IFF_UP:
        flags |= InterfaceFlag.UP
    if raw & _IFF_LOOPBACK:
        flags |= InterfaceFlag.LOOPBACK
    if raw & _IFF_RUNNING:
        flags |= InterfaceFlag.RUNNING
    return flags


def list_interfaces() -> list[Interface]:
    """Return the network interfaces of this host, ordered by index."""
    try:
        entries = socket.if_nameindex()
    except OSError as exc:
        raise PcapError(f"Error in listing interfaces: {exc}") from exc
    return [Interface(name, flags=_read_flags(name)) for _, name in sorted(entries)]


def describe_interfaces(interfaces: Sequence[Interface]) -> list[str]:
    """Return one numbered line per interface."""
    return [
        f"{number}. {iface.name} ({iface.description or 'No description available'})"
        for number, iface in enumerate(interfaces, start=1)
    ]


def select_interface(interfaces: Sequence[Interface], number: int) -> Interface:
    """Return the interface with the given 1-based number."""
    if not 1 <= number <= len(interfaces):
        raise PcapError("Interface number out of range.")
    return interfaces[number - 1]


class Capture:
    """A live packet capture on one interface."""

    def __init__(
        self,
        name: str,
        snaplen: int = DEFAULT_SNAPLEN,
        flags: OpenFlag = OpenFlag.PROMISCUOUS,
        read_timeout: int = DEFAULT_READ_TIMEOUT_MS,
    ) -> None:
        self.name = name
        self.snaplen = snaplen
        self.flags = OpenFlag(int(flags))
        self.read_timeout = read_timeout
        self._closed = False
        family = getattr(socket, "AF_PACKET", None)
        if family is None:
            raise PcapError(f"Unable to open the adapter. {name} is not supported")
        try:
            self._sock = socket.socket(family, socket.SOCK_RAW, socket.htons(_ETH_P_ALL))
        except OSError as exc:
            raise PcapError(f"Unable to open the adapter {name}: {exc}") from exc
        try:
            self._sock.bind((name, _ETH_P_ALL))
            self.hardware_type = self._sock.getsockname()[3]
            if self.flags & OpenFlag.PROMISCUOUS:
                self._enable_promiscuous()
            if read_timeout > 0:
                self._sock.settimeout(read_timeout / 1000)
        except OSError as exc:
            self._sock.close()
            raise PcapError(f"Unable to open the adapter {name}: {exc}") from exc

    def _enable_promiscuous(self) -> None:
        mreq = _PACKET_MREQ.pack(
            socket.if_nametoindex(self.name), _PACKET_MR_PROMISC, 0, b""
        )
        try:
            self._sock.setsockopt(_SOL_PACKET, _PACKET_ADD_MEMBERSHIP, mreq)
        except OSError:
            # Promiscuous mode is a request, not a requirement.
            pass

    @property
    def is_ethernet(self) -> bool:
        """Whether the link layer is Ethernet."""
        return self.hardware_type == _ARPHRD_ETHER

    def __enter__(self) -> "Capture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the capture socket."""
        if not self._closed:
            self._closed = True
            self._sock.close()

    def packets(self) -> Iterator[tuple[PacketHeader, bytes]]:
        """Yield captured frames with their headers until the capture is closed."""
        buffer = bytearray(self.snaplen)
        while not self._closed:
            try:
                length = self._sock.recv_into(buffer, self.snaplen, socket.MSG_TRUNC)
            except socket.timeout:
                continue
            except OSError as exc:
                if self._closed:
                    return
                raise PcapError(f"Error reading packets: {exc}") from exc
            now = time.time()
            caplen = min(length, self.snaplen)
            header = PacketHeader(
                int(now), int((now % 1) * 1_000_000), caplen, length
            )
            yield header, bytes(buffer[:caplen])


def main(argv: Sequence[str] | None = None) -> int:
    """List interfaces, open the chosen one and print UDP traffic on it."""
    parser = argparse.ArgumentParser(description="Print UDP packets seen on an interface.")
    parser.add_argument("interface", nargs="?", type=int, help="interface number")
    args = parser.parse_args(argv)

    try:
        interfaces = list_interfaces()
    except PcapError as exc:
        print(f"Error in finding devices: {exc}", file=sys.stderr)
        return 1

    for line in describe_interfaces(interfaces):
        print(line)
    if not interfaces:
        print("\nNo interfaces found!")
        return 1

    number = args.interface
    if number is None:
        try:
            number = int(input(f"Enter the interface number (1-{len(interfaces)}):"))
        except (ValueError, EOFError):
            number = 0

    try:
        chosen = select_interface(interfaces, number)
    except PcapError as exc:
        print(f"\n{exc}")
        return 1

    try:
        capture = Capture(chosen.name)
    except PcapError as exc:
        print(f"\n{exc}", file=sys.stderr)
        return 1

    with capture:
        if not capture.is_ethernet:
            print("\nThis program works only on Ethernet networks.", file=sys.stderr)
            return 1
        print(f"\nlistening on {chosen.description or chosen.name}...")
        try:
            for header, data in capture.packets():
                if is_ip_udp(data):
                    try:
                        print(format_packet(header, data))
                    except ValueError:
                        continue
        except KeyboardInterrupt:
            pass
        except PcapError as exc:
            print(f"\n{exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())