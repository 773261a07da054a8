# netdump

Packet capture record formats in plain Python, and a small command that
prints the UDP traffic seen on a network interface.

## Modules

- `netdump.constants`: status codes (`ErrorCode`, `WarningCode`) and
  `status_to_str`. Also the enums `Direction`, `TimestampType`,
  `TimestampPrecision`, `OpenFlag`, `InterfaceFlag`, `ConnectionStatus`,
  `SourceType`, `SamplingMethod`, `AuthType` and `CaptureMode`, the exception
  `PcapError`, and the FCS link-type helpers `lt_fcs_length_present`,
  `lt_fcs_length` and `lt_fcs_datalink_ext`.
- `netdump.records`: the savefile `FileHeader` and the per-packet
  `PacketHeader`, each with `pack()` and `unpack()`. `FileHeader.unpack`
  detects the byte order from the magic number. This module also holds the
  interface descriptions (`Interface`, `Address`), `Stat`, `RemoteAuth` and
  `Sampling`, and the capture source strings: `parse_source` returns a
  `Source`, and `create_source` builds a string.
- `netdump.vlan`: `VlanTag`, an 802.1Q tag with `pack()`, `unpack()`,
  `from_fields()` and the properties `priority`, `drop_eligible` and
  `vlan_id`.
- `netdump.sll`: the Linux cooked capture headers `SllHeader` and
  `Sll2Header`, the `PacketType` and `SllProtocol` enums, and `link_address`.
- `netdump.usb`: the Linux USB capture headers `UsbHeader` and
  `UsbHeaderMmapped`, together with `UsbSetup`, `IsoRec`, `IsoDescriptor`,
  `TransferType` and `EventType`.
- `netdump.udpdump`: decodes IPv4/UDP inside Ethernet frames (`IPv4Header`,
  `UdpHeader`, `UdpPacket`, `parse_udp_packet`, `is_ip_udp`,
  `format_packet`). It also lists and selects interfaces
  (`list_interfaces`, `describe_interfaces`, `select_interface`), runs a live
  `Capture`, and provides the `main` entry point.

## Installation

```
pip install .
```

## Dumping UDP traffic

```
udpdump [INTERFACE_NUMBER]
```

The command does the following:

1. Lists the host's interfaces, numbered from 1.
2. Asks for an interface number, unless one was given as an argument.
3. Opens that interface in promiscuous mode.
4. Prints one line for each IPv4 UDP frame it receives:

```
14:03:22.120431 len:74 192.168.1.10.53000 -> 192.168.1.1.53
```

Press Ctrl+C to stop. The command exits with status 1 in any of these cases:

- no interfaces are found
- the number is out of range
- the interface cannot be opened
- the link is not Ethernet

Live capture uses raw `AF_PACKET` sockets. It therefore works only on Linux,
and usually needs root or the `CAP_NET_RAW` capability.

## Using the library

```python
from netdump.records import PacketHeader, parse_source
from netdump.udpdump import Capture, format_packet, is_ip_udp, parse_udp_packet

source = parse_source("rpcap://[1:2:3::4]:2002/eth0")
print(source.kind, source.host, source.port, source.name)   # host '1:2:3::4', port '2002'

packet = parse_udp_packet(frame)          # frame: bytes of an Ethernet frame
print(packet.ip.saddr, packet.udp.sport, packet.ip.daddr, packet.udp.dport)
print(packet)                             # "10.0.0.1.5000 -> 10.0.0.2.53"

header = PacketHeader(ts_sec=0, ts_usec=0, caplen=len(frame), length=len(frame))
print(format_packet(header, frame))

with Capture("eth0") as capture:
    for header, data in capture.packets():
        if is_ip_udp(data):
            print(format_packet(header, data))
```

## What this package does not do

- It does not read or write whole savefiles. It only encodes and decodes
  their headers.
- It has no filter expression compiler. The UDP selection is made by
  `is_ip_udp`.
- It does not connect to remote capture servers. `parse_source` and
  `create_source` handle source strings only.
- It does not send packets.

## Tests

```
pip install .[test]
pytest
```