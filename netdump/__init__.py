"""Packet capture record formats, link-layer headers and a UDP traffic dumper."""

__version__ = "0.1.0"

__all__ = ["constants", "records", "vlan", "sll", "usb", "udpdump"]