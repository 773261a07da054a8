"""802.1Q VLAN tag."""

from __future__ import annotations

import struct
from dataclasses import dataclass

VLAN_TAG_LEN = 4
ETH_P_8021Q = 0x8100

_TAG = struct.Struct(">HH")
_PRIORITY_SHIFT = 13
_DEI_BIT = 0x1000
_VID_MASK = 0x0FFF


@dataclass(frozen=True)
class VlanTag:
    """A VLAN tag: protocol identifier and tag control information."""

    tpid: int = ETH_P_8021Q
    tci: int = 0

    def __post_init__(self) -> None:
        for label, value in (("tpid", self.tpid), ("tci", self.tci)):
            if not 0 <= value <= 0xFFFF:
                raise ValueError(f"{label} must fit in 16 bits, got {value}")

    @classmethod
    def from_fields(
        cls,
        priority: int = 0,
        drop_eligible: bool = False,
        vlan_id: int = 0,
        tpid: int = ETH_P_8021Q,
    ) -> "VlanTag":
        """Build a tag from its priority, drop-eligible bit and VLAN id."""
        if not 0 <= priority <= 7:
            raise ValueError(f"priority must be 0-7, got {priority}")
        if not 0 <= vlan_id <= _VID_MASK:
            raise ValueError(f"VLAN id must be 0-4095, got {vlan_id}")
        tci = (priority << _PRIORITY_SHIFT) | (_DEI_BIT if drop_eligible else 0) | vlan_id
        return cls(tpid, tci)

    def pack(self) -> bytes:
        """Encode the tag in network byte order."""
        return _TAG.pack(self.tpid, self.tci)

    @classmethod
    def unpack(cls, data: bytes) -> "VlanTag":
        """Decode a tag from network byte order."""
        if len(data) < VLAN_TAG_LEN:
            raise ValueError(f"VLAN tag needs {VLAN_TAG_LEN} bytes, got {len(data)}")
        return cls(*_TAG.unpack(bytes(data[:VLAN_TAG_LEN])))

    @property
    def priority(self) -> int:
        """The priority code point."""
        return self.tci >> _PRIORITY_SHIFT

    @property
    def drop_eligible(self) -> bool:
        """The drop-eligible indicator."""
        return bool(self.tci & _DEI_BIT)

    @property
    def vlan_id(self) -> int:
        """The VLAN identifier."""
        return self.tci & _VID_MASK