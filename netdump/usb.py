"""Linux USB capture headers, in little-endian host byte order."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field, replace

URB_TRANSFER_IN = 0x80
_ENDPOINT_MASK = 0x7F

_SETUP = struct.Struct("<BBHHH")
_ISO_REC = struct.Struct("<ii")
_HEADER_BASE = struct.Struct("<QBBBBHBBqiiII")
_MMAPPED_TAIL = struct.Struct("<iiII")
_ISO_DESC = struct.Struct("<iII4s")


class TransferType(enum.IntEnum):
    """USB transfer modes."""

    ISOCHRONOUS = 0x0
    INTERRUPT = 0x1
    CONTROL = 0x2
    BULK = 0x3


class EventType(enum.IntEnum):
    """Kinds of URB event."""

    SUBMIT = ord("S")
    COMPLETE = ord("C")
    ERROR = ord("E")


def _require(data: bytes, size: int, what: str) -> bytes:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")
    return bytes(data[:size])


def _pack(layout: struct.Struct, what: str, *values) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"{what} field out of range: {exc}") from exc


@dataclass(frozen=True)
class UsbSetup:
    """The setup packet at the front of a control submission."""

    bmRequestType: int = 0
    bRequest: int = 0
    wValue: int = 0
    wIndex: int = 0
    wLength: int = 0

    SIZE = _SETUP.size

    def pack(self) -> bytes:
        """Encode the setup packet."""
        return _pack(
            _SETUP,
            "USB setup",
            self.bmRequestType,
            self.bRequest,
            self.wValue,
            self.wIndex,
            self.wLength,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "UsbSetup":
        """Decode a setup packet."""
        return cls(*_SETUP.unpack(_require(data, _SETUP.size, "USB setup")))


@dataclass(frozen=True)
class IsoRec:
    """Isochronous transfer summary from the URB."""

    error_count: int = 0
    numdesc: int = 0

    SIZE = _ISO_REC.size

    def pack(self) -> bytes:
        """Encode the record."""
        return _pack(_ISO_REC, "isochronous record", self.error_count, self.numdesc)

    @classmethod
    def unpack(cls, data: bytes) -> "IsoRec":
        """Decode the record."""
        return cls(*_ISO_REC.unpack(_require(data, _ISO_REC.size, "isochronous record")))


@dataclass(frozen=True)
class UsbHeader:
    """Header the kernel puts in front of each USB event."""

    id: int = 0
    event_type: int = EventType.SUBMIT
    transfer_type: int = TransferType.CONTROL
    endpoint_number: int = 0
    device_address: int = 0
    bus_id: int = 0
    setup_flag: int = 0
    data_flag: int = 0
    ts_sec: int = 0
    ts_usec: int = 0
    status: int = 0
    urb_len: int = 0
    data_len: int = 0
    setup: UsbSetup = field(default_factory=UsbSetup)

    SIZE = _HEADER_BASE.size + _SETUP.size

    def _base(self) -> bytes:
        return _pack(
            _HEADER_BASE,
            "USB header",
            self.id,
            self.event_type,
            self.transfer_type,
            self.endpoint_number,
            self.device_address,
            self.bus_id,
            self.setup_flag,
            self.data_flag,
            self.ts_sec,
            self.ts_usec,
            self.status,
            self.urb_len,
            self.data_len,
        )

    def pack(self) -> bytes:
        """Encode the header."""
        return self._base() + self.setup.pack()

    @classmethod
    def unpack(cls, data: bytes) -> "UsbHeader":
        """Decode the header."""
        raw = _require(data, cls.SIZE, "USB header")
        fields = _HEADER_BASE.unpack(raw[: _HEADER_BASE.size])
        return cls(*fields, setup=UsbSetup.unpack(raw[_HEADER_BASE.size:]))

    @property
    def endpoint(self) -> int:
        """The endpoint number without the direction bit."""
        return self.endpoint_number & _ENDPOINT_MASK

    @property
    def is_in(self) -> bool:
        """Whether the endpoint is an IN (device-to-host) endpoint."""
        return bool(self.endpoint_number & URB_TRANSFER_IN)

    @property
    def setup_present(self) -> bool:
        """Whether the setup packet is present."""
        return self.setup_flag == 0

    @property
    def data_present(self) -> bool:
        """Whether URB data follows the header."""
        return self.data_flag == 0

    @property
    def timestamp(self) -> float:
        """The event time in seconds since the epoch."""
        return self.ts_sec + self.ts_usec / 1_000_000


@dataclass(frozen=True)
class UsbHeaderMmapped(UsbHeader):
    """The longer event header used by memory-mapped USB captures.

    The eight bytes after ``data_len`` hold either the setup packet or an
    isochronous record; ``setup`` stores them and ``iso`` reads them the
    other way.
    """

    interval: int = 0
    start_frame: int = 0
    xfer_flags: int = 0
    ndesc: int = 0

    SIZE = UsbHeader.SIZE + _MMAPPED_TAIL.size

    def pack(self) -> bytes:
        """Encode the header."""
        return (
            self._base()
            + self.setup.pack()
            + _pack(
                _MMAPPED_TAIL,
                "USB header",
                self.interval,
                self.start_frame,
                self.xfer_flags,
                self.ndesc,
            )
        )

    @classmethod
    def unpack(cls, data: bytes) -> "UsbHeaderMmapped":
        """Decode the header."""
        raw = _require(data, cls.SIZE, "memory-mapped USB header")
        fields = _HEADER_BASE.unpack(raw[: _HEADER_BASE.size])
        setup = UsbSetup.unpack(raw[_HEADER_BASE.size: UsbHeader.SIZE])
        interval, start_frame, xfer_flags, ndesc = _MMAPPED_TAIL.unpack(
            raw[UsbHeader.SIZE:]
        )
        return cls(
            *fields,
            setup=setup,
            interval=interval,
            start_frame=start_frame,
            xfer_flags=xfer_flags,
            ndesc=ndesc,
        )

    @property
    def iso(self) -> IsoRec:
        """The shared eight bytes read as an isochronous record."""
        return IsoRec.unpack(self.setup.pack())

    def with_iso(self, iso: IsoRec) -> "UsbHeaderMmapped":
        """Return a copy whose shared eight bytes hold ``iso``."""
        return replace(self, setup=UsbSetup.unpack(iso.pack()))


@dataclass(frozen=True)
class IsoDescriptor:
    """One isochronous frame descriptor at the start of the packet data."""

    status: int = 0
    offset: int = 0
    length: int = 0
    pad: bytes = bytes(4)

    SIZE = _ISO_DESC.size

    def __post_init__(self) -> None:
        raw = bytes(self.pad)
        if len(raw) > 4:
            raise ValueError(f"padding holds at most 4 bytes, got {len(raw)}")
        object.__setattr__(self, "pad", raw.ljust(4, b"\x00"))

    def pack(self) -> bytes:
        """Encode the descriptor."""
        return _pack(
            _ISO_DESC, "isochronous descriptor", self.status, self.offset, self.length, self.pad
        )

    @classmethod
    def unpack(cls, data: bytes) -> "IsoDescriptor":
        """Decode the descriptor."""
        return cls(*_ISO_DESC.unpack(_require(data, _ISO_DESC.size, "isochronous descriptor")))