import pytest

from netdump.usb import (
    URB_TRANSFER_IN,
    EventType,
    IsoDescriptor,
    IsoRec,
    TransferType,
    UsbHeader,
    UsbHeaderMmapped,
    UsbSetup,
)


def _header(
    cls=UsbHeader,
    event_type=EventType.COMPLETE,
    transfer_type=TransferType.BULK,
    **extra,
):
    return cls(
        id=0x1122334455667788,
        event_type=event_type,
        transfer_type=transfer_type,
        endpoint_number=URB_TRANSFER_IN | 2,
        device_address=5,
        bus_id=3,
        setup_flag=ord("-"),
        data_flag=0,
        ts_sec=1_600_000_000,
        ts_usec=250_000,
        status=-32,
        urb_len=512,
        data_len=64,
        setup=UsbSetup(0x80, 6, 0x0100, 0, 18),
        **extra,
    )


@pytest.mark.parametrize(
    "event, letter",
    [(EventType.SUBMIT, "S"), (EventType.COMPLETE, "C"), (EventType.ERROR, "E")],
)
def test_event_type_byte_is_letter(event, letter):
    data = _header(event_type=event).pack()
    assert data[8] == ord(letter)


@pytest.mark.parametrize(
    "kind, expected",
    [
        (TransferType.ISOCHRONOUS, 0),
        (TransferType.INTERRUPT, 1),
        (TransferType.CONTROL, 2),
        (TransferType.BULK, 3),
    ],
)
def test_transfer_type_byte(kind, expected):
    data = _header(transfer_type=kind).pack()
    assert data[9] == expected


def test_endpoint_byte_carries_direction_bit():
    data = _header().pack()
    assert data[10] == 0x82


def test_setup_round_trip():
    setup = UsbSetup(0x80, 6, 0x0100, 0, 18)
    data = setup.pack()
    assert len(data) == UsbSetup.SIZE
    assert UsbSetup.unpack(data) == setup


def test_setup_is_little_endian():
    data = UsbSetup(0x21, 9, 0x0200, 1, 8).pack()
    assert data[0] == 0x21
    assert data[1] == 9
    assert int.from_bytes(data[2:4], "little") == 0x0200


def test_iso_rec_round_trip_with_negative():
    rec = IsoRec(-1, 4)
    assert IsoRec.unpack(rec.pack()) == rec


def test_header_size():
    assert len(_header().pack()) == 48
    assert len(_header(UsbHeaderMmapped).pack()) == 64


def test_header_round_trip():
    header = _header()
    data = header.pack()
    assert len(data) == UsbHeader.SIZE
    assert UsbHeader.unpack(data) == header


def test_header_event_byte_position():
    data = _header().pack()
    assert data[8] == EventType.COMPLETE
    assert data[9] == TransferType.BULK


def test_header_properties():
    header = _header()
    assert header.endpoint == 2
    assert header.is_in
    assert not header.setup_present
    assert header.data_present
    assert header.timestamp == pytest.approx(1_600_000_000.25)


def test_header_unpack_short_raises():
    with pytest.raises(ValueError):
        UsbHeader.unpack(b"\x00" * (UsbHeader.SIZE - 1))


def test_header_field_out_of_range_raises():
    with pytest.raises(ValueError):
        UsbHeader(bus_id=0x10000).pack()


def test_mmapped_round_trip():
    header = _header(UsbHeaderMmapped, interval=8, start_frame=-1, xfer_flags=0x200, ndesc=0)
    data = header.pack()
    assert len(data) == UsbHeaderMmapped.SIZE
    assert UsbHeaderMmapped.unpack(data) == header


def test_mmapped_prefix_matches_plain_header():
    plain = _header()
    mmapped = _header(UsbHeaderMmapped, interval=1)
    assert mmapped.pack()[: UsbHeader.SIZE] == plain.pack()


def test_mmapped_iso_view():
    header = _header(UsbHeaderMmapped).with_iso(IsoRec(2, 10))
    assert header.iso == IsoRec(2, 10)
    assert UsbHeaderMmapped.unpack(header.pack()).iso == IsoRec(2, 10)


def test_mmapped_unpack_short_raises():
    with pytest.raises(ValueError):
        UsbHeaderMmapped.unpack(_header().pack())


def test_iso_descriptor_round_trip():
    desc = IsoDescriptor(-18, 1024, 192)
    data = desc.pack()
    assert len(data) == IsoDescriptor.SIZE
    assert IsoDescriptor.unpack(data) == desc
    assert data[-4:] == bytes(4)


def test_iso_descriptor_pad_too_long_raises():
    with pytest.raises(ValueError):
        IsoDescriptor(pad=b"\x00" * 5)


def test_iso_descriptor_unpack_short_raises():
    with pytest.raises(ValueError):
        IsoDescriptor.unpack(b"\x00" * 3)