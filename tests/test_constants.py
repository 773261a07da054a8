import pytest

from netdump.constants import (
    ConnectionStatus,
    ErrorCode,
    InterfaceFlag,
    PcapError,
    WarningCode,
    lt_fcs_datalink_ext,
    lt_fcs_length,
    lt_fcs_length_present,
    status_to_str,
)


def test_error_codes_have_distinct_descriptions():
    texts = {status_to_str(member) for member in ErrorCode}
    assert len(texts) == len(ErrorCode)
    assert all(member.value < 0 for member in ErrorCode)


def test_warning_code_error_carries_its_value():
    error = PcapError(code=WarningCode.PROMISC_NOTSUP)
    assert error.code == 2
    assert str(error) == status_to_str(2)


def test_precision_error_carries_its_value():
    error = PcapError(code=ErrorCode.TSTAMP_PRECISION_NOTSUP)
    assert error.code == -12
    assert str(error) == status_to_str(-12)


@pytest.mark.parametrize("status", list(ConnectionStatus))
def test_connection_status_from_flags(status):
    flags = InterfaceFlag.UP | InterfaceFlag.LOOPBACK | status
    assert ConnectionStatus.from_flags(flags) is status


@pytest.mark.parametrize("length", range(16))
def test_fcs_round_trip(length):
    encoded = lt_fcs_datalink_ext(length)
    assert lt_fcs_length_present(encoded)
    assert lt_fcs_length(encoded) == length


def test_fcs_absent_on_plain_link_type():
    assert lt_fcs_length_present(1) is False
    assert lt_fcs_length(1) == 0


def test_fcs_ext_masks_to_four_bits():
    assert lt_fcs_datalink_ext(0x14) == lt_fcs_datalink_ext(0x4)


def test_status_to_str_known_codes():
    assert status_to_str(ErrorCode.BREAK) == "loop terminated by pcap_breakloop"
    assert status_to_str(-5) == "no such device exists"
    assert status_to_str(WarningCode.GENERIC) == "generic warning code"


def test_status_to_str_every_code_described():
    for member in list(ErrorCode) + list(WarningCode):
        assert not status_to_str(member).startswith("unknown")


def test_status_to_str_unknown_code_mentions_number():
    text = status_to_str(-999)
    assert text.startswith("unknown")
    assert "-999" in text


def test_pcap_error_defaults_to_status_text():
    error = PcapError(code=ErrorCode.PERM_DENIED)
    assert error.code == -8
    assert str(error) == "no permission to open the device"


def test_pcap_error_custom_message():
    error = PcapError("cannot open eth9", ErrorCode.NO_SUCH_DEVICE)
    assert error.code == ErrorCode.NO_SUCH_DEVICE
    assert str(error) == "cannot open eth9"
    with pytest.raises(PcapError, match="cannot open eth9"):
        raise error


def test_pcap_error_default_code_is_generic():
    error = PcapError("boom")
    assert error.code == ErrorCode.GENERIC