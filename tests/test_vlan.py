import pytest

from netdump.vlan import ETH_P_8021Q, VLAN_TAG_LEN, VlanTag


def test_pack_default_tag_wire_bytes():
    assert VlanTag(ETH_P_8021Q, 0).pack() == b"\x81\x00\x00\x00"


def test_pack_length():
    assert len(VlanTag(tci=0xFFFF).pack()) == VLAN_TAG_LEN


@pytest.mark.parametrize("tci", [0, 1, 0x0FFF, 0x1000, 0xE123, 0xFFFF])
def test_round_trip(tci):
    tag = VlanTag(ETH_P_8021Q, tci)
    assert VlanTag.unpack(tag.pack()) == tag


@pytest.mark.parametrize(
    "priority, drop_eligible, vlan_id",
    [(0, False, 0), (7, True, 4095), (5, False, 100), (3, True, 1)],
)
def test_fields_round_trip(priority, drop_eligible, vlan_id):
    tag = VlanTag.from_fields(priority, drop_eligible, vlan_id)
    decoded = VlanTag.unpack(tag.pack())
    assert decoded.priority == priority
    assert decoded.drop_eligible is drop_eligible
    assert decoded.vlan_id == vlan_id
    assert decoded.tpid == ETH_P_8021Q


def test_unpack_ignores_trailing_bytes():
    tag = VlanTag.from_fields(2, False, 42)
    assert VlanTag.unpack(tag.pack() + b"\x08\x00") == tag


def test_unpack_short_data():
    with pytest.raises(ValueError):
        VlanTag.unpack(b"\x81\x00")


def test_out_of_range_values():
    with pytest.raises(ValueError):
        VlanTag(tci=0x10000)
    with pytest.raises(ValueError):
        VlanTag.from_fields(priority=8)
    with pytest.raises(ValueError):
        VlanTag.from_fields(vlan_id=4096)