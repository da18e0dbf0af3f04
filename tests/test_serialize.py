"""
Tests for molecule serialization
"""

import pytest

from .context import ckbsigner


def test_serialize_u32():
    """Test u32 little-endian encoding"""
    assert ckbsigner.serialize_u32(0x01020304).hex() == "04030201"
    assert ckbsigner.serialize_u32(0) == b"\x00" * 4


def test_serialize_u64():
    """Test u64 little-endian encoding"""
    assert ckbsigner.serialize_u64(85).hex() == "5500000000000000"
    assert len(ckbsigner.serialize_u64(0xFFFFFFFFFFFFFFFF)) == 8


def test_serialize_struct():
    """Test struct is a plain concatenation"""
    data = ckbsigner.serialize_struct([bytes([0x11, 0x13]), bytes([0x20, 0x17, 0x09])])
    assert data.hex() == "1113201709"


def test_serialize_fixed_vec():
    """Test fixed vec carries the total payload size"""
    data = ckbsigner.serialize_fixed_vec([bytes.fromhex("1234567890abcdef")])
    assert data.hex() == "080000001234567890abcdef"


def test_serialize_dynamic_vec_empty():
    """Test empty dynamic vec is just its own header"""
    assert ckbsigner.serialize_dynamic_vec([]).hex() == "04000000"


def test_serialize_dynamic_vec_single():
    """Test dynamic vec with one item"""
    data = ckbsigner.serialize_dynamic_vec([bytes.fromhex("020000001234")])
    assert data.hex() == "0e00000008000000020000001234"


def test_serialize_dynamic_vec_many():
    """Test dynamic vec offsets over several items"""
    items = [
        bytes.fromhex("020000001234"),
        bytes.fromhex("00000000"),
        bytes.fromhex("020000000567"),
        bytes.fromhex("0100000089"),
        bytes.fromhex("03000000abcdef"),
    ]
    data = ckbsigner.serialize_dynamic_vec(items)
    assert data.hex() == (
        "34000000180000001e00000022000000280000002d000000"
        "02000000123400000000020000000567010000008903000000abcdef"
    )


def test_serialize_dynamic_vec_empty_items():
    """Test empty items still get an offset entry"""
    data = ckbsigner.serialize_dynamic_vec([b"", b"", b""])
    assert data.hex() == "10000000" * 4


def test_serialize_bytes_opt():
    """Test optional bytes are absent when empty"""
    assert ckbsigner.serialize_bytes_opt(b"") == b""
    assert ckbsigner.serialize_bytes_opt(None) == b""
    assert ckbsigner.serialize_bytes_opt(b"\xab").hex() == "01000000ab"


def test_read_integers():
    """Test reading u32 and u64 with offsets"""
    data = bytes.fromhex("0100000002000000000000000300")
    value, offset = ckbsigner.read_u32(data, 0)
    assert (value, offset) == (1, 4)
    value, offset = ckbsigner.read_u64(data, offset)
    assert (value, offset) == (2, 12)

    with pytest.raises(ValueError):
        ckbsigner.read_u32(data, offset)


def test_deserialize_fixed_vec():
    """Test fixed vec payload extraction"""
    payload = ckbsigner.deserialize_fixed_vec(bytes.fromhex("080000001234567890abcdef"))
    assert payload.hex() == "1234567890abcdef"
    assert ckbsigner.deserialize_fixed_vec(bytes.fromhex("00000000")) == b""

    with pytest.raises(ValueError):
        ckbsigner.deserialize_fixed_vec(bytes.fromhex("090000001234567890abcdef"))


def test_deserialize_dynamic_vec():
    """Test splitting a dynamic vec into items"""
    data = bytes.fromhex(
        "34000000180000001e00000022000000280000002d000000"
        "02000000123400000000020000000567010000008903000000abcdef"
    )
    items = ckbsigner.deserialize_dynamic_vec(data)
    assert [item.hex() for item in items] == [
        "020000001234",
        "00000000",
        "020000000567",
        "0100000089",
        "03000000abcdef",
    ]

    assert ckbsigner.deserialize_dynamic_vec(bytes.fromhex("04000000")) == []
    assert ckbsigner.deserialize_dynamic_vec(bytes.fromhex("10000000" * 4)) == [b"", b"", b""]


def test_deserialize_dynamic_vec_malformed():
    """Test malformed dynamic vecs are rejected"""
    # Total size disagrees with buffer
    with pytest.raises(ValueError):
        ckbsigner.deserialize_dynamic_vec(bytes.fromhex("0f00000008000000020000001234"))

    # Truncated header
    with pytest.raises(ValueError):
        ckbsigner.deserialize_dynamic_vec(bytes.fromhex("0400"))

    # First offset not aligned to the header
    with pytest.raises(ValueError):
        ckbsigner.deserialize_dynamic_vec(bytes.fromhex("0e00000009000000020000001234"))

    # Offsets going backwards
    with pytest.raises(ValueError):
        ckbsigner.deserialize_dynamic_vec(bytes.fromhex("110000000c0000000b000000aabbccdd00"))
