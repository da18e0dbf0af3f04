"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Serialization system for CKB (molecule layout)

All integers are little-endian. Four layouts are used:

    struct       fixed-size fields concatenated, no header
    fixed vec    u32 total payload size, then the items
    dynamic vec  u32 total size, one u32 offset per item, then the items
    bytes opt    nothing when empty, otherwise a fixed vec of the bytes
"""

import struct
from typing import List, Optional, Sequence, Tuple

HEADER_ITEM_SIZE = 4


def serialize_u32(value: int) -> bytes:
    """Serialize an unsigned 32-bit integer"""
    return struct.pack("<I", value)


def serialize_u64(value: int) -> bytes:
    """Serialize an unsigned 64-bit integer"""
    return struct.pack("<Q", value)


def serialize_struct(values: Sequence[bytes]) -> bytes:
    """Concatenate fixed-size fields"""
    return b"".join(values)


def serialize_fixed_vec(values: Sequence[bytes]) -> bytes:
    """Serialize items prefixed with their total payload size"""
    body = b"".join(values)
    return serialize_u32(len(body)) + body


def calculate_offsets(element_lengths: Sequence[int]) -> Tuple[int, List[int]]:
    """
    Compute the offset table of a dynamic vector

    Returns:
        (total_size, offsets), offsets measured from the start of the encoding
    """
    header_length = HEADER_ITEM_SIZE + HEADER_ITEM_SIZE * len(element_lengths)
    offsets = []
    total = header_length
    for length in element_lengths:
        offsets.append(total)
        total += length
    return total, offsets


def serialize_dynamic_vec(values: Sequence[bytes]) -> bytes:
    """Serialize items behind a size header and an offset table"""
    total, offsets = calculate_offsets([len(item) for item in values])

    stream = bytearray()
    stream.extend(serialize_u32(total))
    for offset in offsets:
        stream.extend(serialize_u32(offset))
    for item in values:
        stream.extend(item)
    return bytes(stream)


def serialize_bytes_opt(value: Optional[bytes]) -> bytes:
    """Serialize an optional byte string: absent when empty"""
    if not value:
        return b""
    return serialize_fixed_vec([value])


def read_u32(data: bytes, offset: int) -> Tuple[int, int]:
    """Read u32 from data, returns (value, new_offset)"""
    if offset + 4 > len(data):
        raise ValueError("End of data")
    return struct.unpack("<I", data[offset : offset + 4])[0], offset + 4


def read_u64(data: bytes, offset: int) -> Tuple[int, int]:
    """Read u64 from data, returns (value, new_offset)"""
    if offset + 8 > len(data):
        raise ValueError("End of data")
    return struct.unpack("<Q", data[offset : offset + 8])[0], offset + 8


def deserialize_fixed_vec(data: bytes) -> bytes:
    """Return the payload of a fixed vec of bytes"""
    size, offset = read_u32(data, 0)
    if offset + size != len(data):
        raise ValueError(f"Fixed vec size {size} does not match {len(data) - offset} bytes")
    return bytes(data[offset:])


def deserialize_dynamic_vec(data: bytes) -> List[bytes]:
    """Split a dynamic vec into its items"""
    total, _ = read_u32(data, 0)
    if total != len(data):
        raise ValueError(f"Dynamic vec size {total} does not match {len(data)} bytes")
    if total == HEADER_ITEM_SIZE:
        return []

    first_offset, _ = read_u32(data, HEADER_ITEM_SIZE)
    if first_offset % HEADER_ITEM_SIZE != 0 or first_offset < 2 * HEADER_ITEM_SIZE:
        raise ValueError(f"Invalid first offset {first_offset}")
    if first_offset > total:
        raise ValueError("End of data")

    count = first_offset // HEADER_ITEM_SIZE - 1
    offsets = [read_u32(data, HEADER_ITEM_SIZE * (i + 1))[0] for i in range(count)]
    offsets.append(total)

    items = []
    for start, end in zip(offsets, offsets[1:]):
        if start > end:
            raise ValueError(f"Offsets not in order: {start} > {end}")
        items.append(bytes(data[start:end]))
    return items
