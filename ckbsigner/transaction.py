"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Transaction data model - OutPoint, CellInput, Script, CachedCell, Witness
"""

from typing import List, Optional, Union

from ckbsigner.crypto import ckb_hash
from ckbsigner.errors import InvalidHashType
from ckbsigner.serialize import (
    deserialize_dynamic_vec,
    deserialize_fixed_vec,
    serialize_bytes_opt,
    serialize_dynamic_vec,
    serialize_fixed_vec,
    serialize_struct,
    serialize_u32,
    serialize_u64,
)

# Script hash types
HASH_TYPE_DATA = 0x00
HASH_TYPE_TYPE = 0x01
HASH_TYPE_DATA1 = 0x02
HASH_TYPE_DATA2 = 0x04

MAP_HASH_TYPES = {
    "data": HASH_TYPE_DATA,
    "type": HASH_TYPE_TYPE,
    "data1": HASH_TYPE_DATA1,
    "data2": HASH_TYPE_DATA2,
}

WITNESS_FIELD_COUNT = 3


class OutPoint:
    """Reference to an output of a previous transaction"""

    def __init__(self, tx_hash: bytes = b"", index: int = 0):
        self.tx_hash = bytes(tx_hash)
        self.index = index

    def serialize(self) -> bytes:
        return serialize_struct([self.tx_hash, serialize_u32(self.index)])

    def __eq__(self, other):
        return (
            isinstance(other, OutPoint)
            and self.tx_hash == other.tx_hash
            and self.index == other.index
        )

    def __hash__(self):
        return hash((self.tx_hash, self.index))

    def __str__(self):
        return f"OutPoint({self.tx_hash.hex()[:10]}, {self.index})"

    def __repr__(self):
        return self.__str__()


def parse_since(since: Union[int, str]) -> int:
    """Parse a since value given as int, hex string ("0x...") or "" (zero)"""
    if isinstance(since, int):
        return since
    if since == "":
        return 0
    if since.startswith("0x"):
        return int(since, 16)
    return int(since)


class CellInput:
    """Transaction input"""

    def __init__(self, previous_output: Optional[OutPoint] = None, since: Union[int, str] = 0):
        self.previous_output = previous_output
        self.since = since

    def serialize(self) -> bytes:
        if self.previous_output is None:
            raise ValueError("CellInput has no previous output")
        return serialize_struct(
            [serialize_u64(parse_since(self.since)), self.previous_output.serialize()]
        )

    def __eq__(self, other):
        return (
            isinstance(other, CellInput)
            and self.previous_output == other.previous_output
            and parse_since(self.since) == parse_since(other.since)
        )

    def __repr__(self):
        return f"CellInput(previous_output={self.previous_output!r}, since={self.since!r})"


class Script:
    """Lock or type script guarding a cell"""

    def __init__(self, args: bytes = b"", code_hash: bytes = b"", hash_type: str = "data"):
        self.args = bytes(args)
        self.code_hash = bytes(code_hash)
        self.hash_type = hash_type

    def serialize_hash_type(self) -> bytes:
        if self.hash_type not in MAP_HASH_TYPES:
            raise InvalidHashType(f"Unknown script hash_type {self.hash_type!r}")
        return bytes([MAP_HASH_TYPES[self.hash_type]])

    def serialize(self) -> bytes:
        return serialize_dynamic_vec(
            [
                serialize_struct([self.code_hash]),
                serialize_struct([self.serialize_hash_type()]),
                serialize_fixed_vec([self.args]),
            ]
        )

    def to_hash(self) -> bytes:
        """Script hash, the key cells are grouped by when signing"""
        return ckb_hash(self.serialize())

    def __eq__(self, other):
        return (
            isinstance(other, Script)
            and self.args == other.args
            and self.code_hash == other.code_hash
            and self.hash_type == other.hash_type
        )

    def __repr__(self):
        return (
            f"Script(code_hash={self.code_hash.hex()}, hash_type={self.hash_type}, "
            f"args={self.args.hex()})"
        )


class CachedCell:
    """
    Snapshot of a live cell an input spends

    Only out_point, lock and derive_path take part in signing; the remaining
    fields are carried for callers that fetched them.
    """

    def __init__(
        self,
        out_point: Optional[OutPoint] = None,
        lock: Optional[Script] = None,
        type_: Optional[Script] = None,
        derive_path: str = "",
        capacity: int = 0,
        status: str = "",
        block_hash: bytes = b"",
        cellbase: bool = False,
        output_data_len: int = 0,
        data_hash: bytes = b"",
    ):
        self.out_point = out_point
        self.lock = lock
        self.type_ = type_
        self.derive_path = derive_path
        self.capacity = capacity
        self.status = status
        self.block_hash = bytes(block_hash)
        self.cellbase = cellbase
        self.output_data_len = output_data_len
        self.data_hash = bytes(data_hash)

    def __repr__(self):
        return (
            f"CachedCell(out_point={self.out_point!r}, lock={self.lock!r}, "
            f"derive_path={self.derive_path!r})"
        )


class Witness:
    """
    Witness arguments of one input

    Each field is an optional byte string; an empty field is encoded as
    absent but still owns its offset slot.
    """

    def __init__(self, lock: bytes = b"", input_type: bytes = b"", output_type: bytes = b""):
        self.lock = bytes(lock)
        self.input_type = bytes(input_type)
        self.output_type = bytes(output_type)

    def serialize(self) -> bytes:
        return serialize_dynamic_vec(
            [
                serialize_bytes_opt(self.lock),
                serialize_bytes_opt(self.input_type),
                serialize_bytes_opt(self.output_type),
            ]
        )

    @classmethod
    def unserialize(cls, data: bytes) -> "Witness":
        fields = deserialize_dynamic_vec(data)
        if len(fields) != WITNESS_FIELD_COUNT:
            raise ValueError(f"Witness must have {WITNESS_FIELD_COUNT} fields, got {len(fields)}")
        values = [deserialize_fixed_vec(field) if field else b"" for field in fields]
        return cls(*values)

    def is_empty(self) -> bool:
        return not (self.lock or self.input_type or self.output_type)

    def copy(self) -> "Witness":
        return Witness(self.lock, self.input_type, self.output_type)

    def __eq__(self, other):
        return (
            isinstance(other, Witness)
            and self.lock == other.lock
            and self.input_type == other.input_type
            and self.output_type == other.output_type
        )

    def __repr__(self):
        return (
            f"Witness(lock={self.lock.hex()}, input_type={self.input_type.hex()}, "
            f"output_type={self.output_type.hex()})"
        )


class TxInput:
    """Unsigned transaction handed to the signer"""

    def __init__(
        self,
        tx_hash: bytes = b"",
        inputs: Optional[List[CellInput]] = None,
        witnesses: Optional[List[Witness]] = None,
        cached_cells: Optional[List[CachedCell]] = None,
    ):
        self.tx_hash = bytes(tx_hash)
        self.inputs = inputs if inputs is not None else []
        self.witnesses = witnesses if witnesses is not None else []
        self.cached_cells = cached_cells if cached_cells is not None else []


class TxOutput:
    """Signed result: tx_hash and the witnesses to submit"""

    def __init__(self, tx_hash: bytes = b"", witnesses: Optional[List[Witness]] = None):
        self.tx_hash = bytes(tx_hash)
        self.witnesses = witnesses if witnesses is not None else []

    def serialize_witnesses(self) -> List[bytes]:
        return [w.serialize() for w in self.witnesses]
