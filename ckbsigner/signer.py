"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Transaction signing - script grouping, sighash-all digest, witness signing

Inputs are grouped by the hash of their lock script. Each group is signed
once: the digest covers tx_hash, the group's first witness with its lock
replaced by a 65-byte zero placeholder, the group's other witnesses, and
every witness beyond the inputs. The signature goes into the lock of the
group's first witness; all other witnesses are returned unchanged.
"""

from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ckbsigner.crypto import HASH_SIZE, RECOVERABLE_SIGNATURE_SIZE, Key, new_blake2b
from ckbsigner.errors import (
    CellInputNotCached,
    InvalidOutputPoint,
    InvalidSignature,
    InvalidTxHash,
    RequiredWitness,
    WitnessEmpty,
    WitnessGroupEmpty,
)
from ckbsigner.serialize import serialize_u64
from ckbsigner.transaction import CachedCell, OutPoint, TxInput, TxOutput, Witness
from ckbsigner.util import debug_print

SIGNATURE_PLACEHOLDER = bytes(RECOVERABLE_SIGNATURE_SIZE)


class ChainSigner(Protocol):
    """Anything that can produce a recoverable signature over a digest"""

    def sign_recoverable(
        self, digest: bytes, symbol: str, address: str, derive_path: Optional[str]
    ) -> bytes:
        ...


class PrivateKeySigner:
    """ChainSigner backed by a single in-memory secp256k1 key"""

    def __init__(self, key: Key):
        self.key = key

    @classmethod
    def from_private_key(cls, privkey_hex: str) -> "PrivateKeySigner":
        key = Key()
        if not key.set_privkey(bytes.fromhex(privkey_hex)):
            raise ValueError("Invalid private key")
        return cls(key)

    def sign_recoverable(
        self, digest: bytes, symbol: str, address: str, derive_path: Optional[str] = None
    ) -> bytes:
        # A single key has no children, derive_path is not used
        return self.key.sign_recoverable(digest)


def group_scripts(input_cells: Sequence[CachedCell]) -> Dict[bytes, List[int]]:
    """
    Group input indices by lock script hash

    Cells without a lock are skipped. Groups are ordered by the first
    occurrence of each hash.
    """
    groups: Dict[bytes, List[int]] = {}
    for i, cell in enumerate(input_cells):
        if cell.lock is None:
            continue
        groups.setdefault(cell.lock.to_hash(), []).append(i)
    return groups


class CkbTxSigner:
    """Signs the witnesses of one transaction with a ChainSigner"""

    def __init__(self, signer: ChainSigner, symbol: str, address: str):
        self.signer = signer
        self.symbol = symbol
        self.address = address

    def sign_witnesses(
        self, tx_hash: bytes, witnesses: Sequence[Witness], input_cells: Sequence[CachedCell]
    ) -> List[Witness]:
        """
        Sign every lock group and return the new witness list

        Args:
            tx_hash: 32-byte hash of the raw transaction
            witnesses: One witness per input, followed by any extra witnesses
            input_cells: Cached cell for each input, in input order

        Returns:
            Copy of witnesses with the first witness of each group signed
        """
        if len(tx_hash) != HASH_SIZE:
            raise InvalidTxHash(f"tx_hash must be {HASH_SIZE} bytes, got {len(tx_hash)}")

        if not witnesses:
            raise WitnessEmpty("No witnesses to sign")
        if len(witnesses) < len(input_cells):
            raise WitnessEmpty(f"{len(witnesses)} witnesses for {len(input_cells)} inputs")

        grouped_scripts = group_scripts(input_cells)
        debug_print("sign_witnesses: %d inputs, %d groups", len(input_cells), len(grouped_scripts))

        extra_witnesses = list(witnesses[len(input_cells) :])
        raw_witnesses = [w.copy() for w in witnesses]

        for lock_hash, indices in grouped_scripts.items():
            witness_group = [witnesses[i] for i in indices] + extra_witnesses
            path = input_cells[indices[0]].derive_path

            debug_print(
                "sign_witnesses: group %s first input %d size %d",
                lock_hash.hex()[:16],
                indices[0],
                len(indices),
            )
            raw_witnesses[indices[0]] = self.sign_witness_group(tx_hash, witness_group, path)

        return raw_witnesses

    def sign_witness_group(
        self, tx_hash: bytes, witness_group: Sequence[Witness], path: str
    ) -> Witness:
        """
        Sign one group

        witness_group[0] is the witness that receives the signature; the rest
        are hashed as given.
        """
        if not witness_group:
            raise WitnessGroupEmpty("Witness group is empty")

        first = witness_group[0]
        empty_witness = Witness(SIGNATURE_PLACEHOLDER, first.input_type, first.output_type)
        serialized_empty_witness = empty_witness.serialize()

        s = new_blake2b()
        s.update(tx_hash)
        s.update(serialize_u64(len(serialized_empty_witness)))
        s.update(serialized_empty_witness)

        for w in witness_group[1:]:
            data = w.serialize()
            s.update(serialize_u64(len(data)))
            s.update(data)

        digest = s.finalize()
        debug_print("sign_witness_group: digest %s", digest.hex())

        opt_path = path if path else None
        signature = self.signer.sign_recoverable(digest, self.symbol, self.address, opt_path)
        if len(signature) != RECOVERABLE_SIGNATURE_SIZE:
            raise InvalidSignature(
                f"Expected {RECOVERABLE_SIGNATURE_SIZE}-byte signature, got {len(signature)}"
            )

        empty_witness.lock = bytes(signature)
        return empty_witness


def resolve_input_cells(tx: TxInput) -> List[CachedCell]:
    """Find the cached cell spent by each input, in input order"""
    map_cells: Dict[Tuple[bytes, int], CachedCell] = {}
    for cell in tx.cached_cells:
        if cell.out_point is None:
            continue
        # First match wins, same as a front-to-back scan
        map_cells.setdefault((cell.out_point.tx_hash, cell.out_point.index), cell)

    input_cells = []
    for i, cell_input in enumerate(tx.inputs):
        prevout: Optional[OutPoint] = cell_input.previous_output
        if prevout is None:
            raise InvalidOutputPoint(f"Input {i} has no previous output")
        cell = map_cells.get((prevout.tx_hash, prevout.index))
        if cell is None:
            raise CellInputNotCached(f"Input {i} spends {prevout} which is not cached")
        input_cells.append(cell)
    return input_cells


def sign_transaction(signer: ChainSigner, symbol: str, address: str, tx: TxInput) -> TxOutput:
    """
    Sign an unsigned CKB transaction

    Args:
        signer: Produces the recoverable signatures
        symbol: Chain symbol passed through to the signer (e.g. "CKB")
        address: Signing address passed through to the signer
        tx: Unsigned transaction with its cached input cells

    Returns:
        TxOutput with the same tx_hash and the signed witnesses
    """
    if len(tx.tx_hash) != HASH_SIZE:
        raise InvalidTxHash(f"tx_hash must be {HASH_SIZE} bytes, got {len(tx.tx_hash)}")

    if not tx.witnesses:
        raise RequiredWitness("Transaction has no witnesses")
    if len(tx.witnesses) < len(tx.inputs):
        raise RequiredWitness(
            f"Transaction has {len(tx.witnesses)} witnesses for {len(tx.inputs)} inputs"
        )

    input_cells = resolve_input_cells(tx)

    tx_signer = CkbTxSigner(signer, symbol, address)
    signed_witnesses = tx_signer.sign_witnesses(tx.tx_hash, tx.witnesses, input_cells)

    return TxOutput(tx.tx_hash, signed_witnesses)
