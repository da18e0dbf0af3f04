"""
ckbsigner - CKB transaction signing

Encodes witnesses in the chain's molecule layout, groups inputs by lock
script and signs each group's sighash-all digest with a recoverable
secp256k1 signature.
"""

__version__ = "0.1.0"

from ckbsigner.crypto import (
    CKB_HASH_PERSONALIZATION,
    Blake2bHasher,
    Key,
    ckb_hash,
    new_blake2b,
    recover_pubkey,
)
from ckbsigner.errors import (
    CellInputNotCached,
    CkbError,
    InvalidHashType,
    InvalidOutputPoint,
    InvalidSignature,
    InvalidTxHash,
    RequiredWitness,
    WitnessEmpty,
    WitnessGroupEmpty,
)
from ckbsigner.serialize import (
    deserialize_dynamic_vec,
    deserialize_fixed_vec,
    read_u32,
    read_u64,
    serialize_bytes_opt,
    serialize_dynamic_vec,
    serialize_fixed_vec,
    serialize_struct,
    serialize_u32,
    serialize_u64,
)
from ckbsigner.signer import (
    SIGNATURE_PLACEHOLDER,
    ChainSigner,
    CkbTxSigner,
    PrivateKeySigner,
    group_scripts,
    resolve_input_cells,
    sign_transaction,
)
from ckbsigner.transaction import (
    CachedCell,
    CellInput,
    OutPoint,
    Script,
    TxInput,
    TxOutput,
    Witness,
)

__all__ = [
    # Crypto
    "CKB_HASH_PERSONALIZATION",
    "Blake2bHasher",
    "Key",
    "ckb_hash",
    "new_blake2b",
    "recover_pubkey",
    # Errors
    "CkbError",
    "CellInputNotCached",
    "InvalidHashType",
    "InvalidOutputPoint",
    "InvalidSignature",
    "InvalidTxHash",
    "RequiredWitness",
    "WitnessEmpty",
    "WitnessGroupEmpty",
    # Serialize
    "deserialize_dynamic_vec",
    "deserialize_fixed_vec",
    "read_u32",
    "read_u64",
    "serialize_bytes_opt",
    "serialize_dynamic_vec",
    "serialize_fixed_vec",
    "serialize_struct",
    "serialize_u32",
    "serialize_u64",
    # Signer
    "SIGNATURE_PLACEHOLDER",
    "ChainSigner",
    "CkbTxSigner",
    "PrivateKeySigner",
    "group_scripts",
    "resolve_input_cells",
    "sign_transaction",
    # Transaction
    "CachedCell",
    "CellInput",
    "OutPoint",
    "Script",
    "TxInput",
    "TxOutput",
    "Witness",
]
