"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Cryptographic functions: Blake2b (CKB personalization), recoverable ECDSA
"""

import hashlib
from typing import Optional

from ecdsa import SECP256k1, MalformedPointError, SigningKey, VerifyingKey
from ecdsa.numbertheory import SquareRootError
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from ckbsigner.util import error

# Blake2b parameters fixed by the CKB chain
CKB_HASH_PERSONALIZATION = b"ckb-default-hash"
HASH_SIZE = 32

SIGNATURE_SIZE = 64
RECOVERABLE_SIGNATURE_SIZE = SIGNATURE_SIZE + 1


class Blake2bHasher:
    """
    Incremental blake2b-256 with the CKB personalization

    finalize() is one-shot; the hasher cannot be used after it.
    """

    def __init__(self):
        self._hasher = hashlib.blake2b(digest_size=HASH_SIZE, person=CKB_HASH_PERSONALIZATION)
        self._finalized = False

    def update(self, data: bytes):
        """Feed data into the hash"""
        if self._finalized:
            raise RuntimeError("Blake2bHasher.update() called after finalize()")
        self._hasher.update(data)

    def finalize(self) -> bytes:
        """Return the 32-byte digest"""
        if self._finalized:
            raise RuntimeError("Blake2bHasher.finalize() called twice")
        self._finalized = True
        return self._hasher.digest()


def new_blake2b() -> Blake2bHasher:
    return Blake2bHasher()


def ckb_hash(data: bytes) -> bytes:
    """One-shot CKB blake2b-256 hash"""
    hasher = new_blake2b()
    hasher.update(data)
    return hasher.finalize()


def _check_digest(digest: bytes):
    if len(digest) != HASH_SIZE:
        raise ValueError(f"Digest must be {HASH_SIZE} bytes, got {len(digest)}")


def recover_pubkey(digest: bytes, signature: bytes) -> bytes:
    """
    Recover the compressed public key from a recoverable signature

    Args:
        digest: 32-byte message hash that was signed
        signature: r || s || recovery_id (65 bytes)

    Returns:
        33-byte compressed public key
    """
    _check_digest(digest)
    if len(signature) != RECOVERABLE_SIGNATURE_SIZE:
        raise ValueError(f"Signature must be {RECOVERABLE_SIGNATURE_SIZE} bytes")
    recovery_id = signature[SIGNATURE_SIZE]
    if recovery_id not in (0, 1):
        raise ValueError(f"Unsupported recovery id {recovery_id}")

    # Candidates come back ordered even-R.y first, which is recovery id 0
    try:
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            signature[:SIGNATURE_SIZE],
            digest,
            SECP256k1,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_string,
        )
    except SquareRootError as e:
        raise ValueError(f"r is not the x coordinate of a curve point: {e}") from e
    return candidates[recovery_id].to_string("compressed")


class Key:
    """secp256k1 key for CKB"""

    def __init__(self):
        self._key: Optional[SigningKey] = None
        self._pubkey: Optional[VerifyingKey] = None

    def generate_new_key(self):
        """Generate a new key pair"""
        self._key = SigningKey.generate(curve=SECP256k1)
        self._pubkey = self._key.get_verifying_key()

    @property
    def public_key(self) -> bytes:
        """Public key as property"""
        return self.get_pubkey()

    @property
    def private_key(self) -> bytes:
        """Private key as property"""
        return self.get_privkey()

    def get_pubkey(self) -> bytes:
        """Get public key as bytes"""
        if self._pubkey is None:
            raise ValueError("No public key")
        # CKB uses compressed public keys (33 bytes: 0x02/0x03 + x)
        return self._pubkey.to_string("compressed")

    def get_privkey(self) -> bytes:
        """Get private key as bytes"""
        if self._key is None:
            raise ValueError("No private key")
        return self._key.to_string()

    def set_privkey(self, privkey: bytes) -> bool:
        """Set private key from bytes"""
        try:
            self._key = SigningKey.from_string(privkey, curve=SECP256k1)
        except (ValueError, MalformedPointError):
            return False
        self._pubkey = self._key.get_verifying_key()
        return True

    def sign_recoverable(self, digest: bytes) -> bytes:
        """
        Sign a 32-byte digest

        The nonce is RFC 6979 with HMAC-SHA256 and s is normalised to the low
        half of the curve order, so the result is byte-identical to
        libsecp256k1's recoverable signature for the same key and digest.

        Returns:
            r || s || recovery_id (65 bytes)
        """
        if self._key is None:
            raise ValueError("No private key")
        _check_digest(digest)

        sig = self._key.sign_digest_deterministic(
            digest, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
        )
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            sig, digest, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
        )
        pubkey = self.get_pubkey()
        for recovery_id, candidate in enumerate(candidates):
            if candidate.to_string("compressed") == pubkey:
                return sig + bytes([recovery_id])
        raise RuntimeError("sign_recoverable() : public key not recoverable from signature")

    def verify_recoverable(self, digest: bytes, signature: bytes) -> bool:
        """Check that a recoverable signature was made by this key"""
        if self._pubkey is None:
            return False
        try:
            recovered = recover_pubkey(digest, signature)
        except ValueError as e:
            return error("verify_recoverable() : %s", e)
        if recovered != self.get_pubkey():
            return error("verify_recoverable() : pubkey mismatch %s", recovered.hex())
        return True
