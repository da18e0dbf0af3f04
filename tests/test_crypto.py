"""
Tests for blake2b hashing and recoverable signatures
"""

import hashlib

import pytest
from ecdsa import SECP256k1

from .context import ckbsigner

PRIVKEY = bytes.fromhex("dcec27d0d975b0378471183a03f7071dea8532aaf968be796719ecd20af6988f")


def make_key(privkey: bytes = PRIVKEY):
    key = ckbsigner.Key()
    assert key.set_privkey(privkey)
    return key


def test_ckb_hash_empty():
    """Test the well-known CKB hash of empty input"""
    assert (
        ckbsigner.ckb_hash(b"").hex()
        == "44f4c69744d5f8c55d642062949dcae49bc4e7ef43d388c5a12f42b5633d163e"
    )


def test_ckb_hash_personalization():
    """Test the personalization changes the digest"""
    data = b"hello world"
    plain = hashlib.blake2b(data, digest_size=32).digest()
    assert ckbsigner.ckb_hash(data) != plain
    assert ckbsigner.CKB_HASH_PERSONALIZATION == b"ckb-default-hash"


def test_blake2b_incremental():
    """Test incremental updates match the one-shot hash"""
    hasher = ckbsigner.new_blake2b()
    hasher.update(b"hello ")
    hasher.update(b"world")
    digest = hasher.finalize()
    assert len(digest) == 32
    assert digest == ckbsigner.ckb_hash(b"hello world")


def test_blake2b_order_sensitive():
    """Test update order matters"""
    h1 = ckbsigner.new_blake2b()
    h1.update(b"a")
    h1.update(b"b")
    h2 = ckbsigner.new_blake2b()
    h2.update(b"b")
    h2.update(b"a")
    assert h1.finalize() != h2.finalize()


def test_blake2b_finalize_once():
    """Test the hasher cannot be reused after finalize"""
    hasher = ckbsigner.Blake2bHasher()
    hasher.update(b"data")
    hasher.finalize()

    with pytest.raises(RuntimeError):
        hasher.finalize()
    with pytest.raises(RuntimeError):
        hasher.update(b"more")


def test_key_set_privkey():
    """Test loading a private key"""
    key = make_key()
    assert key.private_key == PRIVKEY
    pubkey = key.public_key
    assert len(pubkey) == 33
    assert pubkey[0] in (0x02, 0x03)


def test_key_set_privkey_invalid():
    """Test out-of-range and malformed private keys are refused"""
    key = ckbsigner.Key()
    assert not key.set_privkey(b"\x00" * 32)
    assert not key.set_privkey(b"\x01" * 31)

    with pytest.raises(ValueError):
        key.get_pubkey()


def test_generate_new_key():
    """Test generated keys differ"""
    key1 = ckbsigner.Key()
    key1.generate_new_key()
    key2 = ckbsigner.Key()
    key2.generate_new_key()
    assert key1.public_key != key2.public_key


def test_sign_recoverable():
    """Test recoverable signature layout and recovery"""
    key = make_key()
    digest = ckbsigner.ckb_hash(b"message")
    sig = key.sign_recoverable(digest)

    assert len(sig) == 65
    assert sig[64] in (0, 1)
    assert ckbsigner.recover_pubkey(digest, sig) == key.public_key
    assert key.verify_recoverable(digest, sig)


def test_sign_recoverable_low_s():
    """Test s is in the lower half of the curve order"""
    key = make_key()
    order = SECP256k1.order
    for i in range(8):
        sig = key.sign_recoverable(ckbsigner.ckb_hash(bytes([i])))
        s = int.from_bytes(sig[32:64], "big")
        assert 0 < s <= order // 2


def test_sign_recoverable_deterministic():
    """Test the same key and digest give the same signature"""
    key = make_key()
    digest = ckbsigner.ckb_hash(b"message")
    assert key.sign_recoverable(digest) == key.sign_recoverable(digest)
    assert key.sign_recoverable(digest) != key.sign_recoverable(ckbsigner.ckb_hash(b"other"))


def test_sign_recoverable_bad_digest():
    """Test digests must be 32 bytes"""
    key = make_key()
    with pytest.raises(ValueError):
        key.sign_recoverable(b"\x01" * 31)


def test_verify_recoverable_wrong_digest():
    """Test verification fails for another digest or key"""
    key = make_key()
    digest = ckbsigner.ckb_hash(b"message")
    sig = key.sign_recoverable(digest)

    assert not key.verify_recoverable(ckbsigner.ckb_hash(b"wrong message"), sig)

    other = make_key(b"\xee" * 32)
    assert not other.verify_recoverable(digest, sig)


def test_recover_pubkey_malformed():
    """Test malformed recoverable signatures are rejected"""
    key = make_key()
    digest = ckbsigner.ckb_hash(b"message")
    sig = key.sign_recoverable(digest)

    with pytest.raises(ValueError):
        ckbsigner.recover_pubkey(digest, sig[:64])
    with pytest.raises(ValueError):
        ckbsigner.recover_pubkey(digest, sig[:64] + b"\x04")
    with pytest.raises(ValueError):
        ckbsigner.recover_pubkey(digest[:31], sig)

    assert not key.verify_recoverable(digest, sig[:64])
