"""
Copyright (c) 2009 Satoshi Nakamoto
Distributed under the MIT/X11 software license

Signing errors

Every failure aborts the whole signing call; none of these are retried.
Errors raised by the external signer are not wrapped in any of these.
"""


class CkbError(Exception):
    """Base class for transaction signing errors"""


class InvalidTxHash(CkbError):
    """tx_hash is not 32 bytes"""


class RequiredWitness(CkbError):
    """Transaction carries no witnesses (top-level entry point)"""


class WitnessEmpty(CkbError):
    """No witnesses passed to sign_witnesses"""


class WitnessGroupEmpty(CkbError):
    """A signing group has no witnesses"""


class InvalidOutputPoint(CkbError):
    """A cell input has no previous output"""


class CellInputNotCached(CkbError):
    """No cached cell matches a cell input's previous output"""


class InvalidHashType(CkbError):
    """Script hash_type is not one of data, type, data1, data2"""


class InvalidSignature(CkbError):
    """Signer returned something other than a 65-byte recoverable signature"""
