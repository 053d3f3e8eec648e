"""
CharmVault Hash Functions

SHA-256 identity hasher binding an app instance to the UTXO it was
created from.
"""

from __future__ import annotations
from typing import Union

from Crypto.Hash import SHA256

from charmvault.core.types import Hash


def sha256(data: Union[bytes, bytearray, memoryview]) -> Hash:
    """
    SHA-256 hash function.

    Args:
        data: Input data to hash

    Returns:
        Hash: 32-byte hash output wrapped in Hash type
    """
    return Hash(sha256_raw(data))


def sha256_raw(data: Union[bytes, bytearray, memoryview]) -> bytes:
    """SHA-256 returning raw bytes."""
    return SHA256.new(bytes(data)).digest()


def hash_identity(text: str) -> Hash:
    """
    Derive an app identity from the textual UTXO id.

    The digest covers the UTF-8 bytes of `text` exactly as given; callers
    must hash the witness string, not a re-serialized UtxoId.
    """
    return sha256(text.encode("utf-8"))
