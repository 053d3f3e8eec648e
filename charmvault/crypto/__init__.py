"""
CharmVault Cryptographic Primitives
"""

from charmvault.crypto.hash import sha256, sha256_raw, hash_identity
from charmvault.crypto.commitment import Commitment

__all__ = [
    # Hash functions
    "sha256",
    "sha256_raw",
    "hash_identity",
    # Identity binding
    "Commitment",
]
