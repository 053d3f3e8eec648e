"""
CharmVault Core Types

Fixed-size digest and the UTXO resource identifier.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import string

from charmvault.constants import (
    HASH_SIZE,
    TXID_SIZE,
    TXID_HEX_LENGTH,
    UTXO_ID_SEPARATOR,
    MAX_U32,
)
from charmvault.errors import InvalidUtxoIdError

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True, slots=True)
class Hash:
    """
    SHA-256 hash output.

    SIZE: 32 bytes
    """
    data: bytes = field(default_factory=lambda: bytes(HASH_SIZE))

    def __post_init__(self):
        if len(self.data) != HASH_SIZE:
            raise ValueError(f"Hash must be {HASH_SIZE} bytes, got {len(self.data)}")

    def __bytes__(self) -> bytes:
        return self.data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hash):
            return self.data == other.data
        if isinstance(other, bytes):
            return self.data == other
        return False

    def __hash__(self) -> int:
        return hash(self.data)

    def __repr__(self) -> str:
        return f"Hash({self.data.hex()[:16]}...)"

    def __str__(self) -> str:
        return self.data.hex()

    def hex(self) -> str:
        return self.data.hex()

    @classmethod
    def from_hex(cls, hex_string: str) -> Hash:
        return cls(bytes.fromhex(hex_string))

    @classmethod
    def zero(cls) -> Hash:
        return cls(bytes(HASH_SIZE))


@dataclass(frozen=True, slots=True)
class UtxoId:
    """
    Reference to a spendable output: transaction id and output index.

    TEXT FORMAT: "<64 hex chars>:<decimal index>"
    """
    txid: bytes
    index: int

    def __post_init__(self):
        if len(self.txid) != TXID_SIZE:
            raise ValueError(f"txid must be {TXID_SIZE} bytes, got {len(self.txid)}")
        if not 0 <= self.index <= MAX_U32:
            raise ValueError(f"UTXO index out of range: {self.index}")

    def __str__(self) -> str:
        return f"{self.txid.hex()}{UTXO_ID_SEPARATOR}{self.index}"

    def __repr__(self) -> str:
        return f"UtxoId({self.txid.hex()[:16]}...:{self.index})"

    @classmethod
    def from_str(cls, text: str) -> UtxoId:
        """
        Parse "<txid hex>:<index>".

        Raises:
            InvalidUtxoIdError: on any deviation from the format
        """
        if not isinstance(text, str):
            raise InvalidUtxoIdError(repr(text), "not a string")

        txid_hex, sep, index_text = text.partition(UTXO_ID_SEPARATOR)
        if not sep:
            raise InvalidUtxoIdError(text, "missing ':' separator")
        if len(txid_hex) != TXID_HEX_LENGTH or not set(txid_hex) <= _HEX_DIGITS:
            raise InvalidUtxoIdError(text, f"txid must be {TXID_HEX_LENGTH} hex chars")
        if not index_text.isdigit() or not index_text.isascii():
            raise InvalidUtxoIdError(text, "index must be a non-negative integer")

        index = int(index_text)
        if index > MAX_U32:
            raise InvalidUtxoIdError(text, "index exceeds u32")

        return cls(bytes.fromhex(txid_hex), index)
