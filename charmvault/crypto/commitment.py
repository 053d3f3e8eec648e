"""
CharmVault Identity Commitment

A commitment binds a contract instance to the UTXO consumed at creation:
identity = SHA-256(utxo_id text). Opening it means re-hashing the claimed
UTXO id and comparing against the app identity.
"""

from __future__ import annotations
from dataclasses import dataclass

from charmvault.core.types import Hash, UtxoId
from charmvault.crypto.hash import hash_identity


@dataclass(frozen=True, slots=True)
class Commitment:
    """
    Binding of a UTXO id to an app identity.

    utxo_text: UTXO id exactly as supplied (the hashed preimage)
    utxo_id: parsed form, used to look the UTXO up among spent inputs
    identity: SHA-256 of utxo_text
    """
    utxo_text: str
    utxo_id: UtxoId
    identity: Hash

    @classmethod
    def to_utxo(cls, utxo_text: str) -> Commitment:
        """
        Commit to a UTXO id.

        Raises:
            InvalidUtxoIdError: if utxo_text is not "<txid>:<index>"
        """
        utxo_id = UtxoId.from_str(utxo_text)
        return cls(utxo_text=utxo_text, utxo_id=utxo_id, identity=hash_identity(utxo_text))

    def opens_to(self, identity: Hash) -> bool:
        """Check that this commitment produced `identity`."""
        return self.identity == identity

    def __repr__(self) -> str:
        return f"Commitment({self.utxo_text!r} -> {self.identity.hex()[:16]}...)"
