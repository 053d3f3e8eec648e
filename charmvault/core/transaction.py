"""
CharmVault Transaction Model

Host-side view of a proposed transaction as the validator consumes it:
the app being validated, its charms on inputs and outputs, and the
witness/public data slots.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from charmvault.constants import TAG_NFT, TAG_NAMES
from charmvault.core.types import Hash, UtxoId
from charmvault.errors import PayloadDecodeError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class App:
    """
    Charms app reference.

    tag: kind discriminator ("n" for NFT)
    identity: 32-byte binding to the resource the app instance was created from
    vk: verification key of the app binary
    """
    tag: str
    identity: Hash
    vk: Hash = field(default_factory=Hash.zero)

    def __str__(self) -> str:
        return f"{self.tag}/{self.identity.hex()}/{self.vk.hex()}"

    @property
    def is_nft(self) -> bool:
        return self.tag == TAG_NFT

    @property
    def kind(self) -> str:
        return TAG_NAMES.get(self.tag, "unknown")

    @classmethod
    def from_str(cls, text: str) -> App:
        """Parse "<tag>/<identity hex>/<vk hex>"."""
        parts = text.split("/")
        if len(parts) != 3 or not parts[0]:
            raise ValueError(f"App reference must be tag/identity/vk, got {text!r}")
        tag, identity_hex, vk_hex = parts
        return cls(tag=tag, identity=Hash.from_hex(identity_hex), vk=Hash.from_hex(vk_hex))


class Data:
    """
    Opaque charm/witness value.

    Holds whatever the host decoded: a typed payload, a JSON-like value or
    raw payload bytes. Typed access goes through value_as().
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any = None):
        self._value = value

    @classmethod
    def empty(cls) -> Data:
        return cls(None)

    @property
    def value(self) -> Any:
        return self._value

    def is_empty(self) -> bool:
        return self._value is None

    def value_as(self, cls: Type[T]) -> T:
        """
        Decode the held value as `cls`.

        Accepts an instance of `cls`, a dict (via cls.from_dict) or payload
        bytes (via cls.from_bytes).

        Raises:
            PayloadDecodeError: if the value cannot be decoded as `cls`
        """
        value = self._value
        if isinstance(value, cls):
            return value
        if isinstance(value, dict) and hasattr(cls, "from_dict"):
            return cls.from_dict(value)
        if isinstance(value, (bytes, bytearray)) and hasattr(cls, "from_bytes"):
            return cls.from_bytes(bytes(value))
        raise PayloadDecodeError(
            f"Cannot decode {type(value).__name__} as {cls.__name__}"
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Data):
            return self._value == other._value
        return False

    # Values may be dicts or lists
    __hash__ = None

    def __repr__(self) -> str:
        return f"Data({self._value!r})"


Charms = Dict[App, Data]


@dataclass(frozen=True, slots=True)
class Coin:
    """Plain coin side of an output: destination and amount."""
    address: str
    sats: int

    def __post_init__(self):
        if self.sats < 0:
            raise ValueError(f"sats cannot be negative: {self.sats}")


@dataclass(slots=True)
class Transaction:
    """
    Proposed transaction.

    ins: ordered (spent UTXO, charms on it) pairs
    outs: ordered charms per created output
    coin_ins / coin_outs: optional coin data aligned with ins / outs
    """
    ins: List[Tuple[UtxoId, Charms]] = field(default_factory=list)
    outs: List[Charms] = field(default_factory=list)
    coin_ins: Optional[List[Coin]] = None
    coin_outs: Optional[List[Coin]] = None

    def __post_init__(self):
        if self.coin_ins is not None and len(self.coin_ins) != len(self.ins):
            raise ValueError(
                f"coin_ins must align with ins: {len(self.coin_ins)} != {len(self.ins)}"
            )
        if self.coin_outs is not None and len(self.coin_outs) != len(self.outs):
            raise ValueError(
                f"coin_outs must align with outs: {len(self.coin_outs)} != {len(self.outs)}"
            )

    def spends(self, utxo_id: UtxoId) -> bool:
        """Check whether utxo_id is among the consumed inputs."""
        return any(spent == utxo_id for spent, _ in self.ins)

    def input_charms(self) -> Iterable[Charms]:
        return (charms for _, charms in self.ins)

    def output_charms(self) -> Iterable[Charms]:
        return iter(self.outs)


def charm_values(app: App, charms_seq: Iterable[Charms]) -> List[Data]:
    """Collect the values `app` holds across a sequence of charm maps."""
    return [charms[app] for charms in charms_seq if app in charms]


def charm_positions(app: App, charms_seq: Iterable[Charms]) -> List[int]:
    """Indexes of the charm maps in which `app` is present."""
    return [i for i, charms in enumerate(charms_seq) if app in charms]
