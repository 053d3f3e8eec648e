"""
CharmVault Inheritance Contract

The value carried by the inheritance NFT: owner, check-in deadline policy,
beneficiary split and lifecycle status.

PAYLOAD LAYOUT (field order is part of the format):
    owner_identity       varint-prefixed UTF-8
    last_checkin_height  u64
    trigger_delay        u64
    beneficiaries        varint count, then (address: varint-prefixed UTF-8, percentage: u8)
    status               u8 (0 Active, 1 Triggered, 2 Distributed)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Tuple

from charmvault.constants import (
    MIN_PERCENTAGE,
    MAX_PERCENTAGE,
    MAX_U64,
    STATUS_ACTIVE,
    STATUS_TRIGGERED,
    STATUS_DISTRIBUTED,
)
from charmvault.core.serialization import ByteReader, ByteWriter
from charmvault.errors import PayloadDecodeError


class Status(Enum):
    """Lifecycle state of an inheritance contract."""
    ACTIVE = "Active"            # Owner alive, check-in and edits permitted
    TRIGGERED = "Triggered"      # Deadline elapsed, awaiting distribution
    DISTRIBUTED = "Distributed"  # Terminal

    def __str__(self) -> str:
        return self.value

    def can_transition_to(self, other: Status) -> bool:
        """Check the status graph edge self -> other."""
        return other in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def to_byte(self) -> int:
        return _STATUS_TO_BYTE[self]

    @classmethod
    def from_byte(cls, value: int) -> Status:
        try:
            return _BYTE_TO_STATUS[value]
        except KeyError:
            raise PayloadDecodeError(f"Unknown status byte: {value}") from None

    @classmethod
    def parse(cls, value: str) -> Status:
        try:
            return cls(value)
        except ValueError:
            raise PayloadDecodeError(f"Unknown status: {value!r}") from None


_TRANSITIONS: Dict[Status, FrozenSet[Status]] = {
    Status.ACTIVE: frozenset({Status.ACTIVE, Status.TRIGGERED, Status.DISTRIBUTED}),
    Status.TRIGGERED: frozenset({Status.DISTRIBUTED}),
    Status.DISTRIBUTED: frozenset(),
}

_STATUS_TO_BYTE: Dict[Status, int] = {
    Status.ACTIVE: STATUS_ACTIVE,
    Status.TRIGGERED: STATUS_TRIGGERED,
    Status.DISTRIBUTED: STATUS_DISTRIBUTED,
}
_BYTE_TO_STATUS: Dict[int, Status] = {v: k for k, v in _STATUS_TO_BYTE.items()}


@dataclass(frozen=True, slots=True)
class Beneficiary:
    """
    One payout destination and its share.

    An empty address is representable; rejecting it is the job of the
    beneficiary list validator.
    """
    address: str
    percentage: int

    def __post_init__(self):
        if not isinstance(self.address, str):
            raise ValueError(f"Beneficiary address must be a string, got {type(self.address).__name__}")
        if isinstance(self.percentage, bool) or not isinstance(self.percentage, int):
            raise ValueError(f"Beneficiary percentage must be an integer, got {self.percentage!r}")
        if not MIN_PERCENTAGE <= self.percentage <= MAX_PERCENTAGE:
            raise ValueError(f"Beneficiary percentage out of range: {self.percentage}")

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "percentage": self.percentage}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Beneficiary:
        return cls(address=data["address"], percentage=data["percentage"])


@dataclass(frozen=True, slots=True)
class InheritanceContract:
    """
    Inheritance NFT payload.

    Per the payload layout above. Equality is field-wise and order-sensitive
    for beneficiaries.
    """
    owner_identity: str
    last_checkin_height: int
    trigger_delay: int
    beneficiaries: Tuple[Beneficiary, ...] = field(default_factory=tuple)
    status: Status = Status.ACTIVE

    def __post_init__(self):
        if not isinstance(self.owner_identity, str):
            raise ValueError("owner_identity must be a string")
        for name in ("last_checkin_height", "trigger_delay"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= MAX_U64:
                raise ValueError(f"{name} out of u64 range: {value}")
        if not isinstance(self.status, Status):
            raise ValueError(f"status must be a Status, got {self.status!r}")
        # Accept any sequence, store a tuple so the value stays hashable
        object.__setattr__(self, "beneficiaries", tuple(self.beneficiaries))
        for b in self.beneficiaries:
            if not isinstance(b, Beneficiary):
                raise ValueError(f"beneficiaries must hold Beneficiary values, got {b!r}")

    @property
    def deadline_height(self) -> int:
        """Height after which distribution becomes legal."""
        return self.last_checkin_height + self.trigger_delay

    def serialize(self) -> bytes:
        """Serialize to the token payload layout."""
        writer = ByteWriter()
        writer.write_str(self.owner_identity)
        writer.write_u64(self.last_checkin_height)
        writer.write_u64(self.trigger_delay)
        writer.write_varint(len(self.beneficiaries))
        for b in self.beneficiaries:
            writer.write_str(b.address)
            writer.write_u8(b.percentage)
        writer.write_u8(self.status.to_byte())
        return writer.to_bytes()

    @classmethod
    def deserialize(cls, data: bytes, offset: int = 0) -> Tuple[InheritanceContract, int]:
        """
        Deserialize from bytes, return (InheritanceContract, bytes_consumed).

        Raises:
            PayloadDecodeError: on truncated or invalid data
        """
        reader = ByteReader(data[offset:])
        try:
            owner_identity = reader.read_str()
            last_checkin_height = reader.read_u64()
            trigger_delay = reader.read_u64()

            count = reader.read_varint()
            beneficiaries = []
            for _ in range(count):
                address = reader.read_str()
                percentage = reader.read_u8()
                beneficiaries.append(Beneficiary(address, percentage))

            status = Status.from_byte(reader.read_u8())

            contract = cls(
                owner_identity=owner_identity,
                last_checkin_height=last_checkin_height,
                trigger_delay=trigger_delay,
                beneficiaries=tuple(beneficiaries),
                status=status,
            )
        except (ValueError, UnicodeDecodeError) as e:
            raise PayloadDecodeError(f"Invalid inheritance payload: {e}") from e

        return contract, reader.offset

    @classmethod
    def from_bytes(cls, data: bytes) -> InheritanceContract:
        """Deserialize a payload that must contain exactly one contract."""
        contract, consumed = cls.deserialize(data)
        if consumed != len(data):
            raise PayloadDecodeError(
                f"Trailing bytes after inheritance payload: {len(data) - consumed}"
            )
        return contract

    def to_dict(self) -> Dict[str, Any]:
        """Export in the spell JSON form."""
        return {
            "owner_pubkey": self.owner_identity,
            "last_checkin_block": self.last_checkin_height,
            "trigger_delay_blocks": self.trigger_delay,
            "beneficiaries": [b.to_dict() for b in self.beneficiaries],
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> InheritanceContract:
        """
        Build from the spell JSON form.

        Raises:
            PayloadDecodeError: on missing keys or invalid values
        """
        if not isinstance(data, dict):
            raise PayloadDecodeError(f"Inheritance payload must be an object, got {type(data).__name__}")
        try:
            raw_beneficiaries = data["beneficiaries"]
            if not isinstance(raw_beneficiaries, list):
                raise PayloadDecodeError("beneficiaries must be a list")
            return cls(
                owner_identity=data["owner_pubkey"],
                last_checkin_height=data["last_checkin_block"],
                trigger_delay=data["trigger_delay_blocks"],
                beneficiaries=tuple(Beneficiary.from_dict(b) for b in raw_beneficiaries),
                status=Status.parse(data["status"]),
            )
        except KeyError as e:
            raise PayloadDecodeError(f"Missing field in inheritance payload: {e}") from e
        except (TypeError, ValueError) as e:
            raise PayloadDecodeError(f"Invalid inheritance payload: {e}") from e
