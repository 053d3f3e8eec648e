"""
CharmVault Contract Lifecycle Helpers

Deadline arithmetic and successor-content builders for hosts preparing
transactions. Heights are caller-supplied block counters; there is no
wall-clock time here.
"""

from __future__ import annotations
from dataclasses import replace
from enum import Enum
from typing import Sequence

from charmvault.core.contract import Beneficiary, InheritanceContract, Status
from charmvault.contract.beneficiaries import check_beneficiaries
from charmvault.errors import (
    InvalidStatusError,
    CheckinHeightNotIncreasedError,
    CheckinHeightDecreasedError,
)


class Phase(Enum):
    """Observed phase of a contract at a given height."""
    ALIVE = "ALIVE"
    READY_TO_TRIGGER = "READY_TO_TRIGGER"
    TRIGGERED = "TRIGGERED"
    DISTRIBUTED = "DISTRIBUTED"


def deadline_height(contract: InheritanceContract) -> int:
    """last_checkin_height + trigger_delay."""
    return contract.deadline_height


def is_deadline_elapsed(contract: InheritanceContract, current_height: int) -> bool:
    """True once current_height is strictly past the deadline."""
    return current_height > contract.deadline_height


def blocks_remaining(contract: InheritanceContract, current_height: int) -> int:
    """Blocks until the deadline. Returns 0 if past deadline."""
    return max(0, contract.deadline_height - current_height)


def contract_phase(contract: InheritanceContract, current_height: int) -> Phase:
    """Returns: ALIVE | READY_TO_TRIGGER | TRIGGERED | DISTRIBUTED"""
    if contract.status is Status.DISTRIBUTED:
        return Phase.DISTRIBUTED
    if contract.status is Status.TRIGGERED:
        return Phase.TRIGGERED
    if is_deadline_elapsed(contract, current_height):
        return Phase.READY_TO_TRIGGER
    return Phase.ALIVE


def checked_in(contract: InheritanceContract, height: int) -> InheritanceContract:
    """
    Successor content for a check-in at `height`.

    Raises:
        InvalidStatusError: if the contract is not Active
        CheckinHeightNotIncreasedError: if height does not advance
    """
    if contract.status is not Status.ACTIVE:
        raise InvalidStatusError(contract.status, [Status.ACTIVE])
    if height <= contract.last_checkin_height:
        raise CheckinHeightNotIncreasedError(contract.last_checkin_height, height)
    return replace(contract, last_checkin_height=height)


def with_beneficiaries(
    contract: InheritanceContract,
    beneficiaries: Sequence[Beneficiary],
    height: int,
) -> InheritanceContract:
    """
    Successor content replacing the beneficiary split; also counts as a
    check-in at `height`.

    Raises:
        InvalidStatusError: if the contract is not Active
        CheckinHeightDecreasedError: if height goes backwards
        ContractRejection: if the new split is invalid
    """
    if contract.status is not Status.ACTIVE:
        raise InvalidStatusError(contract.status, [Status.ACTIVE])
    if height < contract.last_checkin_height:
        raise CheckinHeightDecreasedError(contract.last_checkin_height, height)
    check_beneficiaries(beneficiaries)
    return replace(
        contract,
        beneficiaries=tuple(beneficiaries),
        last_checkin_height=height,
    )
