"""
CharmVault Beneficiary Rules

Structural checks on a beneficiary split, order-sensitive list equality,
and payout amounts for distribution.
"""

from __future__ import annotations
import logging
from typing import List, Sequence, Tuple

from charmvault.constants import PERCENTAGE_TOTAL
from charmvault.core.contract import Beneficiary, InheritanceContract, Status
from charmvault.errors import (
    ContractRejection,
    EmptyBeneficiariesError,
    InvalidPercentageSumError,
    EmptyBeneficiaryAddressError,
    InvalidStatusError,
    ZeroTriggerDelayError,
    InvalidParameterError,
)

logger = logging.getLogger(__name__)


def check_beneficiaries(beneficiaries: Sequence[Beneficiary]) -> None:
    """
    Validate a beneficiary split, raising on the first violation.

    - at least one beneficiary
    - percentages sum to exactly 100
    - no empty address

    Duplicate addresses are allowed.
    """
    if not beneficiaries:
        raise EmptyBeneficiariesError()

    total = sum(b.percentage for b in beneficiaries)
    if total != PERCENTAGE_TOTAL:
        raise InvalidPercentageSumError(total, PERCENTAGE_TOTAL)

    for index, b in enumerate(beneficiaries):
        if not b.address:
            raise EmptyBeneficiaryAddressError(index)


def validate_beneficiaries(beneficiaries: Sequence[Beneficiary]) -> bool:
    """Boolean form of check_beneficiaries."""
    try:
        check_beneficiaries(beneficiaries)
        return True
    except ContractRejection as e:
        logger.debug(f"Beneficiary list rejected: {e}")
        return False


def beneficiaries_equal(a: Sequence[Beneficiary], b: Sequence[Beneficiary]) -> bool:
    """Order-sensitive equality: same length, same address and percentage per index."""
    if len(a) != len(b):
        return False

    for left, right in zip(a, b):
        if left.address != right.address or left.percentage != right.percentage:
            return False

    return True


def check_inheritance(contract: InheritanceContract) -> None:
    """
    Validate a freshly created contract.

    - status is Active
    - beneficiaries pass check_beneficiaries
    - trigger_delay is at least 1
    """
    if contract.status is not Status.ACTIVE:
        raise InvalidStatusError(contract.status, [Status.ACTIVE])

    check_beneficiaries(contract.beneficiaries)

    if contract.trigger_delay <= 0:
        raise ZeroTriggerDelayError()


def validate_inheritance(contract: InheritanceContract) -> bool:
    """Boolean form of check_inheritance."""
    try:
        check_inheritance(contract)
        return True
    except ContractRejection as e:
        logger.debug(f"Inheritance content rejected: {e}")
        return False


def compute_payouts(
    total_sats: int,
    beneficiaries: Sequence[Beneficiary],
    fee_sats: int = 0,
) -> List[Tuple[str, int]]:
    """
    Split a vault's value across beneficiaries.

    Each share is floor((total_sats - fee_sats) * percentage / 100). Rounding
    dust stays unassigned.

    Returns:
        List of (address, sats), in beneficiary order
    """
    if total_sats < 0:
        raise InvalidParameterError("total_sats", "cannot be negative")
    if fee_sats < 0:
        raise InvalidParameterError("fee_sats", "cannot be negative")

    distributable = max(0, total_sats - fee_sats)
    return [
        (b.address, distributable * b.percentage // PERCENTAGE_TOTAL)
        for b in beneficiaries
    ]
