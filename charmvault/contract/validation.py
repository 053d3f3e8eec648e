"""
CharmVault Operation Validators

The four admissible state transitions of an inheritance NFT:

1. Create inheritance    - mint, bound to a spent UTXO
2. Check-in              - owner proves liveness, deadline moves forward
3. Update beneficiaries  - owner replaces the split
4. Trigger distribution  - NFT is burned and value paid out

Each operation has a strict form that raises a ContractRejection on the
first failing rule and a boolean form used by the dispatcher. All of them
are pure functions of their arguments.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from typing import Dict, Iterable, Optional

from charmvault.constants import WITNESS_CURRENT_HEIGHT_KEY
from charmvault.config import PolicyConfig
from charmvault.core.contract import InheritanceContract, Status
from charmvault.core.transaction import App, Charms, Data, Transaction, charm_values, charm_positions
from charmvault.crypto.commitment import Commitment
from charmvault.contract.beneficiaries import (
    beneficiaries_equal,
    check_beneficiaries,
    check_inheritance,
    compute_payouts,
)
from charmvault.contract.lifecycle import is_deadline_elapsed
from charmvault.errors import (
    ContractRejection,
    MalformedWitnessError,
    PayloadDecodeError,
    IdentityMismatchError,
    UtxoNotSpentError,
    InvalidCharmCountError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    CheckinHeightNotIncreasedError,
    CheckinHeightDecreasedError,
    ImmutableFieldChangedError,
    BeneficiariesChangedError,
    DeadlineNotReachedError,
    PayoutMismatchError,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# Shared helpers
# ==============================================================================

def _single_contract(app: App, charms_seq: Iterable[Charms], side: str) -> InheritanceContract:
    """Decode the one contract `app` holds on `side` of the transaction."""
    values = charm_values(app, charms_seq)
    if len(values) != 1:
        raise InvalidCharmCountError(side, len(values), 1)
    return values[0].value_as(InheritanceContract)


def _require_active(contract: InheritanceContract) -> None:
    if contract.status is not Status.ACTIVE:
        raise InvalidStatusError(contract.status, [Status.ACTIVE])


def _require_same_owner_and_delay(
    before: InheritanceContract,
    after: InheritanceContract,
) -> None:
    if after.owner_identity != before.owner_identity:
        raise ImmutableFieldChangedError("owner_identity")
    if after.trigger_delay != before.trigger_delay:
        raise ImmutableFieldChangedError("trigger_delay")


def _witness_text(w: Optional[Data]) -> str:
    if w is None or not isinstance(w.value, str):
        raise MalformedWitnessError("Witness must carry a UTXO id string")
    return w.value


def _witness_height(w: Optional[Data]) -> int:
    value = None if w is None else w.value
    if isinstance(value, dict):
        value = value.get(WITNESS_CURRENT_HEIGHT_KEY)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedWitnessError(
            f"Witness must carry the current height (int or {{'{WITNESS_CURRENT_HEIGHT_KEY}': int}})"
        )
    return value


# ==============================================================================
# 1. Create inheritance
# ==============================================================================

def validate_create_strict(app: App, tx: Transaction, w: Optional[Data]) -> None:
    """
    Validate minting a new inheritance NFT.

    - witness is a UTXO id whose hash is the app identity
    - that UTXO is spent by this transaction (no reuse of the witness)
    - exactly one NFT of this app in the outputs
    - the NFT content is a valid, Active contract
    """
    commitment = Commitment.to_utxo(_witness_text(w))

    if not commitment.opens_to(app.identity):
        raise IdentityMismatchError(app.identity.hex(), commitment.identity.hex())

    if not tx.spends(commitment.utxo_id):
        raise UtxoNotSpentError(str(commitment.utxo_id))

    created = _single_contract(app, tx.output_charms(), "output")
    check_inheritance(created)


def can_create_inheritance(app: App, tx: Transaction, w: Optional[Data]) -> bool:
    try:
        validate_create_strict(app, tx, w)
        return True
    except ContractRejection as e:
        logger.debug(f"Create rejected: {e}")
        return False


# ==============================================================================
# 2. Check-in
# ==============================================================================

def validate_checkin_strict(app: App, tx: Transaction) -> None:
    """
    Validate a check-in (owner extends the deadline).

    - one input NFT and one output NFT, both Active
    - last_checkin_height strictly increases
    - owner_identity, trigger_delay and beneficiaries unchanged
    """
    before = _single_contract(app, tx.input_charms(), "input")
    _require_active(before)

    after = _single_contract(app, tx.output_charms(), "output")
    _require_active(after)

    if after.last_checkin_height <= before.last_checkin_height:
        raise CheckinHeightNotIncreasedError(before.last_checkin_height, after.last_checkin_height)

    _require_same_owner_and_delay(before, after)
    if not beneficiaries_equal(after.beneficiaries, before.beneficiaries):
        raise BeneficiariesChangedError()


def can_checkin(app: App, tx: Transaction) -> bool:
    try:
        validate_checkin_strict(app, tx)
        return True
    except ContractRejection as e:
        logger.debug(f"Check-in rejected: {e}")
        return False


# ==============================================================================
# 3. Update beneficiaries
# ==============================================================================

def validate_update_beneficiaries_strict(app: App, tx: Transaction) -> None:
    """
    Validate replacing the beneficiary split.

    - one input NFT and one output NFT, both Active
    - new beneficiaries are valid (need not match the old ones)
    - owner_identity and trigger_delay unchanged
    - last_checkin_height does not decrease
    """
    before = _single_contract(app, tx.input_charms(), "input")
    _require_active(before)

    after = _single_contract(app, tx.output_charms(), "output")
    _require_active(after)

    check_beneficiaries(after.beneficiaries)
    _require_same_owner_and_delay(before, after)

    if after.last_checkin_height < before.last_checkin_height:
        raise CheckinHeightDecreasedError(before.last_checkin_height, after.last_checkin_height)


def can_update_beneficiaries(app: App, tx: Transaction) -> bool:
    try:
        validate_update_beneficiaries_strict(app, tx)
        return True
    except ContractRejection as e:
        logger.debug(f"Beneficiary update rejected: {e}")
        return False


# ==============================================================================
# 4. Trigger distribution
# ==============================================================================

def _check_payouts(
    app: App,
    tx: Transaction,
    contract: InheritanceContract,
    fee_sats: int,
) -> None:
    if tx.coin_ins is None or tx.coin_outs is None:
        raise PayloadDecodeError("Payout verification requires coin data on inputs and outputs")

    position = charm_positions(app, tx.input_charms())[0]
    vault_sats = tx.coin_ins[position].sats

    expected: Dict[str, int] = defaultdict(int)
    for address, sats in compute_payouts(vault_sats, contract.beneficiaries, fee_sats):
        expected[address] += sats

    paid: Dict[str, int] = defaultdict(int)
    for coin in tx.coin_outs:
        paid[coin.address] += coin.sats

    for address, amount in expected.items():
        if paid[address] < amount:
            raise PayoutMismatchError(address, paid[address], amount)


def validate_trigger_distribution_strict(
    app: App,
    tx: Transaction,
    w: Optional[Data] = None,
    policy: Optional[PolicyConfig] = None,
) -> None:
    """
    Validate distributing the inheritance.

    - exactly one input NFT, status Active or Triggered
    - no NFT of this app in the outputs (burned)

    With policy.distribution_mode == "strict" also:
    - witness current height is past last_checkin_height + trigger_delay
    - every beneficiary receives at least its share of the vault value

    In "deferred" mode the deadline and payout amounts are not checked.

    Raises:
        ConfigError: if the policy is invalid (never treated as deferred)
    """
    policy = (policy or PolicyConfig()).ensure_valid()

    contract = _single_contract(app, tx.input_charms(), "input")
    if not contract.status.can_transition_to(Status.DISTRIBUTED):
        raise InvalidStatusTransitionError(contract.status, Status.DISTRIBUTED)

    remaining = charm_values(app, tx.output_charms())
    if remaining:
        raise InvalidCharmCountError("output", len(remaining), 0)

    if not policy.strict_distribution:
        logger.warning(
            "Distribution accepted without deadline or payout verification "
            f"(distribution_mode={policy.distribution_mode})"
        )
        return

    current_height = _witness_height(w)
    if not is_deadline_elapsed(contract, current_height):
        raise DeadlineNotReachedError(current_height, contract.deadline_height)

    _check_payouts(app, tx, contract, policy.distribution_fee_sats)


def can_trigger_distribution(
    app: App,
    tx: Transaction,
    w: Optional[Data] = None,
    policy: Optional[PolicyConfig] = None,
) -> bool:
    try:
        validate_trigger_distribution_strict(app, tx, w, policy)
        return True
    except ContractRejection as e:
        logger.debug(f"Distribution rejected: {e}")
        return False
