"""
CharmVault Contract Entry Point

Called by the host for every transaction that spends or creates an
inheritance charm. A transaction is valid if ANY of the four operations
accepts it.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from charmvault.config import ValidatorConfig
from charmvault.constants import SUPPORTED_TAGS
from charmvault.core.transaction import App, Data, Transaction
from charmvault.contract.validation import (
    validate_create_strict,
    validate_checkin_strict,
    validate_update_beneficiaries_strict,
    validate_trigger_distribution_strict,
)
from charmvault.errors import (
    ContractRejection,
    PublicInputNotEmptyError,
    UnsupportedAppTagError,
    NoOperationMatchedError,
)

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Admissible state transitions, in evaluation order."""
    CREATE = "create"
    CHECKIN = "checkin"
    UPDATE_BENEFICIARIES = "update"
    TRIGGER_DISTRIBUTION = "distribute"


@dataclass
class Verdict:
    """
    Outcome of one contract evaluation.

    operation: the operation that accepted (None on rejection)
    reasons: rejection reason per evaluated operation
    error: dispatch-level reason when rejected
    """
    accepted: bool
    operation: Optional[Operation] = None
    reasons: Dict[Operation, ContractRejection] = field(default_factory=dict)
    error: Optional[ContractRejection] = None

    def __bool__(self) -> bool:
        return self.accepted

    def summary(self) -> str:
        if self.accepted:
            return f"ACCEPT ({self.operation.value})"
        if self.error is not None and not self.reasons:
            return f"REJECT: {self.error.message}"
        details = "; ".join(f"{op.value}: {e.message}" for op, e in self.reasons.items())
        return f"REJECT: {details}"

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "operation": self.operation.value if self.operation else None,
            "reasons": {op.value: e.to_dict() for op, e in self.reasons.items()},
            "error": self.error.to_dict() if self.error else None,
        }


def _operation_checks(
    app: App,
    tx: Transaction,
    w: Optional[Data],
    config: ValidatorConfig,
) -> List[Tuple[Operation, Callable[[], None]]]:
    return [
        (Operation.CREATE, lambda: validate_create_strict(app, tx, w)),
        (Operation.CHECKIN, lambda: validate_checkin_strict(app, tx)),
        (Operation.UPDATE_BENEFICIARIES, lambda: validate_update_beneficiaries_strict(app, tx)),
        (Operation.TRIGGER_DISTRIBUTION,
         lambda: validate_trigger_distribution_strict(app, tx, w, config.policy)),
    ]


def verify_spend(
    app: App,
    tx: Transaction,
    x: Optional[Data] = None,
    w: Optional[Data] = None,
    config: Optional[ValidatorConfig] = None,
) -> Verdict:
    """
    Evaluate a transaction against the inheritance contract.

    Args:
        app: App being validated (tag selects the branch)
        tx: Proposed transaction
        x: Public input (must be empty)
        w: Witness data (UTXO id on creation, current height for strict distribution)
        config: Validator configuration (defaults to deferred distribution)

    Returns:
        Verdict with the accepting operation or every rejection reason

    Raises:
        ConfigError: if the configuration is invalid
    """
    config = (config or ValidatorConfig.default()).ensure_valid()

    if x is not None and not x.is_empty():
        error = PublicInputNotEmptyError()
        logger.debug(f"Spend rejected: {error}")
        return Verdict(accepted=False, error=error)

    if app.tag not in SUPPORTED_TAGS:
        error = UnsupportedAppTagError(app.tag)
        logger.error(f"Unsupported app tag: {app.tag!r}")
        return Verdict(accepted=False, error=error)

    accepted: Optional[Operation] = None
    reasons: Dict[Operation, ContractRejection] = {}

    for operation, check in _operation_checks(app, tx, w, config):
        try:
            check()
        except ContractRejection as e:
            reasons[operation] = e
            logger.debug(f"{operation.value} rejected: {e}")
            continue

        if accepted is None:
            accepted = operation
        if not config.policy.collect_all_diagnostics:
            break

    if accepted is None:
        error = NoOperationMatchedError({op.value: e.message for op, e in reasons.items()})
        logger.debug(f"Spend rejected for {app}: {error}")
        return Verdict(accepted=False, reasons=reasons, error=error)

    logger.debug(f"Spend accepted for {app} as {accepted.value}")
    return Verdict(accepted=True, operation=accepted, reasons=reasons)


def app_contract(
    app: App,
    tx: Transaction,
    x: Optional[Data] = None,
    w: Optional[Data] = None,
    config: Optional[ValidatorConfig] = None,
) -> bool:
    """
    Main entry point for the inheritance contract.

    Returns True if the transaction is valid (one of the four operations
    accepts), False otherwise.
    """
    return verify_spend(app, tx, x, w, config).accepted
