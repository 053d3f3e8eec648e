"""
CharmVault Inheritance Contract Rules
"""

from charmvault.contract.beneficiaries import (
    validate_beneficiaries,
    beneficiaries_equal,
    validate_inheritance,
    compute_payouts,
)
from charmvault.contract.validation import (
    can_create_inheritance,
    can_checkin,
    can_update_beneficiaries,
    can_trigger_distribution,
)
from charmvault.contract.dispatcher import (
    Operation,
    Verdict,
    app_contract,
    verify_spend,
)

__all__ = [
    # Beneficiaries
    "validate_beneficiaries",
    "beneficiaries_equal",
    "validate_inheritance",
    "compute_payouts",
    # Operations
    "can_create_inheritance",
    "can_checkin",
    "can_update_beneficiaries",
    "can_trigger_distribution",
    # Entry point
    "Operation",
    "Verdict",
    "app_contract",
    "verify_spend",
]
