"""
CharmVault Core Data Structures
"""

from charmvault.core.types import Hash, UtxoId
from charmvault.core.contract import Status, Beneficiary, InheritanceContract
from charmvault.core.transaction import (
    App,
    Data,
    Coin,
    Transaction,
    charm_values,
)

__all__ = [
    # Types
    "Hash",
    "UtxoId",
    # Contract payload
    "Status",
    "Beneficiary",
    "InheritanceContract",
    # Transaction model
    "App",
    "Data",
    "Coin",
    "Transaction",
    "charm_values",
]
