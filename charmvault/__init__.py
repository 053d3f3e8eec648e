"""
CharmVault Inheritance Contract

State-transition validator for a Bitcoin inheritance NFT: create, check in,
update beneficiaries, distribute.
"""

__version__ = "0.2.0"
__author__ = "CharmVault"

from charmvault.contract.dispatcher import app_contract, verify_spend, Verdict, Operation

__all__ = [
    "app_contract",
    "verify_spend",
    "Verdict",
    "Operation",
    "__version__",
]
