"""
CharmVault Test Fixtures
"""

import pytest
from typing import Callable, Optional

from charmvault.constants import TAG_NFT
from charmvault.core.contract import Beneficiary, InheritanceContract, Status
from charmvault.core.transaction import App, Coin, Data, Transaction
from charmvault.core.types import Hash, UtxoId
from charmvault.crypto.hash import hash_identity


FUNDING_UTXO = "dc78b09d767c8565c4a58a95e7ad5ee22b28fc1685535056a395dc94929cdd5f:1"
VAULT_UTXO = "b" * 64 + ":0"
STRANGER_UTXO = "c" * 64 + ":2"
OWNER_PUBKEY = "02" + "ab" * 32


@pytest.fixture
def funding_utxo() -> str:
    """UTXO id consumed when the vault is created."""
    return FUNDING_UTXO


@pytest.fixture
def vault_utxo() -> str:
    """UTXO currently holding the vault NFT."""
    return VAULT_UTXO


@pytest.fixture
def nft_app(funding_utxo) -> App:
    """NFT app whose identity commits to the funding UTXO."""
    return App(
        tag=TAG_NFT,
        identity=hash_identity(funding_utxo),
        vk=Hash(bytes(range(32))),
    )


@pytest.fixture
def other_app() -> App:
    """An unrelated NFT app."""
    return App(tag=TAG_NFT, identity=hash_identity(STRANGER_UTXO), vk=Hash(bytes(range(32))))


@pytest.fixture
def beneficiaries() -> tuple:
    return (Beneficiary("addrA", 60), Beneficiary("addrB", 40))


@pytest.fixture
def active_contract(beneficiaries) -> InheritanceContract:
    """Active contract: last check-in at 100, 4320-block delay, 60/40 split."""
    return InheritanceContract(
        owner_identity=OWNER_PUBKEY,
        last_checkin_height=100,
        trigger_delay=4320,
        beneficiaries=beneficiaries,
        status=Status.ACTIVE,
    )


@pytest.fixture
def create_tx(nft_app, funding_utxo) -> Callable[..., Transaction]:
    """Build a creation transaction spending `spent` and minting `content`."""
    def build(content, spent: Optional[str] = None, app: Optional[App] = None) -> Transaction:
        return Transaction(
            ins=[(UtxoId.from_str(spent or funding_utxo), {})],
            outs=[{(app or nft_app): Data(content)}],
        )
    return build


@pytest.fixture
def spend_tx(nft_app, vault_utxo) -> Callable[..., Transaction]:
    """Build a transaction spending the vault: `before` on the input, `after` on the output."""
    def build(before, after=None) -> Transaction:
        outs = [{nft_app: Data(after)}] if after is not None else [{}]
        return Transaction(
            ins=[(UtxoId.from_str(vault_utxo), {nft_app: Data(before)})],
            outs=outs,
        )
    return build


@pytest.fixture
def distribution_tx(nft_app, vault_utxo) -> Callable[..., Transaction]:
    """Build a burn transaction with coin data: vault value in, payouts out."""
    def build(contract, vault_sats: int, payouts: list) -> Transaction:
        return Transaction(
            ins=[(UtxoId.from_str(vault_utxo), {nft_app: Data(contract)})],
            outs=[{} for _ in payouts],
            coin_ins=[Coin("tb1qvault", vault_sats)],
            coin_outs=[Coin(address, sats) for address, sats in payouts],
        )
    return build
