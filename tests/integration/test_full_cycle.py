"""
CharmVault Integration Tests

Walks one vault through its whole life: creation, check-ins, a beneficiary
update and final distribution, feeding each accepted output into the next
transaction.
"""

import pytest

from charmvault import app_contract, verify_spend, Operation
from charmvault.config import ValidatorConfig
from charmvault.constants import TAG_NFT
from charmvault.core.contract import Beneficiary, InheritanceContract, Status
from charmvault.core.transaction import App, Coin, Data, Transaction
from charmvault.core.types import Hash, UtxoId
from charmvault.crypto.hash import hash_identity
from charmvault.contract.beneficiaries import compute_payouts
from charmvault.contract.lifecycle import Phase, checked_in, contract_phase, with_beneficiaries


FUNDING = "dc78b09d767c8565c4a58a95e7ad5ee22b28fc1685535056a395dc94929cdd5f:1"
OWNER = "02" + "ab" * 32


def utxo(n: int) -> UtxoId:
    return UtxoId(bytes([n]) * 32, 0)


def spend(app: App, spent: UtxoId, before, after=None, coin_ins=None, coin_outs=None) -> Transaction:
    outs = [{app: Data(after)}] if after is not None else [{} for _ in coin_outs or [None]]
    return Transaction(
        ins=[(spent, {app: Data(before)})],
        outs=outs,
        coin_ins=coin_ins,
        coin_outs=coin_outs,
    )


@pytest.fixture
def vault_app() -> App:
    return App(TAG_NFT, hash_identity(FUNDING), Hash.zero())


@pytest.fixture
def genesis() -> InheritanceContract:
    return InheritanceContract(
        owner_identity=OWNER,
        last_checkin_height=800_000,
        trigger_delay=4320,
        beneficiaries=(Beneficiary("tb1qalice", 60), Beneficiary("tb1qbob", 40)),
    )


@pytest.mark.timeout(10)
class TestFullCycle:
    """Tests a vault from mint to burn."""

    def test_lifecycle_deferred(self, vault_app, genesis):
        """Test every step is accepted and classified under the default policy."""
        create = Transaction(
            ins=[(UtxoId.from_str(FUNDING), {})],
            outs=[{vault_app: Data(genesis.serialize())}],
        )
        verdict = verify_spend(vault_app, create, Data.empty(), Data(FUNDING))
        assert verdict.operation is Operation.CREATE

        state = genesis
        for step, height in enumerate((800_100, 801_000, 805_000), start=1):
            successor = checked_in(state, height)
            verdict = verify_spend(vault_app, spend(vault_app, utxo(step), state, successor))
            assert verdict.operation is Operation.CHECKIN
            state = successor

        updated = with_beneficiaries(
            state,
            (Beneficiary("tb1qalice", 50), Beneficiary("tb1qbob", 25), Beneficiary("tb1qcarol", 25)),
            805_500,
        )
        verdict = verify_spend(vault_app, spend(vault_app, utxo(10), state, updated))
        assert verdict.operation is Operation.UPDATE_BENEFICIARIES
        state = updated

        verdict = verify_spend(vault_app, spend(vault_app, utxo(11), state))
        assert verdict.operation is Operation.TRIGGER_DISTRIBUTION

    def test_lifecycle_strict(self, vault_app, genesis):
        """Test distribution waits for the deadline and pays each beneficiary."""
        config = ValidatorConfig.default_strict()
        state = checked_in(genesis, 801_000)
        assert contract_phase(state, 805_000) is Phase.ALIVE
        assert contract_phase(state, 805_321) is Phase.READY_TO_TRIGGER

        vault_sats = 250_000
        payouts = compute_payouts(vault_sats, state.beneficiaries, config.policy.distribution_fee_sats)
        tx = spend(
            vault_app,
            utxo(20),
            state,
            coin_ins=[Coin("tb1qvault", vault_sats)],
            coin_outs=[Coin(address, sats) for address, sats in payouts],
        )

        assert not app_contract(vault_app, tx, None, Data(805_320), config)
        assert app_contract(vault_app, tx, None, Data(805_321), config)

    def test_witness_replay(self, vault_app, genesis):
        """Test a creation witness cannot mint again without spending its UTXO."""
        replay = Transaction(
            ins=[(utxo(30), {})],
            outs=[{vault_app: Data(genesis)}],
        )
        assert not app_contract(vault_app, replay, None, Data(FUNDING))

    def test_no_resurrection(self, vault_app, genesis):
        """Test a distributed vault cannot be revived or distributed again."""
        done = InheritanceContract(
            genesis.owner_identity,
            genesis.last_checkin_height,
            genesis.trigger_delay,
            genesis.beneficiaries,
            Status.DISTRIBUTED,
        )
        revived = checked_in(genesis, 900_000)
        assert not app_contract(vault_app, spend(vault_app, utxo(40), done, revived))
        assert not app_contract(vault_app, spend(vault_app, utxo(41), done))
