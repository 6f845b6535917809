import pytest

from launch_curve.common.model import Token
from launch_curve.external.base import AssetLedger, LiquidityVenue
from launch_curve.external.memory import InMemoryAssetLedger, InMemoryLiquidityVenue


def _make_ledger(**kwargs):
    return InMemoryAssetLedger(Token("Reserve", "RSV"), balances={"alice": 100, "curve": 50}, **kwargs)


def test_implements_interfaces():
    assert isinstance(_make_ledger(), AssetLedger)
    assert isinstance(InMemoryLiquidityVenue(), LiquidityVenue)


def test_transfer_from_moves_into_custodian():
    ledger = _make_ledger()
    assert ledger.transfer_from("alice", 40) is True
    assert ledger.balance_of("alice") == 60
    assert ledger.held_balance() == 90


def test_transfer_to_moves_out_of_custodian():
    ledger = _make_ledger()
    assert ledger.transfer_to("bob", 50) is True
    assert ledger.balance_of("bob") == 50
    assert ledger.held_balance() == 0


@pytest.mark.parametrize(
    "method, account, amount",
    [
        ("transfer_from", "alice", 101),
        ("transfer_from", "nobody", 1),
        ("transfer_to", "bob", 51),
        ("transfer_from", "alice", -1),
    ]
)
def test_failed_transfers_change_nothing(method, account, amount):
    ledger = _make_ledger()
    assert getattr(ledger, method)(account, amount) is False
    assert ledger.balance_of("alice") == 100
    assert ledger.held_balance() == 50


def test_hook_sees_every_transfer():
    calls = []
    ledger = _make_ledger(hook=lambda op, account, amount: calls.append((op, account, amount)))
    ledger.transfer_from("alice", 10)
    ledger.transfer_to("bob", 5)
    assert calls == [("transfer_from", "alice", 10), ("transfer_to", "bob", 5)]


def test_mint():
    ledger = _make_ledger()
    ledger.mint("carol", 7)
    assert ledger.balance_of("carol") == 7
    assert ledger.token.total_supply == 7
    with pytest.raises(ValueError):
        ledger.mint("carol", -1)


def test_custom_custodian():
    ledger = InMemoryAssetLedger(Token("Launch", "LAUNCH"), custodian="curve-2", balances={"curve-2": 5})
    assert ledger.custodian == "curve-2"
    assert ledger.held_balance() == 5


class TestInMemoryLiquidityVenue:
    def test_records_handoff(self):
        venue = InMemoryLiquidityVenue()
        assert venue.accept_graduation(10, 20) is True
        assert venue.handoffs == [(10, 20)]

    def test_refuses(self):
        venue = InMemoryLiquidityVenue(accept=False)
        assert venue.accept_graduation(10, 20) is False
        assert venue.handoffs == []

    def test_takes_custody(self):
        assets = InMemoryAssetLedger(Token("Launch", "LAUNCH"), balances={"record": 30})
        reserve = InMemoryAssetLedger(Token("Reserve", "RSV"), balances={"curve": 20})
        venue = InMemoryLiquidityVenue(asset_ledger=assets, reserve_ledger=reserve, record_holder="record")

        assert venue.accept_graduation(30, 20) is True
        assert reserve.balance_of("venue") == 20
        assert assets.balance_of("venue") == 30
        assert assets.balance_of("record") == 0

    def test_short_record_balance_puts_reserve_back(self):
        assets = InMemoryAssetLedger(Token("Launch", "LAUNCH"), balances={"record": 10})
        reserve = InMemoryAssetLedger(Token("Reserve", "RSV"), balances={"curve": 20})
        venue = InMemoryLiquidityVenue(asset_ledger=assets, reserve_ledger=reserve, record_holder="record")

        assert venue.accept_graduation(30, 20) is False
        assert reserve.held_balance() == 20
        assert reserve.balance_of("venue") == 0
        assert venue.handoffs == []
