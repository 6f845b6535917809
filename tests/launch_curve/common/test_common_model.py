import dataclasses

import pytest
from decimal import Decimal

from launch_curve.common.enums import CurvePhase, OrderSide
from launch_curve.common.math import SCALE, EXPONENT
from launch_curve.common.model import (
    CurveParams,
    CurveState,
    SimulationResult,
    Token,
    TransactionRequest,
)


class TestToken:
    def test_token_defaults(self):
        token = Token(name="Launch", symbol="LAUNCH")
        assert token.decimals == 18
        assert token.total_supply == 0


class TestCurveParams:
    def test_defaults(self):
        params = CurveParams(start_price=SCALE, target_reserve=100 * SCALE)
        assert params.min_purchase == 0
        assert params.exponent == EXPONENT == 2

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"start_price": 0, "target_reserve": 1}, "Start price must be positive."),
            ({"start_price": -1, "target_reserve": 1}, "Start price must be positive."),
            ({"start_price": 1, "target_reserve": 0}, "Target reserve must be positive."),
            ({"start_price": 1, "target_reserve": 1, "min_purchase": -1}, "Minimum purchase must be non-negative."),
            ({"start_price": 1, "target_reserve": 1, "exponent": -2}, "Exponent must be non-negative."),
        ]
    )
    def test_invalid(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            CurveParams(**kwargs)

    def test_immutable(self):
        params = CurveParams(start_price=SCALE, target_reserve=SCALE)
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.start_price = 2 * SCALE

    def test_from_decimal(self):
        params = CurveParams.from_decimal(Decimal("1.5"), Decimal("100"), Decimal("0.01"))
        assert params.start_price == 15 * 10 ** 17
        assert params.target_reserve == 100 * SCALE
        assert params.min_purchase == 10 ** 16


class TestCurveState:
    def test_defaults(self):
        state = CurveState()
        assert state.amount_sold == 0
        assert state.reserve_collected == 0
        assert state.phase is CurvePhase.ACTIVE
        assert state.trading_active is True
        assert state.graduated is False

    @pytest.mark.parametrize(
        "phase, trading_active, graduated",
        [
            (CurvePhase.ACTIVE, True, False),
            (CurvePhase.TARGET_REACHED, False, False),
            (CurvePhase.GRADUATED, False, True),
        ]
    )
    def test_flags_follow_phase(self, phase, trading_active, graduated):
        state = CurveState(phase=phase)
        assert state.trading_active is trading_active
        assert state.graduated is graduated


def test_transaction_request():
    req = TransactionRequest(OrderSide.BUY, 100, "alice")
    assert req.order_type == OrderSide.BUY
    assert req.amount == 100
    assert req.user_id == "alice"


def test_simulation_result_defaults():
    result = SimulationResult()
    assert result.transactions == []
    assert result.final_phase is CurvePhase.ACTIVE
    assert result.metadata == {}
