import pytest

from unittest.mock import Mock

from launch_curve.common.enums import CurvePhase
from launch_curve.common.errors import AlreadyGraduated, HandoffFailed, NotReady
from launch_curve.common.math import SCALE
from launch_curve.common.model import CurveParams, CurveState, Token
from launch_curve.curves.utils.graduation_coordinator import GraduationCoordinator
from launch_curve.external.base import LiquidityVenue
from launch_curve.external.memory import InMemoryAssetLedger


def _make_coordinator(reserve_collected=100, phase=CurvePhase.TARGET_REACHED, accepted=True):
    params = CurveParams(start_price=SCALE, target_reserve=100)
    state = CurveState(amount_sold=100, reserve_collected=reserve_collected, phase=phase)
    asset_ledger = InMemoryAssetLedger(Token("Launch", "LAUNCH"), balances={"record": 500})
    venue = Mock(spec=LiquidityVenue)
    venue.accept_graduation.return_value = accepted
    coordinator = GraduationCoordinator(params, state, asset_ledger, venue, record_holder="record")
    return coordinator, state, venue


def test_graduate_hands_off_both_amounts():
    coordinator, state, venue = _make_coordinator()
    result = coordinator.graduate()
    venue.accept_graduation.assert_called_once_with(500, 100)
    assert result.asset_amount == 500
    assert result.reserve_amount == 100
    assert state.phase is CurvePhase.GRADUATED


def test_state_is_closed_during_handoff():
    coordinator, state, venue = _make_coordinator()
    seen = []

    def accept(asset_amount, reserve_amount):
        seen.append((state.graduated, state.trading_active))
        return True

    venue.accept_graduation.side_effect = accept
    coordinator.graduate()
    assert seen == [(True, False)]


def test_not_ready():
    coordinator, state, venue = _make_coordinator(reserve_collected=99, phase=CurvePhase.ACTIVE)
    with pytest.raises(NotReady):
        coordinator.graduate()
    venue.accept_graduation.assert_not_called()
    assert state.phase is CurvePhase.ACTIVE


def test_already_graduated():
    coordinator, state, venue = _make_coordinator(phase=CurvePhase.GRADUATED)
    with pytest.raises(AlreadyGraduated):
        coordinator.graduate()
    venue.accept_graduation.assert_not_called()


def test_refused_handoff_restores_phase():
    coordinator, state, venue = _make_coordinator(accepted=False)
    with pytest.raises(HandoffFailed, match="refused"):
        coordinator.graduate()
    assert state.phase is CurvePhase.TARGET_REACHED
    assert state.graduated is False


def test_raising_handoff_restores_phase():
    coordinator, state, venue = _make_coordinator()
    venue.accept_graduation.side_effect = ConnectionError("venue unreachable")
    with pytest.raises(HandoffFailed) as exc_info:
        coordinator.graduate()
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert state.phase is CurvePhase.TARGET_REACHED


def test_ready_in_active_phase_when_target_met():
    """
    A state that met the target without the phase flip (e.g. restored from a
    snapshot) can still graduate.
    """
    coordinator, state, venue = _make_coordinator(phase=CurvePhase.ACTIVE)
    coordinator.graduate()
    assert state.phase is CurvePhase.GRADUATED
