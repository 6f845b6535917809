import logging
from datetime import datetime

from launch_curve.common.enums import CurvePhase
from launch_curve.common.errors import AlreadyGraduated, HandoffFailed, NotReady
from launch_curve.common.model import CurveParams, CurveState, GraduationResult
from launch_curve.external.base import AssetLedger, LiquidityVenue


logger = logging.getLogger(__name__)


class GraduationCoordinator:
    """
    One-shot hand-off of a curve's balances to an external liquidity venue.

    The phase flip is staged: the state is marked graduated before the venue is
    called, so a venue calling back sees a closed curve, and restored to its
    prior phase if the venue refuses or raises. A failed hand-off therefore
    leaves the curve exactly as it was.
    """

    def __init__(
        self,
        params: CurveParams,
        state: CurveState,
        asset_ledger: AssetLedger,
        venue: LiquidityVenue,
        record_holder: str,
    ):
        self._params = params
        self._state = state
        self._asset_ledger = asset_ledger
        self._venue = venue
        self._record_holder = record_holder

    def check_ready(self):
        if self._state.graduated:
            raise AlreadyGraduated("Curve has already graduated.")
        if self._state.reserve_collected < self._params.target_reserve:
            raise NotReady(
                f"Reserve collected {self._state.reserve_collected} is below "
                f"target {self._params.target_reserve}."
            )

    def graduate(self) -> GraduationResult:
        self.check_ready()

        previous_phase = self._state.phase
        reserve_amount = self._state.reserve_collected

        # 1) + 2) stop trading and mark graduated
        self._state.phase = CurvePhase.GRADUATED
        try:
            # 3) reserve-of-record balance, read once
            asset_amount = self._asset_ledger.balance_of(self._record_holder)
            # 4) hand-off
            accepted = self._venue.accept_graduation(asset_amount, reserve_amount)
        except Exception as exc:
            self._state.phase = previous_phase
            logger.warning("Graduation hand-off raised, restored phase %s: %s", previous_phase, exc)
            raise HandoffFailed(f"Venue hand-off raised: {exc}") from exc

        if not accepted:
            self._state.phase = previous_phase
            logger.warning("Graduation hand-off refused, restored phase %s", previous_phase)
            raise HandoffFailed("Venue refused the graduation hand-off.")

        logger.info(
            "Graduated: handed off %s asset units and %s reserve units",
            asset_amount, reserve_amount,
        )
        return GraduationResult(
            asset_amount=asset_amount,
            reserve_amount=reserve_amount,
            timestamp=datetime.now(),
        )
