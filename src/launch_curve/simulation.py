import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from launch_curve.common.enums import OrderSide
from launch_curve.common.errors import CurveError, PriceUndefined
from launch_curve.common.model import SimulationResult, TransactionRequest, TransactionResult
from launch_curve.curves.single.graduating import GraduatingBondingCurve


logger = logging.getLogger(__name__)


def _average_price(results: List[TransactionResult]) -> Optional[Decimal]:
    """Reserve paid or received per asset unit, across 'results'."""
    asset_total = sum(r.asset_amount for r in results)
    if asset_total == 0:
        return None
    reserve_total = sum(r.reserve_amount for r in results)
    return Decimal(reserve_total) / Decimal(asset_total)


def simulate_transactions(
    curve: GraduatingBondingCurve,
    requests: Iterable[TransactionRequest],
) -> SimulationResult:
    """
    Executes 'requests' against 'curve' in order. A request the curve rejects is
    recorded in metadata["rejected"] as (index, error name, message) and the run
    continues with the next one.
    """
    executed: List[TransactionResult] = []
    rejected = []

    for i, request in enumerate(requests):
        try:
            executed.append(curve.execute(request))
        except CurveError as e:
            logger.info("Request %d (%s %s) rejected: %s", i, request.order_type, request.amount, e)
            rejected.append((i, type(e).__name__, str(e)))

    try:
        final_price = curve.get_spot_price()
    except PriceUndefined:
        final_price = None

    buys = [r for r in executed if r.order_type == OrderSide.BUY]
    sells = [r for r in executed if r.order_type == OrderSide.SELL]

    return SimulationResult(
        transactions=executed,
        final_amount_sold=curve.amount_sold,
        final_reserve_collected=curve.reserve_collected,
        final_price=final_price,
        average_purchase_price=_average_price(buys),
        average_sale_price=_average_price(sells),
        final_phase=curve.phase,
        metadata={
            "rejected": rejected,
            "partial_fills": sum(1 for r in buys if r.partial_fill),
            "progress": curve.progress(),
        },
    )
