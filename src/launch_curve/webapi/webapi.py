import logging
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field

from flask import jsonify
from flask_openapi3 import Info, Tag
from flask_openapi3 import OpenAPI

from launch_curve.common.enums import OrderSide
from launch_curve.common.errors import CurveError
from launch_curve.common.math import from_fixed
from launch_curve.common.model import CurveParams, CurveState, Token, TransactionRequest
from launch_curve.curves.single.graduating import GraduatingBondingCurve
from launch_curve.external.memory import InMemoryAssetLedger, InMemoryLiquidityVenue
from launch_curve.validation.launch_validator import LaunchCurveValidator


logger = logging.getLogger(__name__)

info = Info(title="Launch Curve API", version="1.0.0")
app = OpenAPI(__name__, info=info)


class CurveTransactionAction(Enum):
    buy = "buy"
    sell = "sell"


class CurveStatusRequest(BaseModel):
    start_price: int = Field(gt=0, description="Fixed-point (1e18) unit price at zero sold")
    target_reserve: int = Field(gt=0, description="Fixed-point reserve that closes trading")
    min_purchase: int = Field(0, ge=0, description="Smallest accepted buy, in reserve units")
    curve_supply: int = Field(gt=0, description="Asset units currently held by the curve")
    amount_sold: int = Field(0, ge=0, description="Net asset units sold so far")
    reserve_collected: int = Field(0, ge=0, description="Reserve units collected so far")


class CurveTransactionRequest(CurveStatusRequest):
    action: CurveTransactionAction = Field(description="API action to perform")
    amount: int = Field(gt=0, description="Reserve units to spend (buy) or asset units to sell")
    user_id: str = Field("api_user", description="Account executing the transaction")


curve_action_tag = Tag(
    name="Launch Curve Transaction",
    description="Perform a buy or sell against a curve state and get the execution information",
)

curve_status_tag = Tag(
    name="Launch Curve Status",
    description="Get price, phase, progress and validation report of a curve state",
)


def _build_curve(query: CurveStatusRequest) -> Tuple[GraduatingBondingCurve, InMemoryAssetLedger, InMemoryAssetLedger]:
    """Rebuilds a curve and its ledgers from the state described in a request."""
    params = CurveParams(
        start_price=query.start_price,
        target_reserve=query.target_reserve,
        min_purchase=query.min_purchase,
    )
    state = CurveState(amount_sold=query.amount_sold, reserve_collected=query.reserve_collected)
    asset_ledger = InMemoryAssetLedger(Token("Launch", "LAUNCH"), balances={"curve": query.curve_supply})
    reserve_ledger = InMemoryAssetLedger(Token("Reserve", "RSV"), balances={"curve": query.reserve_collected})
    curve = GraduatingBondingCurve(params, asset_ledger, reserve_ledger, InMemoryLiquidityVenue(), state)
    return curve, asset_ledger, reserve_ledger


def _error(e: Exception):
    return jsonify({"error": type(e).__name__, "message": str(e)}), 400


@app.post("/curve/transaction", summary="Curve Transaction", tags=[curve_action_tag])
def transaction(body: CurveTransactionRequest):
    """
    Handles a buy or sell operation on a curve
    """
    try:
        curve, asset_ledger, reserve_ledger = _build_curve(body)
    except ValueError as e:
        return _error(e)

    side = OrderSide.from_str(body.action.name)
    if side == OrderSide.BUY:
        reserve_ledger.mint(body.user_id, body.amount)
    else:
        asset_ledger.mint(body.user_id, body.amount)

    try:
        result = curve.execute(TransactionRequest(side, body.amount, body.user_id))
    except CurveError as e:
        logger.info("Transaction rejected: %s", e)
        return _error(e)

    return jsonify({
        "order_type": str(result.order_type),
        "asset_amount": result.asset_amount,
        "reserve_amount": result.reserve_amount,
        "price": result.price,
        "price_decimal": str(from_fixed(result.price)),
        "requested_amount": result.requested_amount,
        "partial_fill": result.partial_fill,
        "new_amount_sold": result.new_amount_sold,
        "new_reserve_collected": result.new_reserve_collected,
        "phase": str(result.phase),
    })


@app.get("/curve/status", summary="Curve Status", tags=[curve_status_tag])
def status(query: CurveStatusRequest):
    """
    Return the spot price, phase and progress of the curve state specified by the caller,
    along with its validation report.
    """
    try:
        curve, _, _ = _build_curve(query)
        snapshot = curve.snapshot()
    except (ValueError, CurveError) as e:
        return _error(e)

    snapshot["progress"] = str(snapshot["progress"])
    snapshot["validation"] = LaunchCurveValidator.run_all_validations(curve)
    return jsonify(snapshot)


def main():
    app.run(debug=True)


if __name__ == "__main__":
    main()
