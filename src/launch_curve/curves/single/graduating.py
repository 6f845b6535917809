import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from launch_curve.common.enums import CurvePhase, OrderSide
from launch_curve.common.errors import (
    BelowMinimum,
    CurveValidationError,
    InsufficientReserve,
    InsufficientSupply,
    InvalidAmount,
    InvalidSide,
    PriceUndefined,
    TradingClosed,
    TransferFailed,
)
from launch_curve.common.events import (
    CurveEvent,
    EventBus,
    GraduationCompleted,
    PriceUpdated,
    PurchaseCompleted,
    SaleCompleted,
)
from launch_curve.common.model import (
    CurveParams,
    CurveState,
    GraduationResult,
    Quote,
    TransactionRequest,
    TransactionResult,
)
from launch_curve.curves.helpers.pricing import PricingHelper as pricing_helper
from launch_curve.curves.helpers.quote import QuoteHelper as quote_helper
from launch_curve.curves.single.base import BondingCurve
from launch_curve.curves.utils.graduation_coordinator import GraduationCoordinator
from launch_curve.curves.utils.reentrancy_guard import ReentrancyGuard, non_reentrant
from launch_curve.external.base import AssetLedger, LiquidityVenue


logger = logging.getLogger(__name__)


class GraduatingBondingCurve(BondingCurve):
    """
    A launch curve priced as:
        price(s) = p0 * (1 + exponent * s / supply)
    where 's' is the net amount sold and 'supply' the curve's live asset balance.

    This class:
      - Quotes buys and sells through PricingHelper / QuoteHelper
      - Clamps the buy that crosses target_reserve to a partial fill
      - Closes trading once target_reserve is collected
      - Graduates once, handing balances to a LiquidityVenue
      - Guards buy / sell / graduate against reentrant calls
      - Moves funds only through the asset and reserve ledgers, and updates
        its accumulators only after the transfers succeeded
    """

    def __init__(
        self,
        params: CurveParams,
        asset_ledger: AssetLedger,
        reserve_ledger: AssetLedger,
        venue: LiquidityVenue,
        state: Optional[CurveState] = None,
        **kwargs
    ):
        """
        :param params: CurveParams - start price, target reserve, minimum purchase, exponent
        :param asset_ledger: ledger of the launched asset; its custodian is the curve
        :param reserve_ledger: ledger of the reserve asset; its custodian is the curve
        :param venue: liquidity venue receiving the balances at graduation
        :param state: existing CurveState, or None => new state
        :param kwargs: options:
          - record_holder: account holding the reserve-of-record asset
          - event_bus: EventBus to publish to (a private one by default)
          - name: label used in logs and reentrancy errors
        """
        super().__init__(params, state)
        # a state restored at or past the target is closed
        if self._state.phase is CurvePhase.ACTIVE and self._state.reserve_collected >= params.target_reserve:
            self._state.phase = CurvePhase.TARGET_REACHED

        self.options = {
            "record_holder": "reserve_of_record",
            "event_bus": None,
            "name": "curve",
        }
        for k, v in kwargs.items():
            if k not in self.options:
                raise TypeError(f"Unknown GraduatingBondingCurve option: {k}")
            self.options[k] = v

        self._asset_ledger = asset_ledger
        self._reserve_ledger = reserve_ledger
        self._event_bus = self.options["event_bus"] or EventBus()
        self._guard = ReentrancyGuard(self.options["name"])
        self._pending_events: List[CurveEvent] = []
        self._coordinator = GraduationCoordinator(
            params=params,
            state=self._state,
            asset_ledger=asset_ledger,
            venue=venue,
            record_holder=self.options["record_holder"],
        )

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def phase(self) -> CurvePhase:
        return self._state.phase

    @property
    def graduated(self) -> bool:
        return self._state.graduated

    @property
    def trading_active(self) -> bool:
        return self._state.trading_active

    @property
    def curve_supply(self) -> int:
        """The curve's live balance of the launched asset."""
        return self._asset_ledger.held_balance()

    @property
    def remaining_reserve_capacity(self) -> int:
        return max(self._params.target_reserve - self._state.reserve_collected, 0)

    def progress(self) -> Decimal:
        """Fraction of target_reserve collected so far, in [0, 1]."""
        return Decimal(self._state.reserve_collected) / Decimal(self._params.target_reserve)

    def get_spot_price(self, amount_sold: Optional[int] = None) -> int:
        if amount_sold is None:
            amount_sold = self._state.amount_sold
        return pricing_helper.unit_price(
            curve_supply=self.curve_supply,
            amount_sold=amount_sold,
            start_price=self._params.start_price,
            exponent=self._params.exponent,
        )

    def calculate_purchase_return(self, reserve_in: int) -> int:
        self._validate_amount(reserve_in)
        self._ensure_trading()
        return quote_helper.purchase_return(reserve_in, self.get_spot_price())

    def calculate_sale_return(self, asset_in: int) -> int:
        self._validate_amount(asset_in)
        self._ensure_trading()
        return quote_helper.sale_return(asset_in, self.get_spot_price())

    def quote_buy(self, reserve_in: int) -> Quote:
        """
        Previews a buy of 'reserve_in' including the clamp at target_reserve.
        Nothing is transferred and the state is untouched.
        """
        self._validate_amount(reserve_in)
        self._ensure_trading()
        charged = quote_helper.clamp_to_target(
            reserve_in, self._state.reserve_collected, self._params.target_reserve
        )
        price = self.get_spot_price()
        asset_out = quote_helper.purchase_return(charged, price)
        logger.debug("Quote buy %s -> %s at %s", reserve_in, asset_out, price)
        return Quote(
            order_type=OrderSide.BUY,
            asset_amount=asset_out,
            reserve_amount=charged,
            price=price,
            partial_fill=charged < reserve_in,
        )

    def quote_sell(self, asset_in: int) -> Quote:
        self._validate_amount(asset_in)
        self._ensure_trading()
        price = self.get_spot_price()
        reserve_out = quote_helper.sale_return(asset_in, price)
        logger.debug("Quote sell %s -> %s at %s", asset_in, reserve_out, price)
        return Quote(
            order_type=OrderSide.SELL,
            asset_amount=asset_in,
            reserve_amount=reserve_out,
            price=price,
        )

    @non_reentrant
    def buy(self, request: TransactionRequest) -> TransactionResult:
        """
        Buys the asset with 'request.amount' reserve units.

        If the purchase would take reserve_collected above target_reserve, only
        the remaining capacity is charged and the asset returned is priced for
        that clamped amount. The buy that reaches the target closes trading.
        """
        self._validate_request(request, OrderSide.BUY)
        reserve_in = request.amount
        if reserve_in < self._params.min_purchase:
            raise BelowMinimum(
                f"Purchase of {reserve_in} is below the minimum {self._params.min_purchase}."
            )
        self._ensure_trading()

        # 1) clamp to the target boundary
        charged = quote_helper.clamp_to_target(
            reserve_in, self._state.reserve_collected, self._params.target_reserve
        )

        # 2) price & output
        price = self.get_spot_price()
        asset_out = quote_helper.purchase_return(charged, price)

        # 3) the curve must keep holding at least what it has sold
        held = self._asset_ledger.held_balance()
        if asset_out + self._state.amount_sold > held - asset_out:
            raise InsufficientSupply(
                f"Buying {asset_out} would leave the curve holding {held - asset_out} "
                f"against {asset_out + self._state.amount_sold} sold."
            )

        # 4) transfers
        buyer = request.user_id
        self._pull(self._reserve_ledger, buyer, charged)
        self._push_or_refund(self._asset_ledger, buyer, asset_out, self._reserve_ledger, charged)

        # 5) accumulators & phase
        self._update_state_after_buy(asset_out, charged)
        if self._state.reserve_collected >= self._params.target_reserve:
            self._state.phase = CurvePhase.TARGET_REACHED
            logger.info("Target reserve %s reached, trading closed", self._params.target_reserve)

        new_price = self.get_spot_price()
        self._pending_events.append(
            PurchaseCompleted(buyer=buyer, asset_amount=asset_out, reserve_amount=charged)
        )
        self._pending_events.append(PriceUpdated(price=new_price))
        logger.info("Buy by %s: %s asset for %s reserve at %s", buyer, asset_out, charged, price)

        return TransactionResult(
            order_type=OrderSide.BUY,
            asset_amount=asset_out,
            reserve_amount=charged,
            price=price,
            new_amount_sold=self._state.amount_sold,
            new_reserve_collected=self._state.reserve_collected,
            phase=self._state.phase,
            timestamp=datetime.now(),
            requested_amount=reserve_in,
            partial_fill=charged < reserve_in,
            user_id=buyer,
        )

    @non_reentrant
    def sell(self, request: TransactionRequest) -> TransactionResult:
        """
        Sells 'request.amount' asset units back into the curve at the current price.
        Sales are never clamped: a return the curve cannot cover is rejected.
        """
        self._validate_request(request, OrderSide.SELL)
        asset_in = request.amount
        self._ensure_trading()

        # 1) price & output
        price = self.get_spot_price()
        reserve_out = quote_helper.sale_return(asset_in, price)

        # 2) coverage
        reserve_balance = self._reserve_ledger.held_balance()
        if reserve_out > reserve_balance:
            raise InsufficientReserve(
                f"Sale returns {reserve_out} but the curve holds {reserve_balance} reserve."
            )
        self._check_state_for_sell(asset_in, reserve_out)

        # 3) transfers
        seller = request.user_id
        self._pull(self._asset_ledger, seller, asset_in)
        self._push_or_refund(self._reserve_ledger, seller, reserve_out, self._asset_ledger, asset_in)

        # 4) accumulators
        self._update_state_after_sell(asset_in, reserve_out)

        new_price = self.get_spot_price()
        self._pending_events.append(
            SaleCompleted(seller=seller, asset_amount=asset_in, reserve_amount=reserve_out)
        )
        self._pending_events.append(PriceUpdated(price=new_price))
        logger.info("Sell by %s: %s asset for %s reserve at %s", seller, asset_in, reserve_out, price)

        return TransactionResult(
            order_type=OrderSide.SELL,
            asset_amount=asset_in,
            reserve_amount=reserve_out,
            price=price,
            new_amount_sold=self._state.amount_sold,
            new_reserve_collected=self._state.reserve_collected,
            phase=self._state.phase,
            timestamp=datetime.now(),
            requested_amount=asset_in,
            user_id=seller,
        )

    def execute(self, request: TransactionRequest) -> TransactionResult:
        """Dispatches a request to buy or sell by its order type."""
        if request.order_type == OrderSide.BUY:
            return self.buy(request)
        if request.order_type == OrderSide.SELL:
            return self.sell(request)
        raise InvalidSide(f"Unsupported order type {request.order_type}")

    @non_reentrant
    def graduate(self) -> GraduationResult:
        """
        Hands the collected reserve and the reserve-of-record balance to the venue.
        Fails with AlreadyGraduated, NotReady, or HandoffFailed; in every failure
        case the curve is left unchanged.
        """
        result = self._coordinator.graduate()
        self._pending_events.append(
            GraduationCompleted(asset_amount=result.asset_amount, reserve_amount=result.reserve_amount)
        )
        return result

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict view of the curve for reporting."""
        try:
            price = self.get_spot_price()
        except PriceUndefined:
            price = None
        return {
            "phase": str(self._state.phase),
            "amount_sold": self._state.amount_sold,
            "reserve_collected": self._state.reserve_collected,
            "target_reserve": self._params.target_reserve,
            "curve_supply": self.curve_supply,
            "price": price,
            "progress": self.progress(),
        }

    def _ensure_trading(self):
        if self._state.graduated:
            raise TradingClosed("Curve has graduated; trading is closed.")
        if not self._state.trading_active or self._state.reserve_collected >= self._params.target_reserve:
            raise TradingClosed("Target reserve reached; trading is closed until graduation.")

    @staticmethod
    def _validate_amount(amount: int):
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmount(f"Amount must be an integer, got {amount!r}")
        if amount <= 0:
            raise InvalidAmount(f"Amount must be positive, got {amount}")

    def _validate_request(self, request: TransactionRequest, side: OrderSide):
        if request.order_type != side:
            raise InvalidSide(f"Expected a {side} request, got {request.order_type}")
        self._validate_amount(request.amount)
        if not request.user_id:
            raise CurveValidationError("A transaction request needs a user_id.")

    @staticmethod
    def _pull(ledger: AssetLedger, owner: str, amount: int):
        if not ledger.transfer_from(owner, amount):
            raise TransferFailed(f"Could not pull {amount} from {owner}.")

    def _push_or_refund(
        self,
        ledger: AssetLedger,
        recipient: str,
        amount: int,
        refund_ledger: AssetLedger,
        refund_amount: int,
    ):
        """
        Pushes 'amount' to 'recipient'. If that fails, the funds already pulled
        from the same account are returned before the failure propagates.
        """
        try:
            pushed = ledger.transfer_to(recipient, amount)
        except Exception:
            self._refund(refund_ledger, recipient, refund_amount)
            raise
        if not pushed:
            self._refund(refund_ledger, recipient, refund_amount)
            raise TransferFailed(f"Could not push {amount} to {recipient}.")

    @staticmethod
    def _refund(ledger: AssetLedger, account: str, amount: int):
        logger.warning("Returning %s to %s after a failed transfer", amount, account)
        if not ledger.transfer_to(account, amount):
            logger.error("Refund of %s to %s failed; balances need reconciliation", amount, account)

    def _publish(self, events: List[CurveEvent]):
        for event in events:
            self._event_bus.publish(event)
