from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from launch_curve.common.enums import CurvePhase, OrderSide
from launch_curve.common.math import EXPONENT, to_fixed


@dataclass
class Token:
    """Represents an asset traded on, or accepted by, the curve."""
    name: str
    symbol: str
    decimals: int = 18
    total_supply: Optional[int] = 0


@dataclass(frozen=True)
class CurveParams:
    """
    Construction-time constants of a launch curve. All amounts are fixed-point
    integers scaled by 1e18.
    """
    start_price: int
    target_reserve: int
    min_purchase: int = 0
    exponent: int = EXPONENT

    def __post_init__(self):
        if self.start_price <= 0:
            raise ValueError("Start price must be positive.")
        if self.target_reserve <= 0:
            raise ValueError("Target reserve must be positive.")
        if self.min_purchase < 0:
            raise ValueError("Minimum purchase must be non-negative.")
        if self.exponent < 0:
            raise ValueError("Exponent must be non-negative.")

    @classmethod
    def from_decimal(
        cls,
        start_price: Decimal,
        target_reserve: Decimal,
        min_purchase: Decimal = Decimal("0"),
        exponent: int = EXPONENT,
    ) -> "CurveParams":
        """Builds params from human-readable Decimal values."""
        return cls(
            start_price=to_fixed(start_price),
            target_reserve=to_fixed(target_reserve),
            min_purchase=to_fixed(min_purchase),
            exponent=exponent,
        )


@dataclass
class CurveState:
    """Tracks the mutable accumulators of a launch curve."""
    amount_sold: int = 0
    reserve_collected: int = 0
    phase: CurvePhase = CurvePhase.ACTIVE

    @property
    def graduated(self) -> bool:
        return self.phase is CurvePhase.GRADUATED

    @property
    def trading_active(self) -> bool:
        return self.phase.trading_active


@dataclass
class TransactionRequest:
    """Represents a discrete purchase or sale request."""
    order_type: OrderSide
    amount: int
    user_id: Optional[str] = None


@dataclass
class TransactionResult:
    """
    Outcome of a transaction. For a buy, ``requested_amount`` is the reserve the
    caller offered and ``reserve_amount`` what was actually charged.
    """
    order_type: OrderSide
    asset_amount: int
    reserve_amount: int
    price: int
    new_amount_sold: int
    new_reserve_collected: int
    phase: CurvePhase
    timestamp: datetime
    requested_amount: int = 0
    partial_fill: bool = False
    user_id: Optional[str] = None


@dataclass
class Quote:
    """A non-binding preview of a trade against the current state."""
    order_type: OrderSide
    asset_amount: int
    reserve_amount: int
    price: int
    partial_fill: bool = False


@dataclass
class GraduationResult:
    asset_amount: int
    reserve_amount: int
    timestamp: datetime


@dataclass
class SimulationResult:
    """Holds the aggregated results of simulating multiple transactions."""
    transactions: List[TransactionResult] = field(default_factory=list)
    final_amount_sold: int = 0
    final_reserve_collected: int = 0
    final_price: Optional[int] = None
    average_purchase_price: Optional[Decimal] = None
    average_sale_price: Optional[Decimal] = None
    final_phase: CurvePhase = CurvePhase.ACTIVE
    metadata: Dict = field(default_factory=dict)
