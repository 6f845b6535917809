from abc import ABC, abstractmethod
from typing import Optional

from launch_curve.common.errors import AccumulatorUnderflow
from launch_curve.common.model import CurveParams, CurveState, TransactionRequest, TransactionResult


class BondingCurve(ABC):
    """Abstract base class defining the interface for a launch curve implementation."""
    def __init__(self, params: 'CurveParams', state: Optional['CurveState'] = None):
        """
        Initializes the bonding curve with parameters and an optional existing state.

        :param params: CurveParams - immutable curve configuration
        :param state: CurveState - optional initial state
        """
        self._params = params
        self._state = state or CurveState()

    @property
    def params(self) -> 'CurveParams':
        """Returns the bonding curve parameters."""
        return self._params

    @property
    def state(self) -> 'CurveState':
        return self._state

    @property
    def amount_sold(self) -> int:
        """Returns the net amount of asset sold from the state."""
        return self._state.amount_sold

    @property
    def reserve_collected(self) -> int:
        return self._state.reserve_collected

    @abstractmethod
    def get_spot_price(self, amount_sold: Optional[int] = None) -> int:
        """
        Returns the unit price after 'amount_sold' units have been sold.

        :param amount_sold: int - defaults to the current amount sold.
        :return: int: fixed-point unit price.
        """
        pass

    @abstractmethod
    def calculate_purchase_return(self, reserve_in: int) -> int:
        """
        Calculates how many asset units 'reserve_in' reserve units buy at the current price.

        :param reserve_in: int - reserve units offered.
        :return: asset units returned.
        """
        pass

    @abstractmethod
    def calculate_sale_return(self, asset_in: int) -> int:
        """
        Calculates how many reserve units are returned for selling 'asset_in' asset units
        back into the curve at the current price.

        :param asset_in: int - asset units sold.
        :return: reserve units returned.
        """
        pass

    @abstractmethod
    def buy(self, request: 'TransactionRequest') -> 'TransactionResult':
        pass

    @abstractmethod
    def sell(self, request: 'TransactionRequest') -> 'TransactionResult':
        pass

    def _update_state_after_buy(self, asset_amount: int, reserve_amount: int):
        """
        Updates the accumulators after 'asset_amount' units were bought for 'reserve_amount'.
        """
        self._state.amount_sold += asset_amount
        self._state.reserve_collected += reserve_amount

    def _check_state_for_sell(self, asset_amount: int, reserve_amount: int):
        """
        Raises AccumulatorUnderflow if a sale would push either accumulator below zero.
        That can only happen when balances and accumulators already disagree.
        """
        if asset_amount > self._state.amount_sold:
            raise AccumulatorUnderflow(
                f"Selling {asset_amount} exceeds amount sold {self._state.amount_sold}."
            )
        if reserve_amount > self._state.reserve_collected:
            raise AccumulatorUnderflow(
                f"Returning {reserve_amount} exceeds reserve collected {self._state.reserve_collected}."
            )

    def _update_state_after_sell(self, asset_amount: int, reserve_amount: int):
        """
        Updates the accumulators after 'asset_amount' units were sold back for 'reserve_amount'.
        """
        self._check_state_for_sell(asset_amount, reserve_amount)
        self._state.amount_sold -= asset_amount
        self._state.reserve_collected -= reserve_amount
