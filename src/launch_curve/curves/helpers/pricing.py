from launch_curve.common.errors import PriceUndefined
from launch_curve.common.math import EXPONENT, SCALE, mul_div


class PricingHelper:
    """
    Fixed-point pricing for the launch curve:
        ratio(s) = s / supply
        price(s) = p0 * (1 + exponent * ratio(s))

    All values are integers scaled by SCALE (1e18). Every division floors, so
    the sold ratio and the resulting price never round up.
    """

    @staticmethod
    def validate_supply(curve_supply: int, amount_sold: int):
        """
        Raises PriceUndefined if:
          - curve_supply is zero (ratio undefined)
          - amount_sold exceeds curve_supply (curve would owe more than it holds)
        """
        if curve_supply <= 0:
            raise PriceUndefined("Price is undefined for an empty curve supply.")
        if amount_sold < 0:
            raise PriceUndefined(f"Amount sold cannot be negative: {amount_sold}")
        if amount_sold > curve_supply:
            raise PriceUndefined(
                f"Amount sold {amount_sold} exceeds curve supply {curve_supply}."
            )

    @staticmethod
    def sold_ratio(curve_supply: int, amount_sold: int) -> int:
        """floor(amount_sold * SCALE / curve_supply)."""
        PricingHelper.validate_supply(curve_supply, amount_sold)
        return mul_div(amount_sold, SCALE, curve_supply)

    @staticmethod
    def unit_price(
        curve_supply: int,
        amount_sold: int,
        start_price: int,
        exponent: int = EXPONENT,
    ) -> int:
        """
        Returns the unit price at 'amount_sold' as a fixed-point integer.
        Equals start_price exactly when nothing has been sold.
        """
        ratio = PricingHelper.sold_ratio(curve_supply, amount_sold)
        return mul_div(start_price, SCALE + exponent * ratio, SCALE)
