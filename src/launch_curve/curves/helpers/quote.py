from launch_curve.common.errors import InvalidAmount, PriceUndefined, ZeroReturn
from launch_curve.common.math import SCALE, mul_div


class QuoteHelper:
    """
    Converts between reserve and asset amounts at a given unit price.

    purchase_return and sale_return both floor, so selling what a purchase
    returned never yields more reserve than was paid at the same price.
    They are not inverses of each other.
    """

    @staticmethod
    def purchase_return(reserve_in: int, price: int) -> int:
        """floor(reserve_in * SCALE / price). Raises ZeroReturn for dust."""
        if reserve_in <= 0:
            raise InvalidAmount(f"Reserve in must be positive, got {reserve_in}")
        if price <= 0:
            raise PriceUndefined(f"Cannot quote a purchase at price {price}.")
        asset_out = mul_div(reserve_in, SCALE, price)
        if asset_out == 0:
            raise ZeroReturn(f"Purchase of {reserve_in} reserve units returns no asset.")
        return asset_out

    @staticmethod
    def sale_return(asset_in: int, price: int) -> int:
        """floor(asset_in * price / SCALE). Raises ZeroReturn for dust."""
        if asset_in <= 0:
            raise InvalidAmount(f"Asset in must be positive, got {asset_in}")
        reserve_out = mul_div(asset_in, price, SCALE)
        if reserve_out == 0:
            raise ZeroReturn(f"Sale of {asset_in} asset units returns no reserve.")
        return reserve_out

    @staticmethod
    def clamp_to_target(reserve_in: int, reserve_collected: int, target_reserve: int) -> int:
        """
        Returns the part of 'reserve_in' the curve may still accept, so that
        reserve_collected never ends above target_reserve.
        """
        remaining = target_reserve - reserve_collected
        if remaining <= 0:
            return 0
        return min(reserve_in, remaining)
