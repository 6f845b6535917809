from typing import Any, Dict, List

from launch_curve.common.errors import CurveError
from launch_curve.common.math import from_fixed
from launch_curve.common.model import CurveParams
from launch_curve.curves.helpers.pricing import PricingHelper
from launch_curve.curves.helpers.quote import QuoteHelper
from launch_curve.curves.single.graduating import GraduatingBondingCurve


class LaunchCurveValidator:
    """
    Validator for a GraduatingBondingCurve. Performs:
      1) Parameter checks (start price, target reserve, minimum purchase, exponent)
      2) Boundary tests against the live curve (price at zero sold, monotonicity,
         dust floor)
    Nothing here mutates the curve.
    """

    @staticmethod
    def validate_params(params: "CurveParams") -> Dict[str, Any]:
        """
        CurveParams already rejects impossible values on construction; this
        reports the combinations that are legal but suspicious.
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        if params.start_price <= 0:
            errors.append("LaunchCurve: 'start_price' must be > 0.")
        if params.target_reserve <= 0:
            errors.append("LaunchCurve: 'target_reserve' must be > 0.")
        if params.min_purchase < 0:
            errors.append("LaunchCurve: 'min_purchase' cannot be negative.")
        if params.min_purchase > params.target_reserve:
            errors.append("LaunchCurve: 'min_purchase' exceeds 'target_reserve'; no buy can ever succeed.")

        if params.exponent == 0:
            warnings.append("LaunchCurve: 'exponent' is 0, price stays flat.")
        if params.min_purchase == 0:
            warnings.append("LaunchCurve: no 'min_purchase' floor; dust buys are only stopped by ZeroReturn.")

        info["param_summary"] = {
            "start_price": str(params.start_price),
            "target_reserve": str(params.target_reserve),
            "min_purchase": str(params.min_purchase),
            "exponent": str(params.exponent),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def boundary_tests(curve: "GraduatingBondingCurve") -> Dict[str, Any]:
        """
        Minimal checks for a launch curve:
          - price at zero sold => should equal start_price
          - price at 0, 1/4 and 1/2 of the live supply => non-decreasing
          - a purchase of min_purchase at the start price => non-zero output
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        params = curve.params
        supply = curve.curve_supply
        if supply <= 0:
            errors.append("Curve holds no asset; price is undefined.")
            return {"errors": errors, "warnings": warnings, "info": info}

        # 1) price at zero sold
        price_at_zero = PricingHelper.unit_price(supply, 0, params.start_price, params.exponent)
        if price_at_zero != params.start_price:
            errors.append(
                f"Price at zero sold is {price_at_zero}, expected {params.start_price}."
            )

        # 2) monotonic over sample points
        samples = [0, supply // 4, supply // 2]
        prices = [PricingHelper.unit_price(supply, s, params.start_price, params.exponent) for s in samples]
        if any(b < a for a, b in zip(prices, prices[1:])):
            errors.append(f"Price is decreasing across samples {samples}: {prices}")
        info["price_samples"] = dict(zip([str(p) for p in samples], [str(p) for p in prices]))

        # 3) dust floor
        if params.min_purchase > 0:
            try:
                QuoteHelper.purchase_return(params.min_purchase, params.start_price)
            except CurveError as e:
                warnings.append(f"Minimum purchase {params.min_purchase} buys nothing: {e}")

        info["start_price_decimal"] = str(from_fixed(params.start_price))
        info["boundary_tests_run"] = True
        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def run_all_validations(curve: "GraduatingBondingCurve") -> Dict[str, Any]:
        """
        Aggregates:
          - param check
          - boundary tests
        Returns a dict with keys: errors, warnings, info
        """
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        for check in (
            LaunchCurveValidator.validate_params(curve.params),
            LaunchCurveValidator.boundary_tests(curve),
        ):
            results["errors"].extend(check["errors"])
            results["warnings"].extend(check["warnings"])
            results["info"].update(check["info"])

        return results
