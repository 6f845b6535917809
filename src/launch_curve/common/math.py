from decimal import Decimal, ROUND_FLOOR


SCALE = 10 ** 18
EXPONENT = 2


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) on unbounded ints, so the product never overflows."""
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator


def to_fixed(value: Decimal, scale: int = SCALE) -> int:
    """Scale a human Decimal into a fixed-point integer, truncating toward -inf."""
    return int((Decimal(value) * scale).to_integral_value(rounding=ROUND_FLOOR))


def from_fixed(value: int, scale: int = SCALE) -> Decimal:
    return Decimal(value) / Decimal(scale)
