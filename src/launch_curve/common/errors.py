"""
Exception hierarchy for the launch curve.

Every failure raised by a curve entry point derives from ``CurveError`` so
callers can catch the whole family, or a single category:

  - CurveValidationError: bad input, rejected before any state is read
  - CurveStateError: the curve is in the wrong phase for the call
  - CurveArithmeticError: a boundary condition in the pricing math
  - CurveConsistencyError: balances and accumulators would diverge
  - ExternalCallError: a ledger transfer or the venue hand-off failed
  - ReentrancyBlocked: a nested call into a guarded entry point
"""


class CurveError(Exception):
    """Base class for every launch curve failure."""


class CurveValidationError(CurveError, ValueError):
    pass


class InvalidAmount(CurveValidationError):
    pass


class BelowMinimum(CurveValidationError):
    pass


class InvalidSide(CurveValidationError):
    pass


class CurveStateError(CurveError):
    pass


class TradingClosed(CurveStateError):
    pass


class AlreadyGraduated(CurveStateError):
    pass


class NotReady(CurveStateError):
    pass


class CurveArithmeticError(CurveError):
    pass


class PriceUndefined(CurveArithmeticError):
    pass


class ZeroReturn(CurveArithmeticError):
    pass


class CurveConsistencyError(CurveError):
    pass


class InsufficientReserve(CurveConsistencyError):
    pass


class InsufficientSupply(CurveConsistencyError):
    pass


class AccumulatorUnderflow(CurveConsistencyError):
    pass


class ExternalCallError(CurveError):
    pass


class TransferFailed(ExternalCallError):
    pass


class HandoffFailed(ExternalCallError):
    pass


class ReentrancyBlocked(CurveError):
    pass
