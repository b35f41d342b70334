"""Exception hierarchy for the bonding-curve engine.

Every error raised by the library derives from BondingCurveError, so callers
can catch the whole family at once. Arithmetic failures additionally derive
from ArithmeticError and configuration rejections from ValueError.
"""

from __future__ import annotations

from typing import Any


class BondingCurveError(Exception):
    """Base class for all bonding-curve errors."""

    pass


class MathError(BondingCurveError, ArithmeticError):
    """Base class for fixed-point arithmetic failures."""

    pass


class MathOverflow(MathError):
    """Result does not fit in the target integer width."""

    pass


class Underflow(MathError):
    """Subtraction would produce a negative result."""

    pass


class DivisionByZero(MathError):
    """Division by zero."""

    pass


class ExponentTooLarge(MathError):
    """Exponent of a fixed-point power exceeds 64 bits."""

    pass


class SqrtDidNotConverge(MathError):
    """Newton iteration for a square root hit its iteration cap."""

    pass


class InvalidState(BondingCurveError):
    """Zero price or zero liquidity reached a price step."""

    pass


class InsufficientLiquidity(BondingCurveError):
    """Trade exceeds the liquidity available along the curve."""

    pass


class PoolCompleted(BondingCurveError):
    """Pool has already reached its migration threshold."""

    pass


class ZeroAmount(BondingCurveError):
    """Swap amount is zero."""

    pass


class InvalidFeeMode(BondingCurveError):
    """Unknown base fee mode."""

    pass


class CalibrationError(BondingCurveError):
    """Base class for curve calibration failures."""

    pass


class InvalidCurve(CalibrationError):
    """Calibrated curve violates a structural invariant."""

    pass


class NoValidCurve(CalibrationError):
    """No candidate midpoint produced a valid two-segment curve."""

    pass


class SupplyOverrun(CalibrationError):
    """Curve-derived supply exceeds total supply beyond the leftover buffer."""

    pass


class InvalidConfiguration(BondingCurveError, ValueError):
    """Configuration parameter rejected by a validator.

    Attributes:
        field: Name of the offending parameter, when known
        value: Offending value, when known
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
