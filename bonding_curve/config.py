"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for the decimal and iterative parts of the engine.

    The integer swap path has no tunables; these only affect calibration
    arithmetic and logging.

    Attributes:
        decimal_precision: Significant digits for Decimal arithmetic (78 covers
            2^256)
        sqrt_max_iterations: Cap on Newton iterations for integer square roots
        significant_digits: Rounding applied to the scaled quote threshold in
            the two-segment solve
        scalar_significant_digits: Rounding applied to the liquidity scalar of
            the weighted solves
        price_decimal_places: Places kept when converting a price to sqrt price
        weight_decimal_places: Places kept for per-band liquidity factors
        two_curve_reciprocal_places: Places kept for reciprocal prices in the
            two-segment solve
        log_level: Minimum level used by configure_logging()
    """

    decimal_precision: int = 78
    sqrt_max_iterations: int = 255
    significant_digits: int = 20
    scalar_significant_digits: int = 36
    price_decimal_places: int = 25
    weight_decimal_places: int = 37
    two_curve_reciprocal_places: int = 38
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config whose log level comes from BONDING_CURVE_LOG_LEVEL.

        Arithmetic settings keep their defaults; the engine reads them from
        DEFAULT_ENGINE_CONFIG at import time.
        """
        defaults = cls()
        return cls(
            log_level=os.environ.get("BONDING_CURVE_LOG_LEVEL", defaults.log_level).upper(),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
