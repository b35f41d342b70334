"""Bonding-curve token launch engine: swap quotes and curve calibration."""

from bonding_curve.calibration import (
    build_curve,
    build_curve_with_custom_sqrt_prices,
    build_curve_with_liquidity_weights,
    build_curve_with_market_cap,
    build_curve_with_mid_price,
    build_curve_with_two_segments,
)
from bonding_curve.swap import (
    swap_quote,
    swap_quote_2,
    swap_quote_exact_in,
    swap_quote_exact_out,
    swap_quote_partial_fill,
)
from bonding_curve.validation import validate_config_parameters

__version__ = "0.1.0"
__all__ = [
    "build_curve",
    "build_curve_with_custom_sqrt_prices",
    "build_curve_with_liquidity_weights",
    "build_curve_with_market_cap",
    "build_curve_with_mid_price",
    "build_curve_with_two_segments",
    "swap_quote",
    "swap_quote_2",
    "swap_quote_exact_in",
    "swap_quote_exact_out",
    "swap_quote_partial_fill",
    "validate_config_parameters",
    "__version__",
]
