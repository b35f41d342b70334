"""Swap engine: curve walks, fee application and client quotes.

Usage:
    from bonding_curve.swap import swap_quote_exact_in

    quote = swap_quote_exact_in(pool, config, swap_base_for_quote=False,
                                amount_in=1_000_000_000, slippage_bps=100)
    print(quote.result.output_amount, quote.minimum_amount_out)
"""

from bonding_curve.swap.curve_walk import (
    calculate_base_to_quote_from_amount_in,
    calculate_base_to_quote_from_amount_out,
    calculate_quote_to_base_from_amount_in,
    calculate_quote_to_base_from_amount_out,
)
from bonding_curve.swap.engine import (
    get_swap_result,
    get_swap_result_from_exact_input,
    get_swap_result_from_exact_output,
    get_swap_result_from_partial_input,
)
from bonding_curve.swap.quote import (
    swap_quote,
    swap_quote_2,
    swap_quote_exact_in,
    swap_quote_exact_out,
    swap_quote_partial_fill,
)

__all__ = [
    # Curve walks
    "calculate_base_to_quote_from_amount_in",
    "calculate_base_to_quote_from_amount_out",
    "calculate_quote_to_base_from_amount_in",
    "calculate_quote_to_base_from_amount_out",
    # Engine
    "get_swap_result",
    "get_swap_result_from_exact_input",
    "get_swap_result_from_exact_output",
    "get_swap_result_from_partial_input",
    # Quotes
    "swap_quote",
    "swap_quote_2",
    "swap_quote_exact_in",
    "swap_quote_exact_out",
    "swap_quote_partial_fill",
]
