"""Result types produced by the fee model and swap engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeeMode:
    """Where the trading fee is charged for one swap.

    Attributes:
        fees_on_input: Fee is taken from the input amount before the curve
            walk. Otherwise it is taken from the output.
        fees_on_base_token: Fee is denominated in the base token
        has_referral: A referral account receives part of the protocol fee
    """

    fees_on_input: bool
    fees_on_base_token: bool
    has_referral: bool


@dataclass(frozen=True)
class FeeOnAmountResult:
    """An amount with its trading fee split out."""

    amount: int
    trading_fee: int
    protocol_fee: int
    referral_fee: int


@dataclass(frozen=True)
class SwapAmount:
    """Outcome of walking the curve for one swap.

    Attributes:
        output_amount: Tokens paid out by the curve
        next_sqrt_price: Sqrt price after the swap
        amount_left: Input the curve could not absorb (partial fills only)
    """

    output_amount: int
    next_sqrt_price: int
    amount_left: int = 0


@dataclass(frozen=True)
class SwapResult:
    """Exact-in swap outcome."""

    actual_input_amount: int
    output_amount: int
    next_sqrt_price: int
    trading_fee: int
    protocol_fee: int
    referral_fee: int


@dataclass(frozen=True)
class SwapResult2:
    """Swap outcome for the exact-in, partial-fill and exact-out modes.

    Attributes:
        amount_left: Unfilled input, nonzero only for partial fills
        included_fee_input_amount: Input including the trading fee
        excluded_fee_input_amount: Input that reached the curve
    """

    amount_left: int
    included_fee_input_amount: int
    excluded_fee_input_amount: int
    output_amount: int
    next_sqrt_price: int
    trading_fee: int
    protocol_fee: int
    referral_fee: int


@dataclass(frozen=True)
class SwapQuoteResult:
    """Exact-in quote with slippage-adjusted minimum output."""

    result: SwapResult
    minimum_amount_out: int


@dataclass(frozen=True)
class SwapQuote2Result:
    """Quote with slippage bounds.

    Exact-in and partial-fill quotes set minimum_amount_out; exact-out
    quotes set maximum_amount_in. The unused bound is None.
    """

    result: SwapResult2
    minimum_amount_out: int | None = None
    maximum_amount_in: int | None = None
