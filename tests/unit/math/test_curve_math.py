"""Tests for single-segment liquidity math."""

import pytest

from bonding_curve.constants import ONE_Q64
from bonding_curve.errors import InsufficientLiquidity, InvalidState, Underflow
from bonding_curve.math.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_liquidity,
    get_next_sqrt_price_from_input,
    get_next_sqrt_price_from_output,
)
from bonding_curve.math.safe_math import Rounding
from tests.helpers import (
    TEST_BASE_CAPACITY,
    TEST_LIQUIDITY,
    TEST_QUOTE_CAPACITY,
    TEST_SQRT_END_PRICE,
    TEST_SQRT_START_PRICE,
)


class TestDeltaAmounts:
    """Tests for base and quote deltas across a price range."""

    def test_quote_delta_exact(self):
        """Whole test segment holds exactly 1e12 quote."""
        delta = get_delta_amount_quote_unsigned(
            TEST_SQRT_START_PRICE, TEST_SQRT_END_PRICE, TEST_LIQUIDITY, Rounding.DOWN
        )
        assert delta == TEST_QUOTE_CAPACITY

    def test_base_delta_exact(self):
        """Whole test segment holds exactly 5e11 base."""
        delta = get_delta_amount_base_unsigned(
            TEST_SQRT_START_PRICE, TEST_SQRT_END_PRICE, TEST_LIQUIDITY, Rounding.DOWN
        )
        assert delta == TEST_BASE_CAPACITY

    @pytest.mark.parametrize(
        "lower,upper,liquidity",
        [
            (ONE_Q64, ONE_Q64 + 12345, 10**18),
            (ONE_Q64 // 3, ONE_Q64 * 7 // 5, 987_654_321_123_456_789),
            (4_295_048_016, ONE_Q64, ONE_Q64 * 1000 + 1),
        ],
    )
    def test_rounding_up_never_below_rounding_down(self, lower, upper, liquidity):
        """Rounding up gives at least the rounded-down amount, by at most one unit."""
        for fn in (get_delta_amount_base_unsigned, get_delta_amount_quote_unsigned):
            up = fn(lower, upper, liquidity, Rounding.UP)
            down = fn(lower, upper, liquidity, Rounding.DOWN)
            assert down <= up <= down + 1

    def test_zero_width_range(self):
        """Equal prices give no tokens."""
        assert (
            get_delta_amount_quote_unsigned(ONE_Q64, ONE_Q64, TEST_LIQUIDITY, Rounding.UP) == 0
        )
        assert (
            get_delta_amount_base_unsigned(ONE_Q64, ONE_Q64, TEST_LIQUIDITY, Rounding.UP) == 0
        )


class TestNextSqrtPriceFromInput:
    """Tests for price movement when tokens are added."""

    def test_quote_in_raises_price(self):
        """Full quote capacity moves the price to the segment end."""
        price = get_next_sqrt_price_from_input(
            TEST_SQRT_START_PRICE, TEST_LIQUIDITY, TEST_QUOTE_CAPACITY, base_for_quote=False
        )
        assert price == TEST_SQRT_END_PRICE

    def test_base_in_lowers_price(self):
        """Selling the full base capacity returns the price to the start."""
        price = get_next_sqrt_price_from_input(
            TEST_SQRT_END_PRICE, TEST_LIQUIDITY, TEST_BASE_CAPACITY, base_for_quote=True
        )
        assert price == TEST_SQRT_START_PRICE

    def test_zero_base_in_keeps_price(self):
        price = get_next_sqrt_price_from_input(
            TEST_SQRT_END_PRICE, TEST_LIQUIDITY, 0, base_for_quote=True
        )
        assert price == TEST_SQRT_END_PRICE

    @pytest.mark.parametrize("sqrt_price,liquidity", [(0, TEST_LIQUIDITY), (ONE_Q64, 0)])
    def test_zero_price_or_liquidity(self, sqrt_price, liquidity):
        """Zero price or liquidity is an invalid state."""
        with pytest.raises(InvalidState):
            get_next_sqrt_price_from_input(sqrt_price, liquidity, 100, base_for_quote=False)


ROUND_TRIP_CASES = [
    (ONE_Q64, TEST_LIQUIDITY, 12_345_678),
    (3 * ONE_Q64 // 2, 7 * 10**15 * ONE_Q64 // 3, 10**9),
    (ONE_Q64 // 1000, 10**10 * ONE_Q64, 999_999),
    (2 * ONE_Q64, TEST_LIQUIDITY, 10**11),
    (TEST_SQRT_START_PRICE + 12_345, 10**6 * ONE_Q64, 1),
]


class TestNextSqrtPriceRoundTrip:
    """Amount in, then back out through the delta formulas."""

    @pytest.mark.parametrize("sqrt_price,liquidity,amount", ROUND_TRIP_CASES)
    def test_quote_in_matches_quote_delta(self, sqrt_price, liquidity, amount):
        """Quote delta to the new price is within one unit of the amount paid."""
        next_price = get_next_sqrt_price_from_input(
            sqrt_price, liquidity, amount, base_for_quote=False
        )
        assert next_price >= sqrt_price
        delta = get_delta_amount_quote_unsigned(sqrt_price, next_price, liquidity, Rounding.UP)
        assert abs(delta - amount) <= 1

    @pytest.mark.parametrize("sqrt_price,liquidity,amount", ROUND_TRIP_CASES)
    def test_base_in_never_credits_more_than_paid(self, sqrt_price, liquidity, amount):
        """Base delta to the new price never exceeds the amount sold plus one."""
        next_price = get_next_sqrt_price_from_input(
            sqrt_price, liquidity, amount, base_for_quote=True
        )
        assert 0 < next_price <= sqrt_price
        delta = get_delta_amount_base_unsigned(next_price, sqrt_price, liquidity, Rounding.UP)
        assert delta <= amount + 1


class TestNextSqrtPriceFromOutput:
    """Tests for price movement when tokens are removed."""

    def test_base_out_raises_price(self):
        """Paying out the full base capacity reaches the segment end."""
        price = get_next_sqrt_price_from_output(
            TEST_SQRT_START_PRICE, TEST_LIQUIDITY, TEST_BASE_CAPACITY, base_for_quote=False
        )
        assert price == TEST_SQRT_END_PRICE

    def test_quote_out_lowers_price(self):
        price = get_next_sqrt_price_from_output(
            TEST_SQRT_END_PRICE, TEST_LIQUIDITY, TEST_QUOTE_CAPACITY, base_for_quote=True
        )
        assert price == TEST_SQRT_START_PRICE

    def test_base_out_beyond_reserves(self):
        """Asking for more base than L / sqrt_price raises."""
        with pytest.raises(InsufficientLiquidity):
            get_next_sqrt_price_from_output(
                TEST_SQRT_START_PRICE,
                TEST_LIQUIDITY,
                2 * TEST_BASE_CAPACITY,
                base_for_quote=False,
            )

    def test_quote_out_beyond_reserves(self):
        """Asking for more quote than the price allows underflows."""
        with pytest.raises(Underflow):
            get_next_sqrt_price_from_output(
                TEST_SQRT_START_PRICE,
                TEST_LIQUIDITY,
                3 * TEST_QUOTE_CAPACITY,
                base_for_quote=True,
            )

    def test_zero_liquidity(self):
        with pytest.raises(InvalidState):
            get_next_sqrt_price_from_output(ONE_Q64, 0, 1, base_for_quote=True)


class TestInitialLiquidity:
    """Tests for liquidity derived from token amounts."""

    def test_from_delta_quote(self):
        liquidity = get_initial_liquidity_from_delta_quote(
            TEST_QUOTE_CAPACITY, TEST_SQRT_START_PRICE, TEST_SQRT_END_PRICE
        )
        assert liquidity == TEST_LIQUIDITY

    def test_from_delta_base(self):
        liquidity = get_initial_liquidity_from_delta_base(
            TEST_BASE_CAPACITY, TEST_SQRT_END_PRICE, TEST_SQRT_START_PRICE
        )
        assert liquidity == TEST_LIQUIDITY

    def test_get_liquidity_takes_minimum(self):
        """Doubling one side does not raise the liquidity."""
        liquidity = get_liquidity(
            2 * TEST_BASE_CAPACITY,
            TEST_QUOTE_CAPACITY,
            TEST_SQRT_START_PRICE,
            TEST_SQRT_END_PRICE,
        )
        assert liquidity == TEST_LIQUIDITY
