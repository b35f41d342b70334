"""Tests for client-facing swap quotes."""

import pytest

from bonding_curve.errors import (
    InsufficientLiquidity,
    InvalidConfiguration,
    PoolCompleted,
    ZeroAmount,
)
from bonding_curve.models.enums import SwapMode
from bonding_curve.swap.quote import (
    swap_quote,
    swap_quote_2,
    swap_quote_exact_in,
    swap_quote_exact_out,
    swap_quote_partial_fill,
)
from tests.helpers import TEST_QUOTE_CAPACITY, make_virtual_pool


class TestSwapQuote:
    """Tests for the exact-in quote."""

    def test_buy(self, fresh_pool, pool_config):
        quote = swap_quote(fresh_pool, pool_config, swap_base_for_quote=False, amount_in=1_000_000)
        assert quote.result.actual_input_amount == 990_000
        assert quote.minimum_amount_out == quote.result.output_amount

    def test_slippage_lowers_minimum_out(self, fresh_pool, pool_config):
        quote = swap_quote(
            fresh_pool, pool_config, swap_base_for_quote=False, amount_in=1_000_000,
            slippage_bps=100,
        )
        assert quote.minimum_amount_out == quote.result.output_amount * 9_900 // 10_000

    def test_referral(self, fresh_pool, pool_config):
        quote = swap_quote(
            fresh_pool, pool_config, swap_base_for_quote=False, amount_in=1_000_000,
            has_referral=True,
        )
        assert quote.result.referral_fee == 400
        assert quote.result.protocol_fee == 1_600

    def test_completed_pool(self, pool_config):
        """A pool whose quote reserve reached the threshold no longer quotes."""
        pool = make_virtual_pool(quote_reserve=pool_config.migration_quote_threshold)
        with pytest.raises(PoolCompleted):
            swap_quote(pool, pool_config, swap_base_for_quote=False, amount_in=1_000)

    def test_zero_amount(self, fresh_pool, pool_config):
        with pytest.raises(ZeroAmount):
            swap_quote(fresh_pool, pool_config, swap_base_for_quote=False, amount_in=0)

    def test_slippage_out_of_range(self, fresh_pool, pool_config):
        with pytest.raises(InvalidConfiguration) as exc_info:
            swap_quote(
                fresh_pool, pool_config, swap_base_for_quote=False, amount_in=1_000,
                slippage_bps=10_001,
            )
        assert exc_info.value.field == "slippage_bps"


class TestSwapQuoteV2:
    """Tests for the exact-in, partial-fill and exact-out quotes."""

    def test_exact_in_over_capacity_raises(self, fresh_pool, pool_config):
        with pytest.raises(InsufficientLiquidity):
            swap_quote_exact_in(
                fresh_pool, pool_config, swap_base_for_quote=False,
                amount_in=2 * TEST_QUOTE_CAPACITY,
            )

    def test_partial_fill_over_capacity(self, fresh_pool, pool_config):
        quote = swap_quote_partial_fill(
            fresh_pool, pool_config, swap_base_for_quote=False, amount_in=2 * TEST_QUOTE_CAPACITY
        )
        assert quote.result.amount_left > 0
        assert quote.minimum_amount_out == quote.result.output_amount
        assert quote.maximum_amount_in is None

    def test_exact_out_maximum_in(self, fresh_pool, pool_config):
        quote = swap_quote_exact_out(
            fresh_pool, pool_config, swap_base_for_quote=False, amount_out=1_000_000,
            slippage_bps=100,
        )
        included = quote.result.included_fee_input_amount
        assert quote.maximum_amount_in == included * 10_100 // 10_000
        assert quote.minimum_amount_out is None

    def test_exact_out_zero_amount(self, fresh_pool, pool_config):
        with pytest.raises(ZeroAmount):
            swap_quote_exact_out(fresh_pool, pool_config, swap_base_for_quote=False, amount_out=0)


class TestSwapQuote2Dispatch:
    """Tests for swap_quote_2 mode dispatch."""

    def test_exact_in(self, fresh_pool, pool_config):
        dispatched = swap_quote_2(
            fresh_pool, pool_config, False, SwapMode.EXACT_IN, amount_in=1_000_000
        )
        direct = swap_quote_exact_in(fresh_pool, pool_config, False, 1_000_000)
        assert dispatched == direct

    def test_partial_fill(self, fresh_pool, pool_config):
        dispatched = swap_quote_2(
            fresh_pool, pool_config, False, SwapMode.PARTIAL_FILL,
            amount_in=2 * TEST_QUOTE_CAPACITY,
        )
        direct = swap_quote_partial_fill(fresh_pool, pool_config, False, 2 * TEST_QUOTE_CAPACITY)
        assert dispatched == direct

    def test_exact_out_reads_amount_out(self, fresh_pool, pool_config):
        dispatched = swap_quote_2(
            fresh_pool, pool_config, False, SwapMode.EXACT_OUT,
            amount_in=999, amount_out=1_000_000,
        )
        direct = swap_quote_exact_out(fresh_pool, pool_config, False, 1_000_000)
        assert dispatched == direct

    def test_unknown_mode(self, fresh_pool, pool_config):
        with pytest.raises(InvalidConfiguration):
            swap_quote_2(fresh_pool, pool_config, False, 9, amount_in=1_000)
