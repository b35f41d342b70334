"""Tests for the volume-based rate limiter fee."""

import pytest

from bonding_curve.constants import MAX_FEE_NUMERATOR
from bonding_curve.errors import DivisionByZero, InvalidState
from bonding_curve.fees.rate_limiter import (
    get_checked_amounts,
    get_fee_numerator_from_excluded_amount,
    get_fee_numerator_from_included_amount,
    get_max_index,
    get_rate_limiter_excluded_fee_amount,
    is_rate_limiter_applied,
    validate_fee_rate_limiter,
)
from bonding_curve.models.enums import ActivationType, CollectFeeMode, TradeDirection
from tests.helpers import TEST_CLIFF_FEE_NUMERATOR

REFERENCE_AMOUNT = 1_000_000_000
INCREMENT_BPS = 10


class TestMaxIndex:
    """Tests for the number of fee increments."""

    def test_increments_until_cap(self):
        """(99% - 1%) / 0.1% = 980 increments."""
        assert get_max_index(TEST_CLIFF_FEE_NUMERATOR, INCREMENT_BPS) == 980

    def test_cliff_above_max(self):
        with pytest.raises(InvalidState):
            get_max_index(MAX_FEE_NUMERATOR + 1, INCREMENT_BPS)

    def test_zero_increment(self):
        with pytest.raises(DivisionByZero):
            get_max_index(TEST_CLIFF_FEE_NUMERATOR, 0)


class TestFeeFromIncludedAmount:
    """Tests for the blended fee on a gross amount."""

    def test_first_band_pays_cliff(self):
        fee = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, REFERENCE_AMOUNT
        )
        assert fee == TEST_CLIFF_FEE_NUMERATOR

    def test_two_bands_blend(self):
        """1% on the first band and 1.1% on the second average to 1.05%."""
        fee = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, 2 * REFERENCE_AMOUNT
        )
        assert fee == 10_500_000

    def test_fee_grows_with_size(self):
        small = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, 3 * REFERENCE_AMOUNT
        )
        large = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, 30 * REFERENCE_AMOUNT
        )
        assert TEST_CLIFF_FEE_NUMERATOR < small < large

    def test_beyond_cap_stays_below_max(self):
        fee = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, 2_000 * REFERENCE_AMOUNT
        )
        assert TEST_CLIFF_FEE_NUMERATOR < fee <= MAX_FEE_NUMERATOR

    def test_zero_reference_amount(self):
        with pytest.raises(DivisionByZero):
            get_fee_numerator_from_included_amount(TEST_CLIFF_FEE_NUMERATOR, 0, INCREMENT_BPS, 10)


class TestFeeFromExcludedAmount:
    """Tests for solving the fee from a net amount."""

    def test_small_amount_pays_cliff(self):
        fee = get_fee_numerator_from_excluded_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, REFERENCE_AMOUNT // 2
        )
        assert fee == TEST_CLIFF_FEE_NUMERATOR

    def test_solved_fee_close_to_included_fee(self):
        """Grossing up the net of an included amount lands on nearly the same rate."""
        included = 5 * REFERENCE_AMOUNT + 123_456
        included_fee = get_fee_numerator_from_included_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, included
        )
        excluded = get_rate_limiter_excluded_fee_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, included
        )
        solved = get_fee_numerator_from_excluded_amount(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS, excluded
        )
        assert solved >= TEST_CLIFF_FEE_NUMERATOR
        assert abs(solved - included_fee) <= included_fee // 100

    def test_checked_amounts_within_u64(self):
        excluded, included, is_overflow = get_checked_amounts(
            TEST_CLIFF_FEE_NUMERATOR, REFERENCE_AMOUNT, INCREMENT_BPS
        )
        assert not is_overflow
        assert included == 981 * REFERENCE_AMOUNT
        assert excluded < included


class TestIsRateLimiterApplied:
    """Tests for the limiter window."""

    def test_inside_window(self):
        assert is_rate_limiter_applied(
            500, 0, TradeDirection.QUOTE_TO_BASE, 1_000, REFERENCE_AMOUNT, INCREMENT_BPS
        )

    def test_after_window(self):
        assert not is_rate_limiter_applied(
            1_001, 0, TradeDirection.QUOTE_TO_BASE, 1_000, REFERENCE_AMOUNT, INCREMENT_BPS
        )

    def test_sells_not_limited(self):
        assert not is_rate_limiter_applied(
            0, 0, TradeDirection.BASE_TO_QUOTE, 1_000, REFERENCE_AMOUNT, INCREMENT_BPS
        )

    def test_zero_limiter_never_applies(self):
        assert not is_rate_limiter_applied(0, 0, TradeDirection.QUOTE_TO_BASE, 0, 0, 0)


class TestValidateFeeRateLimiter:
    """Tests for rate limiter validation."""

    def test_valid(self):
        assert validate_fee_rate_limiter(
            TEST_CLIFF_FEE_NUMERATOR,
            INCREMENT_BPS,
            1_000,
            REFERENCE_AMOUNT,
            CollectFeeMode.QUOTE_TOKEN,
            ActivationType.SLOT,
        )

    def test_all_zero_is_valid(self):
        assert validate_fee_rate_limiter(
            TEST_CLIFF_FEE_NUMERATOR, 0, 0, 0, CollectFeeMode.QUOTE_TOKEN, ActivationType.SLOT
        )

    def test_zero_reference_with_increment_rejected(self):
        """A zero reference amount with a nonzero increment is inconsistent."""
        assert not validate_fee_rate_limiter(
            TEST_CLIFF_FEE_NUMERATOR,
            INCREMENT_BPS,
            1_000,
            0,
            CollectFeeMode.QUOTE_TOKEN,
            ActivationType.SLOT,
        )

    def test_output_token_mode_rejected(self):
        assert not validate_fee_rate_limiter(
            TEST_CLIFF_FEE_NUMERATOR,
            INCREMENT_BPS,
            1_000,
            REFERENCE_AMOUNT,
            CollectFeeMode.OUTPUT_TOKEN,
            ActivationType.SLOT,
        )

    @pytest.mark.parametrize(
        "activation_type,duration",
        [(ActivationType.SLOT, 108_001), (ActivationType.TIMESTAMP, 43_201)],
    )
    def test_window_too_long(self, activation_type, duration):
        assert not validate_fee_rate_limiter(
            TEST_CLIFF_FEE_NUMERATOR,
            INCREMENT_BPS,
            duration,
            REFERENCE_AMOUNT,
            CollectFeeMode.QUOTE_TOKEN,
            activation_type,
        )

    def test_cliff_below_floor(self):
        assert not validate_fee_rate_limiter(
            1_000_000,
            INCREMENT_BPS,
            1_000,
            REFERENCE_AMOUNT,
            CollectFeeMode.QUOTE_TOKEN,
            ActivationType.SLOT,
        )
