"""Tests for the time-based fee scheduler."""

import pytest

from bonding_curve.constants import MAX_FEE_NUMERATOR
from bonding_curve.errors import InvalidFeeMode, Underflow
from bonding_curve.fees.fee_scheduler import (
    get_base_fee_numerator,
    get_base_fee_numerator_by_period,
    get_fee_scheduler_max_base_fee_numerator,
    get_fee_scheduler_min_base_fee_numerator,
    validate_fee_scheduler,
)
from bonding_curve.models.enums import BaseFeeMode

CLIFF = 100_000_000  # 10%


class TestLinearScheduler:
    """Tests for linear decay."""

    def test_steps_down_per_period(self):
        """Each period subtracts the reduction factor."""
        fee = get_base_fee_numerator_by_period(
            CLIFF, 10, 3, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )
        assert fee == 85_000_000

    def test_period_capped_at_number_of_period(self):
        """Periods beyond number_of_period do not reduce the fee further."""
        capped = get_base_fee_numerator_by_period(
            CLIFF, 10, 20, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )
        assert capped == 50_000_000
        assert capped == get_fee_scheduler_min_base_fee_numerator(
            CLIFF, 10, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )

    def test_over_reduction_underflows(self):
        with pytest.raises(Underflow):
            get_base_fee_numerator_by_period(
                CLIFF, 10, 10, 20_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
            )

    def test_max_is_cliff(self):
        assert get_fee_scheduler_max_base_fee_numerator(CLIFF) == CLIFF


class TestExponentialScheduler:
    """Tests for exponential decay."""

    def test_period_zero_is_cliff(self):
        fee = get_base_fee_numerator_by_period(
            CLIFF, 10, 0, 5_000, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL
        )
        assert fee == CLIFF

    def test_halving(self):
        """A 50% reduction factor halves the fee each period."""
        one = get_base_fee_numerator_by_period(
            CLIFF, 10, 1, 5_000, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL
        )
        two = get_base_fee_numerator_by_period(
            CLIFF, 10, 2, 5_000, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL
        )
        assert one == CLIFF // 2
        assert two == CLIFF // 4

    def test_monotonically_decreasing(self):
        fees = [
            get_base_fee_numerator_by_period(
                CLIFF, 100, period, 250, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL
            )
            for period in range(0, 100, 10)
        ]
        assert fees == sorted(fees, reverse=True)


class TestGetBaseFeeNumerator:
    """Tests for point-based period lookup."""

    def test_zero_frequency_is_flat(self):
        fee = get_base_fee_numerator(
            CLIFF, 10, 0, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR, 1_000, 0
        )
        assert fee == CLIFF

    def test_before_activation_is_period_zero(self):
        fee = get_base_fee_numerator(
            CLIFF, 10, 100, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR, 50, 500
        )
        assert fee == CLIFF

    def test_elapsed_periods(self):
        """250 points at a frequency of 100 is two full periods."""
        fee = get_base_fee_numerator(
            CLIFF, 10, 100, 5_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR, 250, 0
        )
        assert fee == 90_000_000

    def test_rate_limiter_mode_rejected(self):
        with pytest.raises(InvalidFeeMode):
            get_base_fee_numerator_by_period(CLIFF, 10, 1, 1, BaseFeeMode.RATE_LIMITER)


class TestValidateFeeScheduler:
    """Tests for scheduler validation."""

    def test_flat_fee_valid(self):
        assert validate_fee_scheduler(0, 0, 0, 10_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR)

    def test_decaying_fee_valid(self):
        assert validate_fee_scheduler(10, 100, 5_000_000, CLIFF, BaseFeeMode.FEE_SCHEDULER_LINEAR)

    @pytest.mark.parametrize(
        "number_of_period,period_frequency,reduction_factor",
        [(10, 0, 0), (0, 100, 0), (0, 0, 5), (10, 100, 0)],
    )
    def test_partially_set_rejected(self, number_of_period, period_frequency, reduction_factor):
        """Scheduler factors are all zero or all nonzero."""
        assert not validate_fee_scheduler(
            number_of_period,
            period_frequency,
            reduction_factor,
            CLIFF,
            BaseFeeMode.FEE_SCHEDULER_LINEAR,
        )

    def test_min_fee_below_floor(self):
        """Decaying to zero falls below the minimum fee."""
        assert not validate_fee_scheduler(
            10, 100, 1_000_000, 10_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )

    def test_underflow_rejected(self):
        assert not validate_fee_scheduler(
            10, 100, 2_000_000, 10_000_000, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )

    def test_cliff_above_ceiling(self):
        assert not validate_fee_scheduler(
            0, 0, 0, MAX_FEE_NUMERATOR + 1, BaseFeeMode.FEE_SCHEDULER_LINEAR
        )
