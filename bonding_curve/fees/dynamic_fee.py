"""Volatility surcharge on top of the base fee."""

from __future__ import annotations

from bonding_curve.constants import DYNAMIC_FEE_ROUNDING_OFFSET, DYNAMIC_FEE_SCALING_FACTOR
from bonding_curve.models.pool import DynamicFeeConfig, VolatilityTracker


def is_dynamic_fee_enabled(dynamic_fee: DynamicFeeConfig) -> bool:
    return dynamic_fee.initialized != 0


def get_variable_fee_numerator(
    dynamic_fee: DynamicFeeConfig, volatility_tracker: VolatilityTracker
) -> int:
    """ceil((volatility_accumulator * bin_step)^2 * variable_fee_control / 1e11).

    Zero when the dynamic fee is not initialized.
    """
    if not is_dynamic_fee_enabled(dynamic_fee):
        return 0

    volatility_times_bin_step = volatility_tracker.volatility_accumulator * dynamic_fee.bin_step
    square_vfa_bin = volatility_times_bin_step * volatility_times_bin_step
    v_fee = square_vfa_bin * dynamic_fee.variable_fee_control
    return (v_fee + DYNAMIC_FEE_ROUNDING_OFFSET) // DYNAMIC_FEE_SCALING_FACTOR
