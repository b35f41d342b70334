"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- factories: pool, config and calibration input factories plus the test
  curve constants they build on
"""

from tests.helpers.factories import (
    LEFTOVER_RECEIVER,
    TEST_BASE_CAPACITY,
    TEST_CLIFF_FEE_NUMERATOR,
    TEST_LIQUIDITY,
    TEST_QUOTE_CAPACITY,
    TEST_SQRT_END_PRICE,
    TEST_SQRT_START_PRICE,
    make_base_fee_config,
    make_build_curve_params,
    make_config_parameters,
    make_curve,
    make_pool_config,
    make_rate_limiter_fee_config,
    make_virtual_pool,
)

__all__ = [
    # Constants
    "LEFTOVER_RECEIVER",
    "TEST_BASE_CAPACITY",
    "TEST_CLIFF_FEE_NUMERATOR",
    "TEST_LIQUIDITY",
    "TEST_QUOTE_CAPACITY",
    "TEST_SQRT_END_PRICE",
    "TEST_SQRT_START_PRICE",
    # Factories
    "make_base_fee_config",
    "make_build_curve_params",
    "make_config_parameters",
    "make_curve",
    "make_pool_config",
    "make_rate_limiter_fee_config",
    "make_virtual_pool",
]
