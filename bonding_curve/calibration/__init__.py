"""Curve calibration: from business targets to pool config parameters.

This module provides:
- Six curve-building strategies
- Parameter derivation for fees, vesting and the migrated pool
- Shared price, migration and supply-accounting helpers

Usage:
    from bonding_curve.calibration import build_curve_with_market_cap
    from bonding_curve.models import BuildCurveWithMarketCapParams

    config = build_curve_with_market_cap(BuildCurveWithMarketCapParams(...))
    print(config.sqrt_start_price, config.curve)
"""

from bonding_curve.calibration.build import (
    build_curve,
    build_curve_with_custom_sqrt_prices,
    build_curve_with_liquidity_weights,
    build_curve_with_market_cap,
    build_curve_with_mid_price,
    build_curve_with_two_segments,
    get_first_curve,
    get_mid_sqrt_price_candidates,
    get_two_curve,
)
from bonding_curve.calibration.common import (
    calculate_adjusted_percentage_supply_on_migration,
    calculate_locked_liquidity_bps_at_time,
    create_sqrt_prices,
    get_base_token_for_swap,
    get_migration_base_token,
    get_migration_quote_amount,
    get_migration_quote_amount_from_migration_quote_threshold,
    get_migration_quote_threshold_from_migration_quote_amount,
    get_migration_threshold_price,
    get_percentage_supply_on_migration,
    get_sqrt_price_from_market_cap,
    get_sqrt_price_from_price,
    get_swap_amount_with_buffer,
    get_total_supply_from_curve,
    get_total_token_supply,
    get_total_vesting_amount,
    get_vesting_locked_liquidity_bps_at_n_seconds,
)
from bonding_curve.calibration.params import (
    build_migrated_pool_market_cap_fee_scheduler_params,
    get_base_fee_bps_for_dynamic_fee,
    get_base_fee_params,
    get_dynamic_fee_params,
    get_fee_scheduler_params,
    get_liquidity_vesting_info_from_params,
    get_liquidity_vesting_info_params,
    get_locked_vesting_params,
    get_migrated_pool_fee_params,
    get_migrated_pool_market_cap_fee_scheduler_params,
    get_rate_limiter_params,
    get_starting_base_fee_bps,
)

__all__ = [
    # Strategies
    "build_curve",
    "build_curve_with_custom_sqrt_prices",
    "build_curve_with_liquidity_weights",
    "build_curve_with_market_cap",
    "build_curve_with_mid_price",
    "build_curve_with_two_segments",
    "get_first_curve",
    "get_mid_sqrt_price_candidates",
    "get_two_curve",
    # Prices
    "create_sqrt_prices",
    "get_sqrt_price_from_market_cap",
    "get_sqrt_price_from_price",
    # Migration amounts
    "get_migration_base_token",
    "get_migration_quote_amount",
    "get_migration_quote_amount_from_migration_quote_threshold",
    "get_migration_quote_threshold_from_migration_quote_amount",
    "get_migration_threshold_price",
    # Supply accounting
    "calculate_adjusted_percentage_supply_on_migration",
    "get_base_token_for_swap",
    "get_percentage_supply_on_migration",
    "get_swap_amount_with_buffer",
    "get_total_supply_from_curve",
    "get_total_token_supply",
    "get_total_vesting_amount",
    # Locked liquidity
    "calculate_locked_liquidity_bps_at_time",
    "get_vesting_locked_liquidity_bps_at_n_seconds",
    # Parameter derivation
    "build_migrated_pool_market_cap_fee_scheduler_params",
    "get_base_fee_bps_for_dynamic_fee",
    "get_base_fee_params",
    "get_dynamic_fee_params",
    "get_fee_scheduler_params",
    "get_liquidity_vesting_info_from_params",
    "get_liquidity_vesting_info_params",
    "get_locked_vesting_params",
    "get_migrated_pool_fee_params",
    "get_migrated_pool_market_cap_fee_scheduler_params",
    "get_rate_limiter_params",
    "get_starting_base_fee_bps",
]
