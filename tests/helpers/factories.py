"""Factory functions for creating test objects.

Usage:
    from tests.helpers import make_pool_config, make_virtual_pool
    # or
    from tests.helpers.factories import make_build_curve_params

    config = make_pool_config(cliff_fee_numerator=10_000_000)
    pool = make_virtual_pool(sqrt_price=config.sqrt_start_price)
"""

from bonding_curve.constants import ONE_Q64
from bonding_curve.models import (
    BaseFeeConfig,
    BaseFeeParams,
    BaseFeeParameters,
    BuildCurveParams,
    ConfigParameters,
    CurveSegment,
    DynamicFeeConfig,
    FeeSchedulerParams,
    LockedVestingParameters,
    MigrationFee,
    PoolConfig,
    PoolFeeParameters,
    PoolFeesConfig,
    VirtualPool,
    VolatilityTracker,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
)

# Single-segment test curve: sqrt price 1.0 -> 2.0 with L = 1e12 in Q64.64.
# Buying the whole segment costs 1e12 quote and pays out 5e11 base.
TEST_SQRT_START_PRICE = ONE_Q64
TEST_SQRT_END_PRICE = 2 * ONE_Q64
TEST_LIQUIDITY = 10**12 * ONE_Q64
TEST_QUOTE_CAPACITY = 10**12
TEST_BASE_CAPACITY = 5 * 10**11

# 1% fee
TEST_CLIFF_FEE_NUMERATOR = 10_000_000

LEFTOVER_RECEIVER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def make_curve(
    segments: list[tuple[int, int]] | None = None,
) -> list[CurveSegment]:
    """Create a curve from (sqrt_price, liquidity) pairs.

    Defaults to the single test segment ending at TEST_SQRT_END_PRICE.
    """
    if segments is None:
        segments = [(TEST_SQRT_END_PRICE, TEST_LIQUIDITY)]
    return [CurveSegment(sqrt_price=price, liquidity=liquidity) for price, liquidity in segments]


def make_base_fee_config(
    cliff_fee_numerator: int = TEST_CLIFF_FEE_NUMERATOR,
    first_factor: int = 0,
    second_factor: int = 0,
    third_factor: int = 0,
    base_fee_mode: BaseFeeMode | int = BaseFeeMode.FEE_SCHEDULER_LINEAR,
) -> BaseFeeConfig:
    """Create a raw base fee; defaults to a flat 1% scheduler."""
    return BaseFeeConfig(
        cliff_fee_numerator=cliff_fee_numerator,
        first_factor=first_factor,
        second_factor=second_factor,
        third_factor=third_factor,
        base_fee_mode=base_fee_mode,
    )


def make_rate_limiter_fee_config(
    cliff_fee_numerator: int = TEST_CLIFF_FEE_NUMERATOR,
    fee_increment_bps: int = 10,
    max_limiter_duration: int = 1_000,
    reference_amount: int = 1_000_000_000,
) -> BaseFeeConfig:
    """Create a raw rate limiter base fee."""
    return make_base_fee_config(
        cliff_fee_numerator=cliff_fee_numerator,
        first_factor=fee_increment_bps,
        second_factor=max_limiter_duration,
        third_factor=reference_amount,
        base_fee_mode=BaseFeeMode.RATE_LIMITER,
    )


def make_pool_config(
    base_fee: BaseFeeConfig | None = None,
    dynamic_fee: DynamicFeeConfig | None = None,
    curve: list[CurveSegment] | None = None,
    sqrt_start_price: int = TEST_SQRT_START_PRICE,
    migration_sqrt_price: int = TEST_SQRT_END_PRICE,
    migration_quote_threshold: int = TEST_QUOTE_CAPACITY,
    collect_fee_mode: CollectFeeMode | int = CollectFeeMode.QUOTE_TOKEN,
) -> PoolConfig:
    """Create a pool config over the test curve.

    Args:
        base_fee: Raw base fee (default: flat 1%)
        dynamic_fee: Dynamic fee (default: disabled)
        curve: Curve segments (default: single test segment)
        sqrt_start_price: Curve start (default: 1.0 in Q64.64)
        migration_sqrt_price: Price where the pool migrates (default: curve end)
        migration_quote_threshold: Quote reserve that completes the pool
        collect_fee_mode: QUOTE_TOKEN or OUTPUT_TOKEN

    Returns:
        PoolConfig instance ready for testing
    """
    return PoolConfig(
        pool_fees=PoolFeesConfig(
            base_fee=base_fee or make_base_fee_config(),
            dynamic_fee=dynamic_fee or DynamicFeeConfig(),
        ),
        collect_fee_mode=collect_fee_mode,
        migration_quote_threshold=migration_quote_threshold,
        migration_sqrt_price=migration_sqrt_price,
        sqrt_start_price=sqrt_start_price,
        curve=curve if curve is not None else make_curve(),
    )


def make_virtual_pool(
    sqrt_price: int = TEST_SQRT_START_PRICE,
    quote_reserve: int = 0,
    base_reserve: int = 0,
    activation_point: int = 0,
    volatility_accumulator: int = 0,
) -> VirtualPool:
    """Create a pool snapshot, by default fresh at the curve start."""
    return VirtualPool(
        sqrt_price=sqrt_price,
        quote_reserve=quote_reserve,
        base_reserve=base_reserve,
        activation_point=activation_point,
        volatility_tracker=VolatilityTracker(volatility_accumulator=volatility_accumulator),
    )


def make_build_curve_params(**overrides) -> BuildCurveParams:
    """Create single-segment build params for a 1B supply, 6/9 decimal token.

    Any field can be overridden by keyword.
    """
    fields = {
        "total_token_supply": 1_000_000_000,
        "token_base_decimal": TokenDecimal.SIX,
        "token_quote_decimal": TokenDecimal.NINE,
        "percentage_supply_on_migration": 2.983257229832572,
        "migration_quote_threshold": 95.07640791476408,
        "base_fee_params": BaseFeeParams(
            base_fee_mode=BaseFeeMode.FEE_SCHEDULER_LINEAR,
            fee_scheduler_param=FeeSchedulerParams(
                starting_fee_bps=100,
                ending_fee_bps=100,
                number_of_period=0,
                total_duration=0,
            ),
        ),
        "partner_permanent_locked_liquidity_percentage": 100,
    }
    fields.update(overrides)
    return BuildCurveParams(**fields)


def make_config_parameters(**overrides) -> ConfigParameters:
    """Create config parameters that pass validation.

    Uses the single test segment with a threshold of half its quote
    capacity, a flat 1% fee and all LP permanently locked by the partner.
    """
    fields = {
        "pool_fees": PoolFeeParameters(
            base_fee=BaseFeeParameters(cliff_fee_numerator=TEST_CLIFF_FEE_NUMERATOR)
        ),
        "collect_fee_mode": CollectFeeMode.QUOTE_TOKEN,
        "migration_option": MigrationOption.MET_DAMM_V2,
        "activation_type": ActivationType.SLOT,
        "token_type": TokenType.SPL,
        "token_decimal": TokenDecimal.SIX,
        "partner_permanent_locked_liquidity_percentage": 100,
        "migration_quote_threshold": TEST_QUOTE_CAPACITY // 2,
        "sqrt_start_price": TEST_SQRT_START_PRICE,
        "locked_vesting": LockedVestingParameters(),
        "migration_fee_option": MigrationFeeOption.FIXED_BPS_25,
        "token_update_authority": TokenUpdateAuthorityOption.IMMUTABLE,
        "migration_fee": MigrationFee(),
        "curve": make_curve(),
    }
    fields.update(overrides)
    return ConfigParameters(**fields)
