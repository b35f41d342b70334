"""Business-level inputs for curve calibration.

Amounts here are whole tokens (not base units) unless a field says
otherwise. Each strategy model extends BuildCurveBaseParams with the targets
it calibrates against.
"""

from pydantic import BaseModel, Field

from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
)
from bonding_curve.models.types import U8, U16, U32, U64


class FeeSchedulerParams(BaseModel):
    """Fee that decays from starting_fee_bps to ending_fee_bps over time."""

    starting_fee_bps: U16 = Field(alias="startingFeeBps")
    ending_fee_bps: U16 = Field(alias="endingFeeBps")
    number_of_period: U64 = Field(default=0, alias="numberOfPeriod")
    total_duration: U64 = Field(default=0, alias="totalDuration")

    model_config = {"populate_by_name": True}


class RateLimiterParams(BaseModel):
    """Fee that steps up with trade size inside the limiter window."""

    base_fee_bps: U16 = Field(alias="baseFeeBps")
    fee_increment_bps: U16 = Field(alias="feeIncrementBps")
    reference_amount: U64 = Field(alias="referenceAmount")
    max_limiter_duration: U64 = Field(alias="maxLimiterDuration")

    model_config = {"populate_by_name": True}


class BaseFeeParams(BaseModel):
    """Base fee strategy choice plus the parameters for that strategy."""

    base_fee_mode: BaseFeeMode = Field(alias="baseFeeMode")
    fee_scheduler_param: FeeSchedulerParams | None = Field(default=None, alias="feeSchedulerParam")
    rate_limiter_param: RateLimiterParams | None = Field(default=None, alias="rateLimiterParam")

    model_config = {"populate_by_name": True}


class LockedVestingParams(BaseModel):
    """Creator vesting, in whole tokens and seconds (or slots)."""

    total_locked_vesting_amount: U64 = Field(default=0, alias="totalLockedVestingAmount")
    number_of_vesting_period: U64 = Field(default=0, alias="numberOfVestingPeriod")
    cliff_unlock_amount: U64 = Field(default=0, alias="cliffUnlockAmount")
    total_vesting_duration: U64 = Field(default=0, alias="totalVestingDuration")
    cliff_duration_from_migration_time: U64 = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )

    model_config = {"populate_by_name": True}


class LiquidityVestingInfoParams(BaseModel):
    """LP vesting request; frequency is derived from total_duration."""

    vesting_percentage: U8 = Field(default=0, alias="vestingPercentage")
    bps_per_period: U16 = Field(default=0, alias="bpsPerPeriod")
    number_of_periods: U16 = Field(default=0, alias="numberOfPeriods")
    cliff_duration_from_migration_time: U32 = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )
    total_duration: U64 = Field(default=0, alias="totalDuration")

    model_config = {"populate_by_name": True}


class MigrationFeeParams(BaseModel):
    fee_percentage: U8 = Field(default=0, alias="feePercentage")
    creator_fee_percentage: U8 = Field(default=0, alias="creatorFeePercentage")

    model_config = {"populate_by_name": True}


class MigratedPoolFeeParams(BaseModel):
    collect_fee_mode: CollectFeeMode = Field(alias="collectFeeMode")
    dynamic_fee: DammV2DynamicFeeMode = Field(alias="dynamicFee")
    pool_fee_bps: U16 = Field(alias="poolFeeBps")

    model_config = {"populate_by_name": True}


class MigratedPoolMarketCapFeeSchedulerParams(BaseModel):
    """Market-cap fee schedule request for the migrated pool."""

    ending_base_fee_bps: U16 = Field(default=0, alias="endingBaseFeeBps")
    number_of_period: U16 = Field(default=0, alias="numberOfPeriod")
    sqrt_price_step_bps: U32 = Field(default=0, alias="sqrtPriceStepBps")
    scheduler_expiration_duration: U32 = Field(default=0, alias="schedulerExpirationDuration")

    model_config = {"populate_by_name": True}


class BuildCurveBaseParams(BaseModel):
    """Inputs shared by every calibration strategy."""

    total_token_supply: U64 = Field(alias="totalTokenSupply")
    token_type: TokenType = Field(default=TokenType.SPL, alias="tokenType")
    token_base_decimal: TokenDecimal = Field(alias="tokenBaseDecimal")
    token_quote_decimal: TokenDecimal = Field(alias="tokenQuoteDecimal")
    token_update_authority: U8 = Field(
        default=TokenUpdateAuthorityOption.IMMUTABLE, alias="tokenUpdateAuthority"
    )
    locked_vesting_params: LockedVestingParams = Field(
        default_factory=LockedVestingParams, alias="lockedVestingParams"
    )
    leftover: U64 = 0
    base_fee_params: BaseFeeParams = Field(alias="baseFeeParams")
    dynamic_fee_enabled: bool = Field(default=False, alias="dynamicFeeEnabled")
    activation_type: ActivationType = Field(default=ActivationType.SLOT, alias="activationType")
    collect_fee_mode: CollectFeeMode = Field(
        default=CollectFeeMode.QUOTE_TOKEN, alias="collectFeeMode"
    )
    creator_trading_fee_percentage: U8 = Field(default=0, alias="creatorTradingFeePercentage")
    pool_creation_fee: U64 = Field(default=0, alias="poolCreationFee")
    migration_option: MigrationOption = Field(
        default=MigrationOption.MET_DAMM_V2, alias="migrationOption"
    )
    migration_fee_option: MigrationFeeOption = Field(
        default=MigrationFeeOption.FIXED_BPS_25, alias="migrationFeeOption"
    )
    migration_fee: MigrationFeeParams = Field(
        default_factory=MigrationFeeParams, alias="migrationFee"
    )
    partner_permanent_locked_liquidity_percentage: U8 = Field(
        default=0, alias="partnerPermanentLockedLiquidityPercentage"
    )
    partner_liquidity_percentage: U8 = Field(default=0, alias="partnerLiquidityPercentage")
    creator_permanent_locked_liquidity_percentage: U8 = Field(
        default=0, alias="creatorPermanentLockedLiquidityPercentage"
    )
    creator_liquidity_percentage: U8 = Field(default=0, alias="creatorLiquidityPercentage")
    enable_first_swap_with_min_fee: bool = Field(default=False, alias="enableFirstSwapWithMinFee")
    partner_liquidity_vesting_info_params: LiquidityVestingInfoParams | None = Field(
        default=None, alias="partnerLiquidityVestingInfoParams"
    )
    creator_liquidity_vesting_info_params: LiquidityVestingInfoParams | None = Field(
        default=None, alias="creatorLiquidityVestingInfoParams"
    )
    migrated_pool_fee: MigratedPoolFeeParams | None = Field(default=None, alias="migratedPoolFee")
    migrated_pool_base_fee_mode: DammV2BaseFeeMode | None = Field(
        default=None, alias="migratedPoolBaseFeeMode"
    )
    migrated_pool_market_cap_fee_scheduler_params: MigratedPoolMarketCapFeeSchedulerParams | None = (
        Field(default=None, alias="migratedPoolMarketCapFeeSchedulerParams")
    )

    model_config = {"populate_by_name": True}


class BuildCurveParams(BuildCurveBaseParams):
    """Single segment from a supply percentage and a quote threshold."""

    percentage_supply_on_migration: float = Field(alias="percentageSupplyOnMigration")
    migration_quote_threshold: float = Field(alias="migrationQuoteThreshold")


class BuildCurveWithMarketCapParams(BuildCurveBaseParams):
    """Single segment between two market caps."""

    initial_market_cap: float = Field(alias="initialMarketCap")
    migration_market_cap: float = Field(alias="migrationMarketCap")


class BuildCurveWithTwoSegmentsParams(BuildCurveBaseParams):
    """Two segments between two market caps with a solved midpoint."""

    initial_market_cap: float = Field(alias="initialMarketCap")
    migration_market_cap: float = Field(alias="migrationMarketCap")
    percentage_supply_on_migration: float = Field(alias="percentageSupplyOnMigration")


class BuildCurveWithMidPriceParams(BuildCurveBaseParams):
    """Two segments split at a caller-chosen price."""

    initial_market_cap: float = Field(alias="initialMarketCap")
    migration_market_cap: float = Field(alias="migrationMarketCap")
    mid_price: U64 = Field(alias="midPrice")
    percentage_supply_on_migration: U64 = Field(alias="percentageSupplyOnMigration")


class BuildCurveWithLiquidityWeightsParams(BuildCurveBaseParams):
    """Sixteen geometric bands with relative liquidity weights."""

    initial_market_cap: float = Field(alias="initialMarketCap")
    migration_market_cap: float = Field(alias="migrationMarketCap")
    liquidity_weights: list[float] = Field(alias="liquidityWeights")


class BuildCurveWithCustomSqrtPricesParams(BuildCurveBaseParams):
    """Caller-supplied band boundaries (Q64.64 sqrt prices)."""

    sqrt_prices: list[int] = Field(alias="sqrtPrices")
    liquidity_weights: list[int] | None = Field(default=None, alias="liquidityWeights")
