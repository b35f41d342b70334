"""Config creation parameters produced by curve calibration.

ConfigParameters is what the instruction builder submits to create a pool
config. Enum-valued fields are kept as raw bytes so the validator can reject
values the program would reject.
"""

from pydantic import BaseModel, Field

from bonding_curve.models.pool import CurveSegment
from bonding_curve.models.types import U8, U16, U32, U64, U128


class BaseFeeParameters(BaseModel):
    """Base fee as (cliff, first, second, third, mode)."""

    cliff_fee_numerator: U64 = Field(alias="cliffFeeNumerator")
    first_factor: U16 = Field(default=0, alias="firstFactor")
    second_factor: U64 = Field(default=0, alias="secondFactor")
    third_factor: U64 = Field(default=0, alias="thirdFactor")
    base_fee_mode: U8 = Field(default=0, alias="baseFeeMode")

    model_config = {"populate_by_name": True}


class DynamicFeeParameters(BaseModel):
    """Dynamic fee parameters submitted with a config."""

    bin_step: U16 = Field(alias="binStep")
    bin_step_u128: U128 = Field(alias="binStepU128")
    filter_period: U16 = Field(alias="filterPeriod")
    decay_period: U16 = Field(alias="decayPeriod")
    reduction_factor: U16 = Field(alias="reductionFactor")
    max_volatility_accumulator: U32 = Field(alias="maxVolatilityAccumulator")
    variable_fee_control: U32 = Field(alias="variableFeeControl")

    model_config = {"populate_by_name": True}


class PoolFeeParameters(BaseModel):
    """Base fee plus optional dynamic fee."""

    base_fee: BaseFeeParameters = Field(alias="baseFee")
    dynamic_fee: DynamicFeeParameters | None = Field(default=None, alias="dynamicFee")

    model_config = {"populate_by_name": True}


class LockedVestingParameters(BaseModel):
    """Creator token vesting released after migration."""

    amount_per_period: U64 = Field(default=0, alias="amountPerPeriod")
    cliff_duration_from_migration_time: U64 = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )
    frequency: U64 = 0
    number_of_period: U64 = Field(default=0, alias="numberOfPeriod")
    cliff_unlock_amount: U64 = Field(default=0, alias="cliffUnlockAmount")

    model_config = {"populate_by_name": True}

    @property
    def is_default(self) -> bool:
        """True when no vesting is configured."""
        return (
            self.amount_per_period == 0
            and self.cliff_duration_from_migration_time == 0
            and self.frequency == 0
            and self.number_of_period == 0
            and self.cliff_unlock_amount == 0
        )

    @property
    def total_amount(self) -> int:
        return self.cliff_unlock_amount + self.amount_per_period * self.number_of_period


class TokenSupplyParams(BaseModel):
    """Fixed token supply before and after migration."""

    pre_migration_token_supply: U64 = Field(alias="preMigrationTokenSupply")
    post_migration_token_supply: U64 = Field(alias="postMigrationTokenSupply")

    model_config = {"populate_by_name": True}


class MigrationFee(BaseModel):
    """Share of the migration quote amount taken as a fee."""

    fee_percentage: U8 = Field(default=0, alias="feePercentage")
    creator_fee_percentage: U8 = Field(default=0, alias="creatorFeePercentage")

    model_config = {"populate_by_name": True}


class MigratedPoolFee(BaseModel):
    """Fee settings of the pool created at migration (DAMM v2 only)."""

    collect_fee_mode: U8 = Field(default=0, alias="collectFeeMode")
    dynamic_fee: U8 = Field(default=0, alias="dynamicFee")
    pool_fee_bps: U16 = Field(default=0, alias="poolFeeBps")

    model_config = {"populate_by_name": True}

    @property
    def is_empty(self) -> bool:
        return self.collect_fee_mode == 0 and self.dynamic_fee == 0 and self.pool_fee_bps == 0


class LiquidityVestingInfoParameters(BaseModel):
    """Vesting schedule for LP liquidity handed out at migration."""

    vesting_percentage: U8 = Field(default=0, alias="vestingPercentage")
    bps_per_period: U16 = Field(default=0, alias="bpsPerPeriod")
    number_of_periods: U16 = Field(default=0, alias="numberOfPeriods")
    cliff_duration_from_migration_time: U32 = Field(
        default=0, alias="cliffDurationFromMigrationTime"
    )
    frequency: U32 = 0

    model_config = {"populate_by_name": True}

    @property
    def is_zero(self) -> bool:
        return (
            self.vesting_percentage == 0
            and self.bps_per_period == 0
            and self.number_of_periods == 0
            and self.cliff_duration_from_migration_time == 0
            and self.frequency == 0
        )


class MigratedPoolMarketCapFeeSchedulerParameters(BaseModel):
    """Market-cap driven fee schedule for the migrated pool."""

    number_of_period: U16 = Field(default=0, alias="numberOfPeriod")
    sqrt_price_step_bps: U32 = Field(default=0, alias="sqrtPriceStepBps")
    scheduler_expiration_duration: U32 = Field(default=0, alias="schedulerExpirationDuration")
    reduction_factor: U64 = Field(default=0, alias="reductionFactor")

    model_config = {"populate_by_name": True}

    @property
    def is_fixed_fee(self) -> bool:
        return (
            self.number_of_period == 0
            and self.sqrt_price_step_bps == 0
            and self.scheduler_expiration_duration == 0
            and self.reduction_factor == 0
        )


class ConfigParameters(BaseModel):
    """Full parameter set for creating a pool config."""

    pool_fees: PoolFeeParameters = Field(alias="poolFees")
    collect_fee_mode: U8 = Field(default=0, alias="collectFeeMode")
    migration_option: U8 = Field(default=0, alias="migrationOption")
    activation_type: U8 = Field(default=0, alias="activationType")
    token_type: U8 = Field(default=0, alias="tokenType")
    token_decimal: U8 = Field(alias="tokenDecimal")
    partner_liquidity_percentage: U8 = Field(default=0, alias="partnerLiquidityPercentage")
    partner_permanent_locked_liquidity_percentage: U8 = Field(
        default=0, alias="partnerPermanentLockedLiquidityPercentage"
    )
    creator_liquidity_percentage: U8 = Field(default=0, alias="creatorLiquidityPercentage")
    creator_permanent_locked_liquidity_percentage: U8 = Field(
        default=0, alias="creatorPermanentLockedLiquidityPercentage"
    )
    migration_quote_threshold: U64 = Field(alias="migrationQuoteThreshold")
    sqrt_start_price: U128 = Field(alias="sqrtStartPrice")
    locked_vesting: LockedVestingParameters = Field(
        default_factory=LockedVestingParameters, alias="lockedVesting"
    )
    migration_fee_option: U8 = Field(default=0, alias="migrationFeeOption")
    token_supply: TokenSupplyParams | None = Field(default=None, alias="tokenSupply")
    creator_trading_fee_percentage: U8 = Field(default=0, alias="creatorTradingFeePercentage")
    token_update_authority: U8 = Field(default=0, alias="tokenUpdateAuthority")
    migration_fee: MigrationFee = Field(default_factory=MigrationFee, alias="migrationFee")
    migrated_pool_fee: MigratedPoolFee = Field(
        default_factory=MigratedPoolFee, alias="migratedPoolFee"
    )
    pool_creation_fee: U64 = Field(default=0, alias="poolCreationFee")
    partner_liquidity_vesting_info: LiquidityVestingInfoParameters = Field(
        default_factory=LiquidityVestingInfoParameters, alias="partnerLiquidityVestingInfo"
    )
    creator_liquidity_vesting_info: LiquidityVestingInfoParameters = Field(
        default_factory=LiquidityVestingInfoParameters, alias="creatorLiquidityVestingInfo"
    )
    migrated_pool_base_fee_mode: U8 = Field(default=0, alias="migratedPoolBaseFeeMode")
    migrated_pool_market_cap_fee_scheduler_params: MigratedPoolMarketCapFeeSchedulerParameters = (
        Field(
            default_factory=MigratedPoolMarketCapFeeSchedulerParameters,
            alias="migratedPoolMarketCapFeeSchedulerParams",
        )
    )
    enable_first_swap_with_min_fee: bool = Field(default=False, alias="enableFirstSwapWithMinFee")
    curve: list[CurveSegment] = Field(default_factory=list)

    model_config = {"populate_by_name": True}
