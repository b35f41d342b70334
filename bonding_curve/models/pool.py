"""Pydantic models for pool config and pool state snapshots.

These mirror the program's PoolConfig and VirtualPool accounts. Decoding the
raw account bytes happens elsewhere; the models only carry and range-check
the fields the swap engine reads.
"""

from pydantic import BaseModel, Field

from bonding_curve.models.types import U8, U16, U32, U64, U128


class CurveSegment(BaseModel):
    """One liquidity band of the curve.

    The band runs from the previous segment's sqrt_price (or the pool's
    sqrt_start_price for the first one) up to this sqrt_price.
    """

    sqrt_price: U128 = Field(alias="sqrtPrice")
    liquidity: U128

    model_config = {"populate_by_name": True, "frozen": True}


class BaseFeeConfig(BaseModel):
    """Raw base fee parameters as stored on chain.

    Interpretation of the factors depends on base_fee_mode:

    - Fee scheduler: first_factor is number_of_period, second_factor is
      period_frequency, third_factor is reduction_factor.
    - Rate limiter: first_factor is fee_increment_bps, second_factor is
      max_limiter_duration, third_factor is reference_amount.
    """

    cliff_fee_numerator: U64 = Field(alias="cliffFeeNumerator")
    first_factor: U16 = Field(default=0, alias="firstFactor")
    second_factor: U64 = Field(default=0, alias="secondFactor")
    third_factor: U64 = Field(default=0, alias="thirdFactor")
    base_fee_mode: U8 = Field(default=0, alias="baseFeeMode")

    model_config = {"populate_by_name": True, "frozen": True}


class DynamicFeeConfig(BaseModel):
    """Volatility surcharge parameters stored in the pool config."""

    initialized: U8 = 0
    max_volatility_accumulator: U32 = Field(default=0, alias="maxVolatilityAccumulator")
    variable_fee_control: U32 = Field(default=0, alias="variableFeeControl")
    bin_step: U16 = Field(default=0, alias="binStep")
    filter_period: U16 = Field(default=0, alias="filterPeriod")
    decay_period: U16 = Field(default=0, alias="decayPeriod")
    reduction_factor: U16 = Field(default=0, alias="reductionFactor")
    bin_step_u128: U128 = Field(default=0, alias="binStepU128")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_initialized(self) -> bool:
        return self.initialized != 0


class PoolFeesConfig(BaseModel):
    """Base fee plus optional dynamic fee."""

    base_fee: BaseFeeConfig = Field(alias="baseFee")
    dynamic_fee: DynamicFeeConfig = Field(default_factory=DynamicFeeConfig, alias="dynamicFee")

    model_config = {"populate_by_name": True, "frozen": True}


class VolatilityTracker(BaseModel):
    """Pool-owned volatility state feeding the dynamic fee."""

    last_update_timestamp: U64 = Field(default=0, alias="lastUpdateTimestamp")
    sqrt_price_reference: U128 = Field(default=0, alias="sqrtPriceReference")
    volatility_accumulator: U128 = Field(default=0, alias="volatilityAccumulator")
    volatility_reference: U128 = Field(default=0, alias="volatilityReference")

    model_config = {"populate_by_name": True, "frozen": True}


class PoolConfig(BaseModel):
    """Immutable configuration shared by every pool created from it."""

    pool_fees: PoolFeesConfig = Field(alias="poolFees")
    collect_fee_mode: U8 = Field(default=0, alias="collectFeeMode")
    migration_option: U8 = Field(default=0, alias="migrationOption")
    activation_type: U8 = Field(default=0, alias="activationType")
    token_decimal: U8 = Field(default=9, alias="tokenDecimal")
    token_type: U8 = Field(default=0, alias="tokenType")
    migration_quote_threshold: U64 = Field(alias="migrationQuoteThreshold")
    migration_base_threshold: U64 = Field(default=0, alias="migrationBaseThreshold")
    migration_sqrt_price: U128 = Field(alias="migrationSqrtPrice")
    sqrt_start_price: U128 = Field(alias="sqrtStartPrice")
    creator_trading_fee_percentage: U8 = Field(default=0, alias="creatorTradingFeePercentage")
    enable_first_swap_with_min_fee: bool = Field(default=False, alias="enableFirstSwapWithMinFee")
    curve: list[CurveSegment] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def active_curve(self) -> list[CurveSegment]:
        """Curve without the zero padding of unused on-chain slots."""
        return [segment for segment in self.curve if segment.sqrt_price != 0]


class VirtualPool(BaseModel):
    """Mutable pool state, supplied as a consistent snapshot per quote."""

    sqrt_price: U128 = Field(alias="sqrtPrice")
    base_reserve: U64 = Field(default=0, alias="baseReserve")
    quote_reserve: U64 = Field(default=0, alias="quoteReserve")
    activation_point: U64 = Field(default=0, alias="activationPoint")
    volatility_tracker: VolatilityTracker = Field(
        default_factory=VolatilityTracker, alias="volatilityTracker"
    )
    is_migrated: U8 = Field(default=0, alias="isMigrated")

    model_config = {"populate_by_name": True, "frozen": True}
