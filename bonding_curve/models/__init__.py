"""Pydantic models and result types for the bonding-curve engine."""

from bonding_curve.models.build_params import (
    BaseFeeParams,
    BuildCurveBaseParams,
    BuildCurveParams,
    BuildCurveWithCustomSqrtPricesParams,
    BuildCurveWithLiquidityWeightsParams,
    BuildCurveWithMarketCapParams,
    BuildCurveWithMidPriceParams,
    BuildCurveWithTwoSegmentsParams,
    FeeSchedulerParams,
    LiquidityVestingInfoParams,
    LockedVestingParams,
    MigratedPoolFeeParams,
    MigratedPoolMarketCapFeeSchedulerParams,
    MigrationFeeParams,
    RateLimiterParams,
)
from bonding_curve.models.config_params import (
    BaseFeeParameters,
    ConfigParameters,
    DynamicFeeParameters,
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParameters,
    MigrationFee,
    PoolFeeParameters,
    TokenSupplyParams,
)
from bonding_curve.models.enums import (
    ActivationType,
    BaseFeeMode,
    CollectFeeMode,
    DammV2BaseFeeMode,
    DammV2DynamicFeeMode,
    MigrationFeeOption,
    MigrationOption,
    SwapMode,
    TokenDecimal,
    TokenType,
    TokenUpdateAuthorityOption,
    TradeDirection,
)
from bonding_curve.models.pool import (
    BaseFeeConfig,
    CurveSegment,
    DynamicFeeConfig,
    PoolConfig,
    PoolFeesConfig,
    VirtualPool,
    VolatilityTracker,
)
from bonding_curve.models.results import (
    FeeMode,
    FeeOnAmountResult,
    SwapAmount,
    SwapQuote2Result,
    SwapQuoteResult,
    SwapResult,
    SwapResult2,
)
from bonding_curve.models.types import U8, U16, U32, U64, U128

__all__ = [
    # Types
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    # Enums
    "ActivationType",
    "BaseFeeMode",
    "CollectFeeMode",
    "DammV2BaseFeeMode",
    "DammV2DynamicFeeMode",
    "MigrationFeeOption",
    "MigrationOption",
    "SwapMode",
    "TokenDecimal",
    "TokenType",
    "TokenUpdateAuthorityOption",
    "TradeDirection",
    # Account snapshots
    "BaseFeeConfig",
    "CurveSegment",
    "DynamicFeeConfig",
    "PoolConfig",
    "PoolFeesConfig",
    "VirtualPool",
    "VolatilityTracker",
    # Config creation parameters
    "BaseFeeParameters",
    "ConfigParameters",
    "DynamicFeeParameters",
    "LiquidityVestingInfoParameters",
    "LockedVestingParameters",
    "MigratedPoolFee",
    "MigratedPoolMarketCapFeeSchedulerParameters",
    "MigrationFee",
    "PoolFeeParameters",
    "TokenSupplyParams",
    # Calibration inputs
    "BaseFeeParams",
    "BuildCurveBaseParams",
    "BuildCurveParams",
    "BuildCurveWithCustomSqrtPricesParams",
    "BuildCurveWithLiquidityWeightsParams",
    "BuildCurveWithMarketCapParams",
    "BuildCurveWithMidPriceParams",
    "BuildCurveWithTwoSegmentsParams",
    "FeeSchedulerParams",
    "LiquidityVestingInfoParams",
    "LockedVestingParams",
    "MigratedPoolFeeParams",
    "MigratedPoolMarketCapFeeSchedulerParams",
    "MigrationFeeParams",
    "RateLimiterParams",
    # Results
    "FeeMode",
    "FeeOnAmountResult",
    "SwapAmount",
    "SwapQuote2Result",
    "SwapQuoteResult",
    "SwapResult",
    "SwapResult2",
]
