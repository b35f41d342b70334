"""Enumerations mirroring the program's on-chain byte values."""

from enum import IntEnum


class ActivationType(IntEnum):
    """Unit of activation and period points."""

    SLOT = 0
    TIMESTAMP = 1


class TokenType(IntEnum):
    """Token program of the base mint."""

    SPL = 0
    TOKEN_2022 = 1


class CollectFeeMode(IntEnum):
    """Which token trading fees are collected in."""

    QUOTE_TOKEN = 0
    OUTPUT_TOKEN = 1


class MigrationOption(IntEnum):
    """AMM the pool migrates into."""

    MET_DAMM = 0
    MET_DAMM_V2 = 1


class BaseFeeMode(IntEnum):
    """Base fee strategy."""

    FEE_SCHEDULER_LINEAR = 0
    FEE_SCHEDULER_EXPONENTIAL = 1
    RATE_LIMITER = 2


class DammV2BaseFeeMode(IntEnum):
    """Base fee strategy of the migrated DAMM v2 pool."""

    FEE_TIME_SCHEDULER_LINEAR = 0
    FEE_TIME_SCHEDULER_EXPONENTIAL = 1
    RATE_LIMITER = 2
    FEE_MARKET_CAP_SCHEDULER_LINEAR = 3
    FEE_MARKET_CAP_SCHEDULER_EXPONENTIAL = 4


class DammV2DynamicFeeMode(IntEnum):
    """Dynamic fee switch of the migrated DAMM v2 pool."""

    DISABLED = 0
    ENABLED = 1


class MigrationFeeOption(IntEnum):
    """Fee tier of the migrated pool."""

    FIXED_BPS_25 = 0
    FIXED_BPS_30 = 1
    FIXED_BPS_100 = 2
    FIXED_BPS_200 = 3
    FIXED_BPS_400 = 4
    FIXED_BPS_600 = 5
    CUSTOMIZABLE = 6


class TokenDecimal(IntEnum):
    """Supported mint decimals."""

    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9


class TradeDirection(IntEnum):
    """Swap direction."""

    BASE_TO_QUOTE = 0
    QUOTE_TO_BASE = 1


class TokenUpdateAuthorityOption(IntEnum):
    """Who may update token metadata and mint authority after launch."""

    CREATOR_UPDATE_AUTHORITY = 0
    IMMUTABLE = 1
    PARTNER_UPDATE_AUTHORITY = 2
    CREATOR_UPDATE_AND_MINT_AUTHORITY = 3
    PARTNER_UPDATE_AND_MINT_AUTHORITY = 4


class SwapMode(IntEnum):
    """Quote mode for the v2 swap surface."""

    EXACT_IN = 0
    PARTIAL_FILL = 1
    EXACT_OUT = 2
