"""Protocol constants for the bonding-curve program.

All values are plain literals mirroring the on-chain program. Nothing here
is computed at import time other than simple powers of two.
"""

# Curve shape
MAX_CURVE_POINT = 16
RESOLUTION = 64
ONE_Q64 = 1 << RESOLUTION

# Integer widths
U16_MAX = (1 << 16) - 1
U24_MAX = (1 << 24) - 1
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

# Sqrt price bounds (Q64.64)
MIN_SQRT_PRICE = 4_295_048_016
MAX_SQRT_PRICE = 79_226_673_521_066_979_257_578_248_091

# Fee scales
FEE_DENOMINATOR = 1_000_000_000
MAX_BASIS_POINT = 10_000
MIN_FEE_BPS = 25
MAX_FEE_BPS = 9_900
MIN_FEE_NUMERATOR = 2_500_000
MAX_FEE_NUMERATOR = 990_000_000

# Fee split (percent of trading fee)
PROTOCOL_FEE_PERCENT = 20
HOST_FEE_PERCENT = 20

# Rate limiter window limits
MAX_RATE_LIMITER_DURATION_IN_SECONDS = 43_200
MAX_RATE_LIMITER_DURATION_IN_SLOTS = 108_000

# Dynamic fee defaults
DYNAMIC_FEE_FILTER_PERIOD_DEFAULT = 10
DYNAMIC_FEE_DECAY_PERIOD_DEFAULT = 120
DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT = 5_000
DYNAMIC_FEE_SCALING_FACTOR = 100_000_000_000
DYNAMIC_FEE_ROUNDING_OFFSET = 99_999_999_999
BIN_STEP_BPS_DEFAULT = 1
# bin_step_bps / 10_000 in Q64.64
BIN_STEP_BPS_U128_DEFAULT = 1_844_674_407_370_955
MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT = 20

# Base tokens reserved on top of the curve capacity
SWAP_BUFFER_PERCENTAGE = 25

# Migration
MAX_MIGRATION_FEE_PERCENTAGE = 99
MAX_CREATOR_MIGRATION_FEE_PERCENTAGE = 100
MIN_LOCKED_LIQUIDITY_BPS = 1_000
SECONDS_PER_DAY = 86_400
MAX_LOCK_DURATION_IN_SECONDS = 63_072_000
MIN_MIGRATED_POOL_FEE_BPS = 10
MAX_MIGRATED_POOL_FEE_BPS = 1_000

# Pool creation fee, in lamports
MIN_POOL_CREATION_FEE = 1_000_000
MAX_POOL_CREATION_FEE = 100_000_000_000
LAMPORTS_PER_SOL = 1_000_000_000

__all__ = [
    "MAX_CURVE_POINT",
    "RESOLUTION",
    "ONE_Q64",
    "U16_MAX",
    "U24_MAX",
    "U32_MAX",
    "U64_MAX",
    "U128_MAX",
    "MIN_SQRT_PRICE",
    "MAX_SQRT_PRICE",
    "FEE_DENOMINATOR",
    "MAX_BASIS_POINT",
    "MIN_FEE_BPS",
    "MAX_FEE_BPS",
    "MIN_FEE_NUMERATOR",
    "MAX_FEE_NUMERATOR",
    "PROTOCOL_FEE_PERCENT",
    "HOST_FEE_PERCENT",
    "MAX_RATE_LIMITER_DURATION_IN_SECONDS",
    "MAX_RATE_LIMITER_DURATION_IN_SLOTS",
    "DYNAMIC_FEE_FILTER_PERIOD_DEFAULT",
    "DYNAMIC_FEE_DECAY_PERIOD_DEFAULT",
    "DYNAMIC_FEE_REDUCTION_FACTOR_DEFAULT",
    "DYNAMIC_FEE_SCALING_FACTOR",
    "DYNAMIC_FEE_ROUNDING_OFFSET",
    "BIN_STEP_BPS_DEFAULT",
    "BIN_STEP_BPS_U128_DEFAULT",
    "MAX_PRICE_CHANGE_PERCENTAGE_DEFAULT",
    "SWAP_BUFFER_PERCENTAGE",
    "MAX_MIGRATION_FEE_PERCENTAGE",
    "MAX_CREATOR_MIGRATION_FEE_PERCENTAGE",
    "MIN_LOCKED_LIQUIDITY_BPS",
    "SECONDS_PER_DAY",
    "MAX_LOCK_DURATION_IN_SECONDS",
    "MIN_MIGRATED_POOL_FEE_BPS",
    "MAX_MIGRATED_POOL_FEE_BPS",
    "MIN_POOL_CREATION_FEE",
    "MAX_POOL_CREATION_FEE",
    "LAMPORTS_PER_SOL",
]
