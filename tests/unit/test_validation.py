"""Tests for config parameter validation."""

import pytest

from bonding_curve.constants import ONE_Q64
from bonding_curve.errors import InvalidConfiguration, ZeroAmount
from bonding_curve.models import (
    DynamicFeeParameters,
    LiquidityVestingInfoParameters,
    LockedVestingParameters,
    MigratedPoolFee,
    MigratedPoolMarketCapFeeSchedulerParameters,
    MigrationFee,
    TokenSupplyParams,
)
from bonding_curve.models.enums import (
    DammV2BaseFeeMode,
    MigrationFeeOption,
    MigrationOption,
    TokenType,
)
from bonding_curve.validation import (
    DEFAULT_PUBKEY,
    validate_config_parameters,
    validate_curve,
    validate_dynamic_fee,
    validate_liquidity_vesting_info,
    validate_locked_vesting,
    validate_lp_percentages,
    validate_migrated_pool_base_fee_mode,
    validate_migrated_pool_fee,
    validate_migration_and_token_type,
    validate_migration_fee,
    validate_migration_fee_option,
    validate_pool_creation_fee,
    validate_swap_amount,
    validate_token_decimals,
    validate_token_supply,
)
from tests.helpers import (
    LEFTOVER_RECEIVER,
    TEST_LIQUIDITY,
    TEST_SQRT_END_PRICE,
    TEST_SQRT_START_PRICE,
    make_config_parameters,
    make_curve,
)


class TestValidateConfigParameters:
    """Tests for the aggregate check."""

    def test_valid_config(self):
        validate_config_parameters(make_config_parameters())

    def test_token_supply_with_receiver(self):
        config = make_config_parameters(
            token_supply=TokenSupplyParams(
                pre_migration_token_supply=10**12, post_migration_token_supply=10**12
            )
        )
        validate_config_parameters(config, LEFTOVER_RECEIVER)

    def test_token_supply_too_small(self):
        """Half the curve sells 333e9 and migration takes ~222e9, so 5e11 is short."""
        config = make_config_parameters(
            token_supply=TokenSupplyParams(
                pre_migration_token_supply=10**12, post_migration_token_supply=5 * 10**11
            )
        )
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config, LEFTOVER_RECEIVER)
        assert exc_info.value.field == "token_supply"

    @pytest.mark.parametrize("receiver", [None, DEFAULT_PUBKEY])
    def test_token_supply_needs_receiver(self, receiver):
        config = make_config_parameters(
            token_supply=TokenSupplyParams(
                pre_migration_token_supply=10**12, post_migration_token_supply=10**12
            )
        )
        with pytest.raises(InvalidConfiguration):
            validate_config_parameters(config, receiver)

    def test_threshold_beyond_curve(self):
        config = make_config_parameters(migration_quote_threshold=2 * 10**12)
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config)
        assert exc_info.value.field == "curve"

    def test_lp_percentages_must_sum_to_100(self):
        config = make_config_parameters(partner_permanent_locked_liquidity_percentage=50)
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config)
        assert exc_info.value.field == "liquidity_percentages"

    def test_too_little_locked_liquidity(self):
        """5% locked is below the 10% floor."""
        config = make_config_parameters(
            partner_permanent_locked_liquidity_percentage=5,
            partner_liquidity_percentage=95,
        )
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config)
        assert exc_info.value.field == "locked_liquidity"

    def test_damm_v1_rejects_token_2022(self):
        config = make_config_parameters(
            migration_option=MigrationOption.MET_DAMM, token_type=TokenType.TOKEN_2022
        )
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config)
        assert exc_info.value.field == "token_type"

    def test_zero_threshold(self):
        config = make_config_parameters(migration_quote_threshold=0)
        with pytest.raises(InvalidConfiguration):
            validate_config_parameters(config)

    def test_fee_below_minimum(self):
        config = make_config_parameters()
        pool_fees = config.pool_fees.model_copy(
            update={
                "base_fee": config.pool_fees.base_fee.model_copy(
                    update={"cliff_fee_numerator": 1_000_000}
                )
            }
        )
        with pytest.raises(InvalidConfiguration) as exc_info:
            validate_config_parameters(config.model_copy(update={"pool_fees": pool_fees}))
        assert exc_info.value.field == "pool_fees"


class TestFeePredicates:
    """Tests for fee-related predicates."""

    def test_dynamic_fee_absent(self):
        assert validate_dynamic_fee(None)

    def test_dynamic_fee_wrong_bin_step(self):
        dynamic_fee = DynamicFeeParameters(
            bin_step=2,
            bin_step_u128=0,
            filter_period=10,
            decay_period=120,
            reduction_factor=5_000,
            max_volatility_accumulator=0,
            variable_fee_control=0,
        )
        assert not validate_dynamic_fee(dynamic_fee)

    def test_migration_fee_bounds(self):
        assert validate_migration_fee(MigrationFee(fee_percentage=50, creator_fee_percentage=100))
        assert not validate_migration_fee(MigrationFee(fee_percentage=100))

    def test_pool_creation_fee(self):
        assert validate_pool_creation_fee(0)
        assert not validate_pool_creation_fee(1)


class TestOptionPredicates:
    """Tests for token and migration option checks."""

    def test_token_type_by_migration(self):
        assert validate_migration_and_token_type(MigrationOption.MET_DAMM, TokenType.SPL)
        assert not validate_migration_and_token_type(MigrationOption.MET_DAMM, TokenType.TOKEN_2022)
        assert validate_migration_and_token_type(MigrationOption.MET_DAMM_V2, TokenType.TOKEN_2022)

    def test_customizable_fee_needs_damm_v2(self):
        assert validate_migration_fee_option(
            MigrationFeeOption.CUSTOMIZABLE, MigrationOption.MET_DAMM_V2
        )
        assert not validate_migration_fee_option(
            MigrationFeeOption.CUSTOMIZABLE, MigrationOption.MET_DAMM
        )
        assert not validate_migration_fee_option(9, MigrationOption.MET_DAMM_V2)

    @pytest.mark.parametrize("decimal,expected", [(5, False), (6, True), (9, True), (10, False)])
    def test_token_decimals(self, decimal, expected):
        assert validate_token_decimals(decimal) is expected


class TestLiquidityPredicates:
    """Tests for LP split and vesting checks."""

    def test_lp_percentages(self):
        assert validate_lp_percentages(20, 30, 20, 30)
        assert validate_lp_percentages(0, 50, 0, 0, 25, 25)
        assert not validate_lp_percentages(20, 30, 20, 20)

    def test_liquidity_vesting_needs_frequency(self):
        assert validate_liquidity_vesting_info(LiquidityVestingInfoParameters())
        assert not validate_liquidity_vesting_info(
            LiquidityVestingInfoParameters(vesting_percentage=10, number_of_periods=1)
        )

    def test_locked_vesting(self):
        assert validate_locked_vesting(LockedVestingParameters())
        assert validate_locked_vesting(
            LockedVestingParameters(amount_per_period=1, number_of_period=1, frequency=1)
        )
        assert not validate_locked_vesting(
            LockedVestingParameters(amount_per_period=1, number_of_period=1)
        )


class TestMigratedPoolPredicates:
    """Tests for migrated pool fee checks."""

    def test_fixed_fee_option_requires_empty_fee(self):
        fee = MigratedPoolFee(pool_fee_bps=100)
        assert not validate_migrated_pool_fee(
            fee, MigrationOption.MET_DAMM_V2, MigrationFeeOption.FIXED_BPS_25
        )
        assert validate_migrated_pool_fee(
            MigratedPoolFee(), MigrationOption.MET_DAMM_V2, MigrationFeeOption.FIXED_BPS_25
        )

    def test_customizable_fee_bounds(self):
        assert validate_migrated_pool_fee(
            MigratedPoolFee(pool_fee_bps=100),
            MigrationOption.MET_DAMM_V2,
            MigrationFeeOption.CUSTOMIZABLE,
        )

    def test_base_fee_mode(self):
        empty = MigratedPoolMarketCapFeeSchedulerParameters()
        scheduled = MigratedPoolMarketCapFeeSchedulerParameters(
            number_of_period=10,
            sqrt_price_step_bps=100,
            scheduler_expiration_duration=3_600,
            reduction_factor=750_000,
        )
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR, empty
        )
        assert not validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.FEE_TIME_SCHEDULER_LINEAR, scheduled
        )
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.FEE_MARKET_CAP_SCHEDULER_LINEAR, scheduled
        )
        assert not validate_migrated_pool_base_fee_mode(DammV2BaseFeeMode.RATE_LIMITER, empty)

    def test_base_fee_mode_ignored_for_damm_v1(self):
        assert validate_migrated_pool_base_fee_mode(
            DammV2BaseFeeMode.RATE_LIMITER,
            MigratedPoolMarketCapFeeSchedulerParameters(),
            MigrationOption.MET_DAMM,
        )


class TestCurveAndSupply:
    """Tests for curve shape and token supply checks."""

    def test_valid_curve(self):
        assert validate_curve(make_curve(), TEST_SQRT_START_PRICE)

    def test_empty_curve(self):
        assert not validate_curve([], TEST_SQRT_START_PRICE)

    def test_curve_must_ascend(self):
        curve = make_curve([(TEST_SQRT_END_PRICE, TEST_LIQUIDITY), (ONE_Q64, TEST_LIQUIDITY)])
        assert not validate_curve(curve, TEST_SQRT_START_PRICE)

    def test_curve_starts_above_start_price(self):
        assert not validate_curve(make_curve(), TEST_SQRT_END_PRICE)

    def test_too_many_segments(self):
        curve = make_curve([(ONE_Q64 + i + 1, TEST_LIQUIDITY) for i in range(17)])
        assert not validate_curve(curve, TEST_SQRT_START_PRICE)

    def test_zero_liquidity_segment(self):
        assert not validate_curve(make_curve([(TEST_SQRT_END_PRICE, 0)]), TEST_SQRT_START_PRICE)

    def test_token_supply_bounds(self):
        """Post covers the unbuffered need, pre covers the buffered one."""
        supply = TokenSupplyParams(pre_migration_token_supply=200, post_migration_token_supply=150)
        vesting = LockedVestingParameters()
        assert validate_token_supply(supply, LEFTOVER_RECEIVER, 100, 50, vesting, 150)
        assert not validate_token_supply(supply, LEFTOVER_RECEIVER, 101, 50, vesting, 150)
        assert not validate_token_supply(supply, LEFTOVER_RECEIVER, 100, 50, vesting, 151)

    def test_post_cannot_exceed_pre(self):
        supply = TokenSupplyParams(pre_migration_token_supply=150, post_migration_token_supply=200)
        assert not validate_token_supply(
            supply, LEFTOVER_RECEIVER, 100, 50, LockedVestingParameters(), 150
        )

    def test_no_token_supply(self):
        assert validate_token_supply(None, None, 100, 50, LockedVestingParameters(), 150)


class TestValidateSwapAmount:
    """Tests for validate_swap_amount."""

    def test_positive(self):
        validate_swap_amount(1)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive(self, amount):
        with pytest.raises(ZeroAmount):
            validate_swap_amount(amount)
