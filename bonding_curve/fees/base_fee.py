"""Base fee strategies.

A pool config stores its base fee as a raw (cliff, first, second, third,
mode) tuple. get_base_fee_handler() decodes it into one of two variants,
and the module-level functions dispatch on the variant type.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bonding_curve.errors import InvalidFeeMode
from bonding_curve.fees import fee_scheduler, rate_limiter
from bonding_curve.models.enums import ActivationType, BaseFeeMode, CollectFeeMode, TradeDirection
from bonding_curve.models.pool import BaseFeeConfig

logger = structlog.get_logger()


@dataclass(frozen=True)
class FeeScheduler:
    """Fee decaying over time from the cliff fee.

    Attributes:
        cliff_fee_numerator: Fee at activation
        number_of_period: Periods until the fee stops decaying
        period_frequency: Length of one period, in activation points
        reduction_factor: Linear step (numerator units) or exponential
            step (basis points), depending on mode
        mode: FEE_SCHEDULER_LINEAR or FEE_SCHEDULER_EXPONENTIAL
    """

    cliff_fee_numerator: int
    number_of_period: int
    period_frequency: int
    reduction_factor: int
    mode: BaseFeeMode

    def validate(
        self, collect_fee_mode: CollectFeeMode | int, activation_type: ActivationType | int
    ) -> bool:
        return fee_scheduler.validate_fee_scheduler(
            self.number_of_period,
            self.period_frequency,
            self.reduction_factor,
            self.cliff_fee_numerator,
            self.mode,
        )

    def get_min_base_fee_numerator(self) -> int:
        return fee_scheduler.get_fee_scheduler_min_base_fee_numerator(
            self.cliff_fee_numerator, self.number_of_period, self.reduction_factor, self.mode
        )

    def get_base_fee_numerator(self, current_point: int, activation_point: int) -> int:
        return fee_scheduler.get_base_fee_numerator(
            self.cliff_fee_numerator,
            self.number_of_period,
            self.period_frequency,
            self.reduction_factor,
            self.mode,
            current_point,
            activation_point,
        )


@dataclass(frozen=True)
class FeeRateLimiter:
    """Fee stepping up with trade size inside the limiter window.

    Attributes:
        cliff_fee_numerator: Fee on the first reference_amount of input
        fee_increment_bps: Extra fee per additional reference_amount band
        max_limiter_duration: Window after activation, in activation points
        reference_amount: Band width, in quote base units
    """

    cliff_fee_numerator: int
    fee_increment_bps: int
    max_limiter_duration: int
    reference_amount: int

    def validate(
        self, collect_fee_mode: CollectFeeMode | int, activation_type: ActivationType | int
    ) -> bool:
        return rate_limiter.validate_fee_rate_limiter(
            self.cliff_fee_numerator,
            self.fee_increment_bps,
            self.max_limiter_duration,
            self.reference_amount,
            collect_fee_mode,
            activation_type,
        )

    def get_min_base_fee_numerator(self) -> int:
        return rate_limiter.get_rate_limiter_min_base_fee_numerator(self.cliff_fee_numerator)

    def is_applied(
        self, current_point: int, activation_point: int, trade_direction: TradeDirection
    ) -> bool:
        return rate_limiter.is_rate_limiter_applied(
            current_point,
            activation_point,
            trade_direction,
            self.max_limiter_duration,
            self.reference_amount,
            self.fee_increment_bps,
        )


BaseFeeHandler = FeeScheduler | FeeRateLimiter


def get_base_fee_handler(base_fee: BaseFeeConfig) -> BaseFeeHandler:
    """Decode a raw base fee config into its strategy.

    Raises:
        InvalidFeeMode: If base_fee_mode is not a known mode
    """
    mode = base_fee.base_fee_mode
    if mode in (BaseFeeMode.FEE_SCHEDULER_LINEAR, BaseFeeMode.FEE_SCHEDULER_EXPONENTIAL):
        return FeeScheduler(
            cliff_fee_numerator=base_fee.cliff_fee_numerator,
            number_of_period=base_fee.first_factor,
            period_frequency=base_fee.second_factor,
            reduction_factor=base_fee.third_factor,
            mode=BaseFeeMode(mode),
        )
    if mode == BaseFeeMode.RATE_LIMITER:
        return FeeRateLimiter(
            cliff_fee_numerator=base_fee.cliff_fee_numerator,
            fee_increment_bps=base_fee.first_factor,
            max_limiter_duration=base_fee.second_factor,
            reference_amount=base_fee.third_factor,
        )
    raise InvalidFeeMode(f"Invalid base fee mode: {mode}")


def get_base_fee_numerator_from_included_fee_amount(
    handler: BaseFeeHandler,
    current_point: int,
    activation_point: int,
    trade_direction: TradeDirection,
    included_fee_amount: int,
) -> int:
    """Base fee numerator for a fee-inclusive amount."""
    if isinstance(handler, FeeScheduler):
        return handler.get_base_fee_numerator(current_point, activation_point)
    if isinstance(handler, FeeRateLimiter):
        if not handler.is_applied(current_point, activation_point, trade_direction):
            return handler.cliff_fee_numerator
        logger.debug("rate_limiter_applied", included_fee_amount=included_fee_amount)
        return rate_limiter.get_fee_numerator_from_included_amount(
            handler.cliff_fee_numerator,
            handler.reference_amount,
            handler.fee_increment_bps,
            included_fee_amount,
        )
    raise InvalidFeeMode(f"Unknown base fee handler: {type(handler).__name__}")


def get_base_fee_numerator_from_excluded_fee_amount(
    handler: BaseFeeHandler,
    current_point: int,
    activation_point: int,
    trade_direction: TradeDirection,
    excluded_fee_amount: int,
) -> int:
    """Base fee numerator for a fee-exclusive amount."""
    if isinstance(handler, FeeScheduler):
        return handler.get_base_fee_numerator(current_point, activation_point)
    if isinstance(handler, FeeRateLimiter):
        if not handler.is_applied(current_point, activation_point, trade_direction):
            return handler.cliff_fee_numerator
        logger.debug("rate_limiter_applied", excluded_fee_amount=excluded_fee_amount)
        return rate_limiter.get_fee_numerator_from_excluded_amount(
            handler.cliff_fee_numerator,
            handler.reference_amount,
            handler.fee_increment_bps,
            excluded_fee_amount,
        )
    raise InvalidFeeMode(f"Unknown base fee handler: {type(handler).__name__}")
