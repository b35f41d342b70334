"""Pytest configuration and fixtures."""

import pytest

from bonding_curve.models import PoolConfig, VirtualPool
from tests.helpers.factories import (
    TEST_SQRT_END_PRICE,
    make_pool_config,
    make_rate_limiter_fee_config,
    make_virtual_pool,
)


@pytest.fixture
def pool_config() -> PoolConfig:
    """Single-segment config with a flat 1% fee collected in quote."""
    return make_pool_config()


@pytest.fixture
def output_fee_pool_config() -> PoolConfig:
    """Same curve, fees collected in the output token."""
    return make_pool_config(collect_fee_mode=1)


@pytest.fixture
def rate_limiter_pool_config() -> PoolConfig:
    """Same curve with a 1% + 0.1% per 1e9 quote rate limiter."""
    return make_pool_config(base_fee=make_rate_limiter_fee_config())


@pytest.fixture
def fresh_pool() -> VirtualPool:
    """Pool at the curve start with no reserves."""
    return make_virtual_pool()


@pytest.fixture
def midway_pool() -> VirtualPool:
    """Pool halfway up the test segment (sqrt price 1.5)."""
    return make_virtual_pool(sqrt_price=TEST_SQRT_END_PRICE * 3 // 4)
