"""structlog setup for applications embedding the engine."""

from __future__ import annotations

import logging

import structlog

from bonding_curve.config import EngineConfig


def configure_logging(level: str | int | None = None) -> None:
    """Configure structlog with console rendering.

    Args:
        level: Level name or number. Defaults to BONDING_CURVE_LOG_LEVEL
            (WARNING when unset).
    """
    if level is None:
        level = EngineConfig.from_env().log_level
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
