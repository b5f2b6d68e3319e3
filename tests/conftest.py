"""Pytest configuration for tuning playground tests.

Provides engine fixtures driven by a fake nanosecond clock, so every
measured duration in a test is exact and every run is reproducible.

Usage:
    pytest tests/                     # Full suite
    pytest tests/ -m "not slow"       # Skip slow markers
    pytest tests/ --run-slow          # Include real-sleep demo runs
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from tests.helpers.fake_clock import FakeClock
from tuning_playground import TunerSettings, TuningEngine


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (demos with real sleeps)",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow (requires --run-slow)")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    # Skip slow tests unless --run-slow is specified
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="Need --run-slow to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# ==============================================================================
# Logging isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers and levels installed by configure_logging during a test."""
    yield
    logger = logging.getLogger("tuning_playground")
    for handler in list(logger.handlers):
        if getattr(handler, "_tuning_playground", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ==============================================================================
# Random state and clock fixtures
# ==============================================================================


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(seed: int) -> np.random.Generator:
    """NumPy random generator with fixed seed."""
    return np.random.default_rng(seed)


@pytest.fixture
def clock() -> FakeClock:
    """Fake nanosecond clock starting at zero."""
    return FakeClock()


# ==============================================================================
# Engine fixtures
# ==============================================================================


@pytest.fixture
def engine(clock: FakeClock, seed: int) -> TuningEngine:
    """Enabled engine with a fixed seed and the fake clock."""
    return TuningEngine(TunerSettings(seed=seed), clock=clock.now_ns)


@pytest.fixture
def disabled_engine(clock: FakeClock) -> TuningEngine:
    """Engine that hands every default back, like a host with no tuner loaded."""
    return TuningEngine(TunerSettings(enabled=False), clock=clock.now_ns)


@pytest.fixture
def strict_engine(clock: FakeClock, seed: int) -> TuningEngine:
    """Engine that rejects re-declaration of a variable id."""
    return TuningEngine(TunerSettings(seed=seed, strict_redeclare=True), clock=clock.now_ns)
