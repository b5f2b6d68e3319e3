"""Shortcuts for declaring common kinds of tuning variables.

Each helper builds a descriptor, declares it on the engine, and returns the
allocated variable id.

Usage:
    from tuning_playground.declarations import declare_output_continuous, declare_output_range

    degree = declare_output_range(engine, "Chebyshev: Degree", 1, 6, 1)
    ratio = declare_output_continuous(engine, "Chebyshev: Eigenvalue Ratio", 10.0, 50.0, 0.1)
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING

from .space import format_options, make_range
from .values import (
    StatisticalCategory,
    ValueKind,
    make_candidate_range,
    make_candidate_set,
)

if TYPE_CHECKING:
    from .engine import TuningEngine

logger = logging.getLogger(__name__)

__all__ = [
    "Schedule",
    "create_categorical_int_tuner",
    "declare_input_view_size",
    "declare_output_continuous",
    "declare_output_range",
    "declare_output_schedules",
    "declare_output_thread_count",
    "declare_output_tile_size",
    "factors_of",
    "format_options",
    "make_range",
]


class Schedule(IntEnum):
    """Loop scheduling policies a kernel can be tuned over."""

    STATIC = 0
    DYNAMIC = 1


def factors_of(size: int) -> list[int]:
    """All positive divisors of size, ascending."""
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    return [i for i in range(1, size + 1) if size % i == 0]


def declare_output_tile_size(engine: TuningEngine, name: str, limit: int) -> int:
    """Ordinal tile-size variable over the factors of limit."""
    candidates = factors_of(limit)
    logger.info("Options for %s [%s]", name, ",".join(str(c) for c in candidates))
    return engine.declare_output_type(
        name, make_candidate_set(ValueKind.INT64, candidates, StatisticalCategory.ORDINAL)
    )


def declare_input_view_size(engine: TuningEngine, name: str, size: int) -> int:
    """Input variable describing a fixed problem size."""
    return engine.declare_input_type(
        name, make_candidate_set(ValueKind.INT64, [size], StatisticalCategory.ORDINAL)
    )


def declare_output_schedules(engine: TuningEngine, name: str) -> int:
    """Categorical variable over the Schedule values."""
    return engine.declare_output_type(
        name, make_candidate_set(ValueKind.INT64, [int(s) for s in Schedule])
    )


def declare_output_thread_count(engine: TuningEngine, name: str, limit: int) -> int:
    """Thread-count variable over the even counts 2, 4, ... up to limit."""
    return engine.declare_output_type(
        name, make_candidate_set(ValueKind.INT64, make_range(2, limit, 2))
    )


def declare_output_range(
    engine: TuningEngine,
    name: str,
    lower: int | float,
    upper: int | float,
    step: int | float,
) -> int:
    """Ordinal variable over lower..upper by step, enumerated up front.

    Integer arguments declare an int64 variable; any float argument declares
    a double variable.
    """
    if all(isinstance(x, int) and not isinstance(x, bool) for x in (lower, upper, step)):
        kind = ValueKind.INT64
    elif all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in (lower, upper, step)):
        kind = ValueKind.DOUBLE
        lower, upper, step = float(lower), float(upper), float(step)
    else:
        raise TypeError(f"declare_output_range needs int or float bounds, got {lower!r}, {upper!r}, {step!r}")
    candidates = make_range(lower, upper, step)
    logger.info("Options for %s [%s]", name, ",".join(str(c) for c in candidates))
    return engine.declare_output_type(
        name, make_candidate_set(kind, candidates, StatisticalCategory.ORDINAL)
    )


def declare_output_continuous(
    engine: TuningEngine,
    name: str,
    lower: float,
    upper: float,
    step: float,
    open_lower: bool = False,
    open_upper: bool = False,
) -> int:
    """Interval variable over a stepped double range with open/closed bounds."""
    descriptor = make_candidate_range(
        ValueKind.DOUBLE, lower, upper, step, open_lower, open_upper, StatisticalCategory.INTERVAL
    )
    logger.info("Options for %s%s", name, descriptor.candidates.notation())  # type: ignore[union-attr]
    return engine.declare_output_type(name, descriptor)


def create_categorical_int_tuner(engine: TuningEngine, name: str, num_options: int) -> int:
    """Categorical variable selecting one of num_options implementations (0..n-1)."""
    if num_options < 1:
        raise ValueError(f"num_options must be at least 1, got {num_options}")
    return engine.declare_output_type(
        name, make_candidate_set(ValueKind.INT64, range(num_options))
    )
