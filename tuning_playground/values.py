"""Variable metadata types.

A tuning variable is described by a VariableDescriptor: the kind of value it
holds, its statistical role, and what is known about its candidates (an
explicit set, a stepped range, or nothing at all).

Usage:
    from tuning_playground.values import ValueKind, make_candidate_range, make_candidate_set

    degree = make_candidate_set(ValueKind.INT64, [1, 2, 3, 4, 5, 6])
    ratio = make_candidate_range(ValueKind.DOUBLE, 10.0, 50.0, 0.1)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Union

from .errors import InvalidDescriptorError

Value = Union[int, float, str]


class ValueKind(Enum):
    """Storage kind of a variable's values."""

    INT64 = "int64"
    DOUBLE = "double"
    STRING = "string"

    @property
    def is_numeric(self) -> bool:
        return self is not ValueKind.STRING


class StatisticalCategory(Enum):
    """Statistical role of a variable (categorical < ordinal < interval < ratio)."""

    CATEGORICAL = "categorical"
    ORDINAL = "ordinal"
    INTERVAL = "interval"
    RATIO = "ratio"


class CandidateKind(Enum):
    """What is known in advance about a variable's legal values."""

    SET = "set"
    RANGE = "range"
    UNBOUNDED = "unbounded"


class Role(Enum):
    """Whether the engine tunes a variable or only observes it."""

    INPUT = "input"
    OUTPUT = "output"


class VariableValue(NamedTuple):
    """A (variable id, value) pair as exchanged with the harness."""

    type_id: int
    value: Any


def coerce_value(kind: ValueKind, value: Any) -> Value:
    """Check a raw value against a value kind and normalize it.

    Integers are accepted for DOUBLE variables and widened to float. Floats
    with an integral value are accepted for INT64 variables. Booleans are
    never numeric.

    Raises:
        InvalidDescriptorError: If the value does not fit the kind.
    """
    if kind is ValueKind.STRING:
        if not isinstance(value, str):
            raise InvalidDescriptorError(f"Expected a string value, got {value!r}")
        return value

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDescriptorError(f"Expected a {kind.value} value, got {value!r}")

    if kind is ValueKind.INT64:
        if isinstance(value, float) and not value.is_integer():
            raise InvalidDescriptorError(f"Expected an int64 value, got {value!r}")
        return int(value)

    return float(value)


@dataclass(frozen=True)
class CandidateRange:
    """Stepped numeric range with independently open or closed bounds.

    An open bound excludes the endpoint: the first (or last) candidate is
    moved inward by exactly one step.
    """

    lower: float
    upper: float
    step: float
    open_lower: bool = False
    open_upper: bool = False

    def notation(self) -> str:
        """Interval notation, e.g. "[10.0,50.0)"."""
        left = "(" if self.open_lower else "["
        right = ")" if self.open_upper else "]"
        return f"{left}{self.lower},{self.upper}{right}"


@dataclass(frozen=True)
class VariableDescriptor:
    """Declared metadata for a tuning variable.

    Attributes:
        value_kind: INT64, DOUBLE or STRING.
        category: Statistical role of the variable.
        candidate_kind: SET, RANGE or UNBOUNDED.
        candidates: A tuple of values for SET, a CandidateRange for RANGE,
            None for UNBOUNDED.
    """

    value_kind: ValueKind
    category: StatisticalCategory
    candidate_kind: CandidateKind
    candidates: tuple[Value, ...] | CandidateRange | None = None

    def __post_init__(self) -> None:
        kind = self.candidate_kind
        if kind is CandidateKind.SET:
            if isinstance(self.candidates, (CandidateRange, str)) or self.candidates is None:
                raise InvalidDescriptorError("A candidate set needs an explicit sequence of values")
            values = tuple(coerce_value(self.value_kind, v) for v in self.candidates)
            object.__setattr__(self, "candidates", values)
        elif kind is CandidateKind.RANGE:
            if not isinstance(self.candidates, CandidateRange):
                raise InvalidDescriptorError("A candidate range needs a CandidateRange")
            if not self.value_kind.is_numeric:
                raise InvalidDescriptorError("Only int64 and double variables can use a range")
            bounds = self.candidates
            lower = coerce_value(self.value_kind, bounds.lower)
            upper = coerce_value(self.value_kind, bounds.upper)
            step = coerce_value(self.value_kind, bounds.step)
            if not all(math.isfinite(x) for x in (lower, upper, step)):
                raise InvalidDescriptorError(
                    f"Range bounds and step must be finite, got {bounds.lower!r}, {bounds.upper!r}, {bounds.step!r}"
                )
            if step <= 0:
                raise InvalidDescriptorError(f"Range step must be positive, got {bounds.step!r}")
            object.__setattr__(
                self,
                "candidates",
                CandidateRange(lower, upper, step, bool(bounds.open_lower), bool(bounds.open_upper)),
            )
        elif self.candidates is not None:
            raise InvalidDescriptorError("An unbounded variable takes no candidates")


def make_candidate_set(
    value_kind: ValueKind,
    values: Iterable[Any],
    category: StatisticalCategory = StatisticalCategory.CATEGORICAL,
) -> VariableDescriptor:
    """Descriptor for an explicit, ordered set of candidates."""
    return VariableDescriptor(value_kind, category, CandidateKind.SET, tuple(values))


def make_candidate_range(
    value_kind: ValueKind,
    lower: float,
    upper: float,
    step: float,
    open_lower: bool = False,
    open_upper: bool = False,
    category: StatisticalCategory = StatisticalCategory.INTERVAL,
) -> VariableDescriptor:
    """Descriptor for a stepped numeric range."""
    return VariableDescriptor(
        value_kind,
        category,
        CandidateKind.RANGE,
        CandidateRange(lower, upper, step, open_lower, open_upper),
    )


def make_unbounded(
    value_kind: ValueKind,
    category: StatisticalCategory = StatisticalCategory.CATEGORICAL,
) -> VariableDescriptor:
    """Descriptor for a variable whose legal values are not known in advance."""
    return VariableDescriptor(value_kind, category, CandidateKind.UNBOUNDED, None)
