"""Candidate space construction.

Turns a VariableDescriptor into the concrete values the engine may assign:

- SET: the declared values, unchanged, in declared order.
- RANGE: lower, lower+step, ... up to upper, after moving an open lower bound
  up by one step and an open upper bound down by one step. Generated by
  repeated addition, so a float range carries whatever drift the step
  accumulates; every generated value is still within the adjusted bounds.
- UNBOUNDED: no finite space. Such variables are only observed (see bins.py).

Usage:
    from tuning_playground.space import build_space

    space = build_space(make_candidate_range(ValueKind.INT64, 1, 6, 1))
    value = space.sample(np.random.default_rng(0))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import EmptyCandidateSpaceError, TuningError
from .values import CandidateKind, CandidateRange, Value, ValueKind, VariableDescriptor


def make_range(lower: float, upper: float, step: float) -> list[Any]:
    """Arithmetic sequence from lower to upper (inclusive) by repeated addition."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step!r}")
    values = []
    current = lower
    while current <= upper:
        values.append(current)
        current += step
    return values


@dataclass(frozen=True)
class CandidateSpace:
    """Materialized legal values for one variable.

    Attributes:
        kind: Candidate kind the space was built from.
        value_kind: Kind of the values held.
        values: Enumerated candidates (empty for UNBOUNDED).
        lower: Adjusted lower bound for ranges, else None.
        upper: Adjusted upper bound for ranges, else None.
        declared_range: The range as declared, before open-bound adjustment.
    """

    kind: CandidateKind
    value_kind: ValueKind
    values: tuple[Value, ...] = ()
    lower: float | None = None
    upper: float | None = None
    declared_range: CandidateRange | None = None

    @property
    def bounded(self) -> bool:
        return self.kind is not CandidateKind.UNBOUNDED

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, value: object) -> bool:
        if not self.bounded:
            return True
        return value in self.values

    def sample(self, rng: np.random.Generator) -> Value:
        """Draw one candidate uniformly at random over the enumerated values.

        Args:
            rng: Generator supplying the random index.

        Returns:
            A candidate value, as a plain Python int, float or str.

        Raises:
            TuningError: If the space is unbounded (nothing to sample).
        """
        if not self.bounded:
            raise TuningError("Cannot sample from an unbounded candidate space")
        index = int(rng.integers(len(self.values)))
        return self.values[index]

    def describe(self) -> str:
        if self.kind is CandidateKind.SET:
            return "[" + ",".join(str(v) for v in self.values) + "]"
        if self.kind is CandidateKind.RANGE:
            assert self.declared_range is not None
            r = self.declared_range
            return (
                f"lower: {r.lower}, upper: {r.upper}, step: {r.step}, "
                f"open lower: {r.open_lower}, open upper: {r.open_upper}"
            )
        return "unbounded"


def format_options(name: str, space: CandidateSpace) -> str:
    """Human-readable options line, e.g. "Options for degree [1,2,3]"."""
    if space.kind is CandidateKind.RANGE and space.declared_range is not None:
        return f"Options for {name}{space.declared_range.notation()}"
    return f"Options for {name} {space.describe()}"


def build_space(descriptor: VariableDescriptor) -> CandidateSpace:
    """Materialize the candidate space for a descriptor.

    Args:
        descriptor: Declared variable metadata.

    Returns:
        CandidateSpace holding the enumerated candidates.

    Raises:
        EmptyCandidateSpaceError: If a set is empty, or a range is empty
            after open-bound adjustment.
    """
    kind = descriptor.candidate_kind

    if kind is CandidateKind.SET:
        values = tuple(descriptor.candidates)  # type: ignore[arg-type]
        if not values:
            raise EmptyCandidateSpaceError("Candidate set is empty")
        return CandidateSpace(kind, descriptor.value_kind, values)

    if kind is CandidateKind.RANGE:
        declared = descriptor.candidates
        assert isinstance(declared, CandidateRange)
        lower = declared.lower + declared.step if declared.open_lower else declared.lower
        upper = declared.upper - declared.step if declared.open_upper else declared.upper
        if lower > upper:
            raise EmptyCandidateSpaceError(
                f"Range {declared.notation()} step {declared.step} has no candidates"
            )
        values = tuple(make_range(lower, upper, declared.step))
        if not values:
            raise EmptyCandidateSpaceError(f"Range {declared.notation()} step {declared.step} has no candidates")
        return CandidateSpace(kind, descriptor.value_kind, values, lower, upper, declared)

    return CandidateSpace(kind, descriptor.value_kind)
