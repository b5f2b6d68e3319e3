"""Tuning variables and the registry that owns them."""

from __future__ import annotations

import hashlib
import logging
import math
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .bins import Bin, assign_bin
from .errors import UnknownVariableError
from .space import CandidateSpace, build_space
from .values import Role, Value, VariableDescriptor

logger = logging.getLogger(__name__)

# Best time before any measurement, in nanoseconds
UNSET_TIME_NS = sys.maxsize


def _name_hash(name: str) -> str:
    return hashlib.sha1(name.encode("utf-8")).hexdigest()[:16]


@dataclass
class Variable:
    """One declared tuning variable.

    Output variables are sampled on every request and track the value that
    produced the shortest episode. Input variables only describe the context
    they are bound to; unbounded numeric inputs are summarized into bins.

    Attributes:
        id: Caller-supplied identifier, stable for the engine's lifetime.
        name: Display name, used for logging and hashing only.
        descriptor: Declared metadata.
        role: INPUT or OUTPUT.
        space: Materialized candidate space.
        bins: Observation bins (unbounded variables only).
        last_value: Value most recently assigned or observed.
        best_value: Value assigned during the fastest episode so far.
        best_time_ns: Duration of the fastest episode so far.
    """

    id: int
    name: str
    descriptor: VariableDescriptor
    role: Role
    space: CandidateSpace
    bins: list[Bin] = field(default_factory=list)
    last_value: Value | None = None
    best_value: Value | None = None
    best_time_ns: int = UNSET_TIME_NS
    hash_value: str = ""

    def __post_init__(self) -> None:
        if not self.hash_value:
            self.hash_value = _name_hash(self.name)

    @classmethod
    def declare(
        cls,
        variable_id: int,
        name: str,
        descriptor: VariableDescriptor,
        role: Role,
    ) -> Variable:
        """Create a variable and materialize its candidate space.

        Raises:
            EmptyCandidateSpaceError: If the declared candidates are empty.
        """
        return cls(
            id=variable_id,
            name=name,
            descriptor=descriptor,
            role=role,
            space=build_space(descriptor),
        )

    @property
    def is_output(self) -> bool:
        return self.role is Role.OUTPUT

    @property
    def has_measurement(self) -> bool:
        return self.best_time_ns != UNSET_TIME_NS

    def assign_new_value(self, rng: np.random.Generator, default: Any = None) -> Any:
        """Pick the value this variable takes for the next episode.

        Bounded spaces draw uniformly over the enumerated candidates. Unbounded
        variables pass the caller's default through unchanged.
        """
        if self.space.bounded:
            value = self.space.sample(rng)
        else:
            value = default
        self.last_value = value
        logger.debug("Setting %s to %s", self.name, value)
        return value

    def observe(self, value: Any) -> str | None:
        """Record an input value, classifying numeric unbounded values into bins.

        Returns:
            Name of the bin that absorbed the value, or None if the value was
            not binned.
        """
        self.last_value = value
        if self.space.bounded:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        b = assign_bin(self.bins, value)
        logger.debug("Variable %s value %s -> %s", self.name, value, b.name)
        return b.name

    def update_best(self, duration_ns: int) -> bool:
        """Keep last_value as the best if this episode beat every earlier one.

        Ties keep the earlier best. A variable that has not been assigned a
        value since it was declared keeps no best.

        Returns:
            True if the best value changed.
        """
        if self.last_value is None:
            return False
        if duration_ns < self.best_time_ns:
            self.best_time_ns = duration_ns
            self.best_value = self.last_value
            return True
        return False

    def describe(self) -> str:
        lines = [
            f"  hash: {self.hash_value}",
            f"  name: {self.name}",
            f"  id: {self.id}",
            f"  role: {self.role.value}",
            f"  type: {self.descriptor.value_kind.value}",
            f"  category: {self.descriptor.category.value}",
            f"  candidate kind: {self.descriptor.candidate_kind.value}",
            f"  candidates: {self.space.describe()}",
        ]
        if not self.space.bounded:
            lines.append(f"  num_bins: {len(self.bins)}")
            for b in self.bins:
                lines.append(f"  {b.name}: min={b.min:f} mean={b.mean:f} max={b.max:f} count={b.count}")
        return "\n".join(lines)


class VariableRegistry:
    """Owning map from variable id to Variable.

    Not synchronized; TuningEngine serializes access.
    """

    def __init__(self) -> None:
        self._variables: dict[int, Variable] = {}

    def put(self, variable: Variable) -> Variable | None:
        """Insert a variable, returning the one it replaced (if any)."""
        previous = self._variables.get(variable.id)
        self._variables[variable.id] = variable
        return previous

    def get(self, variable_id: int) -> Variable:
        try:
            return self._variables[variable_id]
        except KeyError:
            raise UnknownVariableError(variable_id) from None

    def outputs(self) -> list[Variable]:
        return [v for v in self._variables.values() if v.is_output]

    def ids(self) -> list[int]:
        return list(self._variables)

    def __contains__(self, variable_id: object) -> bool:
        return variable_id in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(list(self._variables.values()))
