"""Adaptive online binning for unbounded numeric observations.

Variables with an unbounded candidate kind have no space to sample from, so
the engine keeps a running summary of the values it observes instead. This
is a single-pass heuristic clustering, not an exact histogram: bin edges are
never fixed and the result depends on arrival order.

A bin accepts a value when the value lies in the bin's [min, max] or within
25% of its running mean. The first bin in creation order that accepts a
value absorbs it; otherwise a new bin is appended. For a negative mean the
tolerance band is empty, so only [min, max] matches.

Bins are report-only. They never influence sampling.
"""

from __future__ import annotations

from dataclasses import dataclass

BIN_TOLERANCE = 0.25


@dataclass
class Bin:
    """Running summary of a cluster of observed values."""

    index: int
    mean: float
    total: float
    min: float
    max: float
    count: int = 1

    @classmethod
    def start(cls, value: float, index: int) -> Bin:
        value = float(value)
        return cls(index=index, mean=value, total=value, min=value, max=value)

    @property
    def name(self) -> str:
        return f"bin_{self.index}"

    def contains(self, value: float) -> bool:
        if self.min <= value <= self.max:
            return True
        return self.mean * (1.0 - BIN_TOLERANCE) <= value <= self.mean * (1.0 + BIN_TOLERANCE)

    def add(self, value: float) -> None:
        value = float(value)
        self.count += 1
        self.total += value
        self.mean = self.total / self.count
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value


def assign_bin(bins: list[Bin], value: float) -> Bin:
    """Absorb a value into the first matching bin, or append a new one.

    Args:
        bins: Bins in creation order. Mutated in place.
        value: Observed numeric value.

    Returns:
        The bin that now holds the value.
    """
    for b in bins:
        if b.contains(value):
            b.add(value)
            return b
    new_bin = Bin.start(value, len(bins))
    bins.append(new_bin)
    return new_bin
