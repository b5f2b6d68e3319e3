"""Tests for candidate space construction and sampling."""

from __future__ import annotations

import numpy as np
import pytest

from tuning_playground.errors import EmptyCandidateSpaceError, TuningError
from tuning_playground.space import build_space, format_options, make_range
from tuning_playground.values import (
    CandidateKind,
    CandidateRange,
    ValueKind,
    make_candidate_range,
    make_candidate_set,
    make_unbounded,
)


class TestMakeRange:
    """Tests for the repeated-addition range generator."""

    def test_integer_range_inclusive(self) -> None:
        assert make_range(1, 6, 1) == [1, 2, 3, 4, 5, 6]

    def test_step_that_overshoots_upper(self) -> None:
        assert make_range(2, 9, 2) == [2, 4, 6, 8]

    def test_single_value(self) -> None:
        assert make_range(5, 5, 1) == [5]

    def test_empty_when_lower_above_upper(self) -> None:
        assert make_range(3, 2, 1) == []

    @pytest.mark.parametrize("step", [0, -0.5])
    def test_rejects_non_positive_step(self, step: float) -> None:
        with pytest.raises(ValueError):
            make_range(0, 1, step)

    def test_float_range_stays_within_bounds(self) -> None:
        values = make_range(0.8, 1.2, 0.01)
        assert values[0] == 0.8
        assert all(0.8 <= v <= 1.2 for v in values)
        # Accumulated drift may drop the final endpoint
        assert len(values) in (40, 41)


class TestBuildSpace:
    """Tests for build_space."""

    def test_set_keeps_declared_order(self) -> None:
        space = build_space(make_candidate_set(ValueKind.INT64, [8, 2, 4]))
        assert space.kind is CandidateKind.SET
        assert space.values == (8, 2, 4)
        assert len(space) == 3
        assert 2 in space
        assert 3 not in space

    def test_empty_set_rejected(self) -> None:
        with pytest.raises(EmptyCandidateSpaceError):
            build_space(make_candidate_set(ValueKind.INT64, []))

    def test_closed_range(self) -> None:
        space = build_space(make_candidate_range(ValueKind.INT64, 1, 6, 1))
        assert space.values == (1, 2, 3, 4, 5, 6)
        assert (space.lower, space.upper) == (1, 6)

    def test_open_bounds_move_inward_one_step(self) -> None:
        space = build_space(
            make_candidate_range(ValueKind.INT64, 1, 10, 1, open_lower=True, open_upper=True)
        )
        assert space.values == (2, 3, 4, 5, 6, 7, 8, 9)
        assert (space.lower, space.upper) == (2, 9)

    def test_open_lower_only(self) -> None:
        space = build_space(make_candidate_range(ValueKind.INT64, 0, 4, 2, open_lower=True))
        assert space.values == (2, 4)

    def test_open_range_collapsing_to_nothing(self) -> None:
        with pytest.raises(EmptyCandidateSpaceError):
            build_space(
                make_candidate_range(ValueKind.INT64, 1, 2, 1, open_lower=True, open_upper=True)
            )

    def test_range_without_generated_values_rejected(self) -> None:
        descriptor = make_candidate_range(ValueKind.DOUBLE, 0.0, 1.0, 0.5)
        # Skip descriptor validation to hand build_space a NaN bound
        object.__setattr__(descriptor, "candidates", CandidateRange(float("nan"), 1.0, 0.5))
        with pytest.raises(EmptyCandidateSpaceError, match="no candidates"):
            build_space(descriptor)

    def test_open_range_collapsing_to_one_value(self) -> None:
        space = build_space(
            make_candidate_range(ValueKind.INT64, 1, 3, 1, open_lower=True, open_upper=True)
        )
        assert space.values == (2,)

    def test_float_range_within_adjusted_bounds(self) -> None:
        space = build_space(
            make_candidate_range(ValueKind.DOUBLE, 10.0, 50.0, 0.1, open_upper=True)
        )
        assert space.lower == 10.0
        assert space.upper == pytest.approx(49.9)
        assert all(space.lower <= v <= space.upper for v in space.values)
        assert 399 <= len(space) <= 400

    def test_unbounded_space(self) -> None:
        space = build_space(make_unbounded(ValueKind.INT64))
        assert not space.bounded
        assert len(space) == 0
        assert 12345 in space
        assert space.describe() == "unbounded"


class TestSampling:
    """Tests for CandidateSpace.sample."""

    def test_samples_only_candidates(self, rng: np.random.Generator) -> None:
        space = build_space(make_candidate_set(ValueKind.STRING, ["a", "b", "c"]))
        draws = [space.sample(rng) for _ in range(200)]
        assert set(draws) <= {"a", "b", "c"}

    def test_every_candidate_reachable(self, rng: np.random.Generator) -> None:
        space = build_space(make_candidate_range(ValueKind.INT64, 1, 6, 1))
        draws = {space.sample(rng) for _ in range(600)}
        assert draws == {1, 2, 3, 4, 5, 6}

    def test_uniform_over_index(self, rng: np.random.Generator) -> None:
        """Each candidate is drawn with roughly equal frequency."""
        space = build_space(make_candidate_set(ValueKind.INT64, [1, 100, 10_000]))
        draws = [space.sample(rng) for _ in range(3000)]
        for value in space.values:
            assert 800 < draws.count(value) < 1200

    def test_returns_plain_python_values(self, rng: np.random.Generator) -> None:
        space = build_space(make_candidate_range(ValueKind.INT64, 1, 6, 1))
        assert type(space.sample(rng)) is int

    def test_seeded_draws_reproducible(self) -> None:
        space = build_space(make_candidate_range(ValueKind.DOUBLE, 0.8, 1.2, 0.01))
        a = np.random.default_rng(7)
        b = np.random.default_rng(7)
        assert [space.sample(a) for _ in range(50)] == [space.sample(b) for _ in range(50)]

    def test_unbounded_cannot_be_sampled(self, rng: np.random.Generator) -> None:
        space = build_space(make_unbounded(ValueKind.DOUBLE))
        with pytest.raises(TuningError):
            space.sample(rng)


class TestDescribe:
    """Tests for human-readable space descriptions."""

    def test_set_description(self) -> None:
        space = build_space(make_candidate_set(ValueKind.INT64, [1, 2, 3]))
        assert space.describe() == "[1,2,3]"
        assert format_options("degree", space) == "Options for degree [1,2,3]"

    def test_range_description(self) -> None:
        space = build_space(make_candidate_range(ValueKind.DOUBLE, 10.0, 50.0, 0.1, open_upper=True))
        assert "lower: 10.0" in space.describe()
        assert "open upper: True" in space.describe()
        assert format_options("ratio", space) == "Options for ratio[10.0,50.0)"
