"""Tests for the declaration shortcuts."""

from __future__ import annotations

import logging

import pytest

from tuning_playground import TuningEngine
from tuning_playground.declarations import (
    Schedule,
    create_categorical_int_tuner,
    declare_input_view_size,
    declare_output_continuous,
    declare_output_range,
    declare_output_schedules,
    declare_output_thread_count,
    declare_output_tile_size,
    factors_of,
)
from tuning_playground.values import CandidateKind, CandidateRange, Role, StatisticalCategory, ValueKind


class TestFactorsOf:
    """Tests for factors_of."""

    def test_factors(self) -> None:
        assert factors_of(12) == [1, 2, 3, 4, 6, 12]
        assert factors_of(1) == [1]
        assert factors_of(13) == [1, 13]

    def test_rejects_non_positive(self) -> None:
        with pytest.raises(ValueError):
            factors_of(0)


class TestOutputRange:
    """Tests for declare_output_range."""

    def test_integer_range(self, engine: TuningEngine) -> None:
        vid = declare_output_range(engine, "Chebyshev: Degree", 1, 6, 1)
        var = engine.variables.get(vid)
        assert var.descriptor.value_kind is ValueKind.INT64
        assert var.descriptor.category is StatisticalCategory.ORDINAL
        assert var.descriptor.candidate_kind is CandidateKind.SET
        assert var.space.values == (1, 2, 3, 4, 5, 6)

    def test_float_range(self, engine: TuningEngine) -> None:
        vid = declare_output_range(engine, "damping", 0.5, 1, 0.25)
        var = engine.variables.get(vid)
        assert var.descriptor.value_kind is ValueKind.DOUBLE
        assert var.space.values == (0.5, 0.75, 1.0)

    def test_rejects_non_numeric(self, engine: TuningEngine) -> None:
        with pytest.raises(TypeError):
            declare_output_range(engine, "bad", "1", 6, 1)

    def test_logs_options(self, engine: TuningEngine, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="tuning_playground")
        declare_output_range(engine, "sweeps", 1, 2, 1)
        assert "Options for sweeps [1,2]" in caplog.text


class TestOutputContinuous:
    """Tests for declare_output_continuous."""

    def test_interval_range(self, engine: TuningEngine) -> None:
        vid = declare_output_continuous(engine, "ratio", 10.0, 50.0, 0.1, open_upper=True)
        var = engine.variables.get(vid)
        assert var.descriptor.category is StatisticalCategory.INTERVAL
        assert var.descriptor.candidate_kind is CandidateKind.RANGE
        assert var.descriptor.candidates == CandidateRange(10.0, 50.0, 0.1, False, True)
        assert max(var.space.values) < 50.0

    def test_logs_interval_notation(self, engine: TuningEngine, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="tuning_playground")
        declare_output_continuous(engine, "damping", 0.8, 1.2, 0.01, True, False)
        assert "Options for damping(0.8,1.2]" in caplog.text


class TestKernelShortcuts:
    """Tests for the kernel-oriented shortcuts."""

    def test_tile_size(self, engine: TuningEngine) -> None:
        vid = declare_output_tile_size(engine, "tile", 16)
        var = engine.variables.get(vid)
        assert var.space.values == (1, 2, 4, 8, 16)
        assert var.descriptor.category is StatisticalCategory.ORDINAL

    def test_view_size_is_input(self, engine: TuningEngine) -> None:
        vid = declare_input_view_size(engine, "view size", 1024)
        var = engine.variables.get(vid)
        assert var.role is Role.INPUT
        assert var.space.values == (1024,)

    def test_schedules(self, engine: TuningEngine) -> None:
        vid = declare_output_schedules(engine, "schedule")
        var = engine.variables.get(vid)
        assert var.space.values == (Schedule.STATIC, Schedule.DYNAMIC)
        assert var.descriptor.category is StatisticalCategory.CATEGORICAL

    def test_thread_count(self, engine: TuningEngine) -> None:
        vid = declare_output_thread_count(engine, "threads", 9)
        assert engine.variables.get(vid).space.values == (2, 4, 6, 8)

    def test_categorical_int_tuner(self, engine: TuningEngine) -> None:
        vid = create_categorical_int_tuner(engine, "implementation", 3)
        var = engine.variables.get(vid)
        assert var.space.values == (0, 1, 2)
        assert var.descriptor.category is StatisticalCategory.CATEGORICAL

    def test_categorical_int_tuner_needs_options(self, engine: TuningEngine) -> None:
        with pytest.raises(ValueError):
            create_categorical_int_tuner(engine, "none", 0)
