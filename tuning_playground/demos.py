"""Simulated workloads that exercise the engine end to end.

Nothing here computes anything. Each "kernel" turns the values the engine
assigned into a delay in microseconds that grows with the distance from a
known target, and sleeps for that long. A good tuner should report values
near the targets.

Three demos are provided:

- run_simple: one integer variable over [1,6], target 5.
- run_meta_smoother: three simulated smoothers with their own parameters,
  selected first through fastest_of and then through an explicit outer
  context.
- run_meta_smoother_discrete: an outer context picks the smoother and an
  inner context sets up its parameters. The simulated solve runs inside both
  contexts, so both are charged for it.

Usage:
    engine = TuningEngine(TunerSettings(seed=0))
    report = run_meta_smoother(engine, iterations=300)
    print(report.format())
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .declarations import declare_output_continuous, declare_output_range
from .engine import TuningEngine, TuningReport
from .selection import SelectionHelper
from .values import ValueKind, make_candidate_range, make_unbounded

logger = logging.getLogger(__name__)

SleepFn = Callable[[int], Any]

DEFAULT_EPISODES = 300

KERNEL_NAME = "kernel_name"
KERNEL_TYPE = "kernel_type"
PARALLEL_FOR = "parallel_for"

SIMPLE_VARIABLE = "Simple: Degree"
IMPLEMENTATION_VARIABLE = "meta smoother: implementation"
META_SMOOTHER_LABEL = "meta-smoother"

SIMPLE_TARGETS: list[tuple[str, Any]] = [(SIMPLE_VARIABLE, 5)]

SMOOTHER_TARGETS: list[tuple[str, Any]] = [
    ("Chebyshev: Degree", 5),
    ("Chebyshev: Eigenvalue Ratio", 15),
    ("Chebyshev: Maximum Iterations", 75),
    ("Multi-threaded Gauss-Seidel: Number of Sweeps", 1),
    ("Multi-threaded Gauss-Seidel: Damping Factor", 0.9),
    ("Two-Stage Gauss-Seidel: Number of Sweeps", 2),
    ("Two-Stage Gauss-Seidel: Inner Damping Factor", 1.1),
]


def sleep_microseconds(delay_us: int) -> None:
    time.sleep(delay_us / 1_000_000)


def format_targets(targets: list[tuple[str, Any]]) -> str:
    return "\n".join(f"{name} target value: {value}" for name, value in targets)


# Delay models, in microseconds


def simple_delay(x: int) -> int:
    return 1 + abs(5 - x) * 750


def chebyshev_delay(degree: int, ratio: float, max_iterations: int) -> int:
    return int(1 + abs(5 - degree) * 750 + abs(15.0 - ratio) * 25 + abs(75 - max_iterations) * 10)


def mt_gauss_seidel_delay(sweeps: int, damping: float) -> int:
    return int(1 + abs(1 - sweeps) * 100 + abs(0.9 - damping) * 100)


def two_stage_gauss_seidel_delay(sweeps: int, inner_damping: float) -> int:
    return int(1 + abs(2 - sweeps) * 100 + abs(1.1 - inner_damping) * 100)


class SmootherSuite:
    """The three simulated smoothers, declared lazily against one engine.

    Each smoother has a pair of descriptive string inputs (its kernel name
    and kernel type) and its own output parameters with a starting value.
    Variables are declared on first use and reused afterwards.
    """

    def __init__(self, engine: TuningEngine, sleep_us: SleepFn = sleep_microseconds) -> None:
        self.engine = engine
        self.sleep_us = sleep_us
        self._kernel_inputs: tuple[int, int] | None = None
        self._params: dict[str, list[tuple[int, Any]]] = {}

    def input_ids(self) -> tuple[int, int]:
        """Ids of the kernel name and kernel type inputs."""
        if self._kernel_inputs is None:
            self._kernel_inputs = (
                self.engine.declare_input_type(KERNEL_NAME, make_unbounded(ValueKind.STRING)),
                self.engine.declare_input_type(KERNEL_TYPE, make_unbounded(ValueKind.STRING)),
            )
        return self._kernel_inputs

    def kernel_inputs(self, kernel_name: str) -> list[tuple[int, str]]:
        name_id, type_id = self.input_ids()
        return [(name_id, kernel_name), (type_id, PARALLEL_FOR)]

    def _declare_chebyshev(self) -> list[tuple[int, Any]]:
        return [
            (declare_output_range(self.engine, "Chebyshev: Degree", 1, 6, 1), 3),
            (declare_output_continuous(self.engine, "Chebyshev: Eigenvalue Ratio", 10.0, 50.0, 0.1), 25.0),
            (declare_output_range(self.engine, "Chebyshev: Maximum Iterations", 5, 100, 1), 50),
        ]

    def _declare_mt_gauss_seidel(self) -> list[tuple[int, Any]]:
        return [
            (declare_output_range(self.engine, "Multi-threaded Gauss-Seidel: Number of Sweeps", 1, 2, 1), 2),
            (declare_output_continuous(self.engine, "Multi-threaded Gauss-Seidel: Damping Factor", 0.8, 1.2, 0.01), 1.0),
        ]

    def _declare_two_stage_gauss_seidel(self) -> list[tuple[int, Any]]:
        return [
            (declare_output_range(self.engine, "Two-Stage Gauss-Seidel: Number of Sweeps", 1, 2, 1), 2),
            (declare_output_continuous(self.engine, "Two-Stage Gauss-Seidel: Inner Damping Factor", 0.8, 1.2, 0.01), 1.0),
        ]

    def _parameters(self, kernel: str) -> list[tuple[int, Any]]:
        params = self._params.get(kernel)
        if params is None:
            declare = {
                "Chebyshev": self._declare_chebyshev,
                "Multi-threaded Gauss-Seidel": self._declare_mt_gauss_seidel,
                "Two-Stage Gauss-Seidel": self._declare_two_stage_gauss_seidel,
            }[kernel]
            params = declare()
            self._params[kernel] = params
        return params

    def _request(self, context_id: int, kernel: str) -> list[Any]:
        params = self._parameters(kernel)
        values = self.engine.request_values(
            context_id,
            inputs=self.kernel_inputs(kernel),
            outputs=[vid for vid, _ in params],
            defaults=dict(params),
        )
        return [values[vid] for vid, _ in params]

    # Setup only: request parameters on an already open context, return the delay.

    def setup_chebyshev(self, context_id: int) -> int:
        degree, ratio, max_iterations = self._request(context_id, "Chebyshev")
        return chebyshev_delay(degree, ratio, max_iterations)

    def setup_mt_gauss_seidel(self, context_id: int) -> int:
        sweeps, damping = self._request(context_id, "Multi-threaded Gauss-Seidel")
        return mt_gauss_seidel_delay(sweeps, damping)

    def setup_two_stage_gauss_seidel(self, context_id: int) -> int:
        sweeps, inner_damping = self._request(context_id, "Two-Stage Gauss-Seidel")
        return two_stage_gauss_seidel_delay(sweeps, inner_damping)

    # Full runs: own context, setup, then "run" the smoother.

    def _run(self, setup: Callable[[int], int]) -> int:
        context_id = self.engine.new_context_id()
        self.engine.begin_context(context_id)
        try:
            delay = setup(context_id)
            self.sleep_us(delay)
        except BaseException:
            self.engine.end_context(context_id, record=False)
            raise
        self.engine.end_context(context_id)
        return delay

    def chebyshev(self) -> int:
        return self._run(self.setup_chebyshev)

    def mt_gauss_seidel(self) -> int:
        return self._run(self.setup_mt_gauss_seidel)

    def two_stage_gauss_seidel(self) -> int:
        return self._run(self.setup_two_stage_gauss_seidel)

    def alternatives(self) -> list[Callable[[], int]]:
        return [self.chebyshev, self.mt_gauss_seidel, self.two_stage_gauss_seidel]

    def setups(self) -> list[Callable[[int], int]]:
        return [self.setup_chebyshev, self.setup_mt_gauss_seidel, self.setup_two_stage_gauss_seidel]


def run_simple(
    engine: TuningEngine,
    iterations: int = DEFAULT_EPISODES,
    sleep_us: SleepFn = sleep_microseconds,
) -> TuningReport:
    """Tune one integer over [1,6] whose cost is smallest at 5."""
    x = engine.declare_output_type(
        SIMPLE_VARIABLE, make_candidate_range(ValueKind.INT64, 1, 6, 1)
    )
    for _ in range(iterations):
        with engine.context(outputs=[x], defaults={x: 1}) as values:
            sleep_us(simple_delay(values[x]))
    return engine.finalize()


def _implementation_variable(suite: SmootherSuite) -> tuple[int, int]:
    loop_input = suite.input_ids()[0]
    implementation = declare_output_range(suite.engine, IMPLEMENTATION_VARIABLE, 0, 2, 1)
    return loop_input, implementation


def run_meta_smoother(
    engine: TuningEngine,
    iterations: int = DEFAULT_EPISODES,
    sleep_us: SleepFn = sleep_microseconds,
) -> TuningReport:
    """Pick among three smoothers, first with fastest_of, then explicitly.

    Each phase runs `iterations` episodes. In the explicit phase an outer
    context tunes "meta smoother: implementation" (0, 1 or 2, starting at 2)
    and every smoother still times itself in its own inner context.
    """
    suite = SmootherSuite(engine, sleep_us)
    helper = SelectionHelper(engine)

    logger.info("fastest_of() method")
    alternatives = suite.alternatives()
    for _ in range(iterations):
        helper.fastest_of(META_SMOOTHER_LABEL, alternatives)

    logger.info("Explicit method")
    loop_input, implementation = _implementation_variable(suite)
    for _ in range(iterations):
        with engine.context(
            inputs=[(loop_input, "meta smoother explicit search loop")],
            outputs=[implementation],
            defaults={implementation: 2},
        ) as values:
            choice = values[implementation]
            if choice == 0:
                suite.chebyshev()
            elif choice == 1:
                suite.mt_gauss_seidel()
            else:
                suite.two_stage_gauss_seidel()
    return engine.finalize()


def run_meta_smoother_discrete(
    engine: TuningEngine,
    iterations: int = DEFAULT_EPISODES,
    sleep_us: SleepFn = sleep_microseconds,
) -> TuningReport:
    """Outer context picks the smoother, inner context tunes its parameters.

    The simulated solve sleeps while both contexts are open, so the outer
    selection and the inner parameters are judged by the same elapsed time.
    The inner context always ends before the outer one.
    """
    suite = SmootherSuite(engine, sleep_us)
    setups = suite.setups()
    loop_input, implementation = _implementation_variable(suite)

    for _ in range(iterations):
        with engine.context(
            inputs=[(loop_input, "meta smoother explicit search loop")],
            outputs=[implementation],
            defaults={implementation: 2},
        ) as values:
            choice = values[implementation]
            setup = setups[choice] if choice in (0, 1) else setups[2]
            inner = engine.new_context_id()
            engine.begin_context(inner)
            try:
                delay = setup(inner)
                sleep_us(delay)
            except BaseException:
                engine.end_context(inner, record=False)
                raise
            engine.end_context(inner)
    return engine.finalize()
