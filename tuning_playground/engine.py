"""TuningEngine: the declare/begin/request/end/finalize facade.

The engine owns a VariableRegistry and a ContextRegistry. A harness declares
its variables once, then wraps each instrumented region in a context:

    engine = TuningEngine(TunerSettings(seed=0))
    degree = engine.declare_output_type(
        "Chebyshev: Degree", make_candidate_range(ValueKind.INT64, 1, 6, 1)
    )

    for _ in range(300):
        with engine.context(outputs=[degree]) as values:
            run_smoother(values[degree])

    print(engine.finalize().format())

Sampling is uniform random over each output variable's candidate space. The
engine remembers, per output variable, the value assigned during the
shortest episode that bound it. Variables are tuned independently: there is
no joint search across variables, and no guarantee of reaching an optimum.

Nested contexts are timed independently. An outer context's duration
includes all the work of any inner context that ran inside it.

All registry access is serialized by one engine-wide lock, so an engine may
be shared between threads. The workload itself runs outside the lock.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import numpy as np

from .config import TunerSettings, configure_logging
from .context import ContextRegistry, ContextState
from .errors import ContextStateError, DuplicateVariableError, TuningError
from .space import format_options
from .values import Role, VariableDescriptor, VariableValue
from .variable import Variable, VariableRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
InputPairs = Iterable["VariableValue | tuple[int, Any]"]

_BANNER = "*" * 80


@dataclass(frozen=True)
class BestValue:
    """Best value found for one output variable."""

    variable_id: int
    name: str
    value: Any
    best_time_ns: int | None

    @property
    def best_time_us(self) -> float | None:
        if self.best_time_ns is None:
            return None
        return self.best_time_ns / 1000.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.variable_id,
            "name": self.name,
            "value": self.value,
            "best_time_ns": self.best_time_ns,
        }


@dataclass(frozen=True)
class TuningReport:
    """Result of TuningEngine.finalize()."""

    entries: tuple[BestValue, ...]
    variables_declared: int

    @property
    def empty(self) -> bool:
        return self.variables_declared == 0

    def get(self, name: str) -> BestValue | None:
        """Entry for the output variable with this name, if any."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def format(self) -> str:
        if self.empty:
            return f"{_BANNER}\nNo variables tuned! Was the engine attached to the workload?\n{_BANNER}"
        lines = ["Best values found:", _BANNER]
        for entry in self.entries:
            if entry.best_time_ns is None:
                lines.append(f"No measurement for variable {entry.name}")
            else:
                lines.append(f"Best random value for variable {entry.name}: {entry.value}")
        lines.append(_BANNER)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variables_declared": self.variables_declared,
            "best": [entry.to_dict() for entry in self.entries],
        }


class TuningEngine:
    """Online best-effort autotuner for timed measurement episodes.

    Args:
        settings: Engine settings. Defaults to TunerSettings().
        clock: Nanosecond clock used for episode timing.
            Defaults to time.perf_counter_ns.
        rng: Generator used for sampling. Defaults to one seeded from
            settings.seed.
    """

    def __init__(
        self,
        settings: TunerSettings | None = None,
        *,
        clock: Clock | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.settings = settings if settings is not None else TunerSettings()
        self._clock = clock if clock is not None else time.perf_counter_ns
        self._rng = rng if rng is not None else np.random.default_rng(self.settings.seed)
        self._variables = VariableRegistry()
        self._contexts = ContextRegistry()
        self._lock = threading.RLock()
        self._variable_ids = itertools.count()
        self._context_ids = itertools.count()
        if self.settings.verbose:
            configure_logging(verbose=True)

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def declare_variable(
        self,
        name: str,
        variable_id: int,
        descriptor: VariableDescriptor,
        role: Role = Role.OUTPUT,
    ) -> Variable:
        """Register a variable under a caller-chosen id.

        Re-declaring an id replaces the earlier variable (and its history)
        unless settings.strict_redeclare is set.

        Raises:
            EmptyCandidateSpaceError: If the descriptor yields no candidates.
            DuplicateVariableError: On re-declaration in strict mode.
        """
        variable = Variable.declare(variable_id, name, descriptor, role)
        with self._lock:
            if variable_id in self._variables:
                if self.settings.strict_redeclare:
                    raise DuplicateVariableError(f"Variable {variable_id} is already declared")
                logger.warning(
                    "Re-declaring variable %s (%s); previous state is discarded",
                    variable_id,
                    name,
                )
            self._variables.put(variable)
        logger.debug("declare %s variable %s\n%s", role.value, name, variable.describe())
        if variable.is_output and variable.space.bounded:
            logger.debug(format_options(name, variable.space))
        return variable

    def declare_output_type(self, name: str, descriptor: VariableDescriptor) -> int:
        """Declare an output variable under the next free id and return the id."""
        with self._lock:
            variable_id = self._allocate_variable_id()
            self.declare_variable(name, variable_id, descriptor, Role.OUTPUT)
        return variable_id

    def declare_input_type(self, name: str, descriptor: VariableDescriptor) -> int:
        """Declare an input variable under the next free id and return the id."""
        with self._lock:
            variable_id = self._allocate_variable_id()
            self.declare_variable(name, variable_id, descriptor, Role.INPUT)
        return variable_id

    def _allocate_variable_id(self) -> int:
        while True:
            candidate = next(self._variable_ids)
            if candidate not in self._variables:
                return candidate

    # ------------------------------------------------------------------
    # Context lifecycle
    # ------------------------------------------------------------------

    def new_context_id(self) -> int:
        """Return a context id that is not currently open."""
        with self._lock:
            while True:
                candidate = next(self._context_ids)
                if candidate not in self._contexts:
                    return candidate

    def begin_context(self, context_id: int) -> None:
        """Open a context.

        Raises:
            ContextStateError: If the id is already open.
        """
        with self._lock:
            self._contexts.open(context_id)
        logger.debug("begin_context %s", context_id)

    def request_values(
        self,
        context_id: int,
        inputs: InputPairs = (),
        outputs: Iterable[int] = (),
        defaults: Mapping[int, Any] | None = None,
    ) -> dict[int, Any]:
        """Bind variables to an open context, assign outputs, and start its timer.

        Args:
            context_id: An open context.
            inputs: (input id, current value) pairs describing the episode.
            outputs: Ids of the output variables to assign.
            defaults: The caller's current value per output id. Unbounded
                outputs, and every output when the engine is disabled, hand
                this value back unchanged (None if absent).

        Returns:
            Mapping of output id to the value to use for this episode.

        Raises:
            UnknownContextError: If the context is not open.
            ContextStateError: If values were already requested for it.
            UnknownVariableError: If any id was never declared.
        """
        input_values = [VariableValue(*pair) for pair in inputs]
        output_ids = list(outputs)
        defaults = dict(defaults) if defaults is not None else {}

        with self._lock:
            context = self._contexts.get(context_id)
            if context.state is not ContextState.OPEN:
                raise ContextStateError(f"Context {context_id} already requested values")
            input_vars = [self._variables.get(v.type_id) for v in input_values]
            output_vars = [self._variables.get(vid) for vid in output_ids]
            for var in output_vars:
                if not var.is_output:
                    raise TuningError(f"Variable {var.id} ({var.name}) is an input, not an output")

            logger.debug(
                "request_values context %s: inputs %s outputs %s",
                context_id,
                [v.type_id for v in input_values],
                output_ids,
            )
            context.bind([v.type_id for v in input_values], output_ids)
            for var, given in zip(input_vars, input_values):
                var.observe(given.value)

            values: dict[int, Any] = {}
            if self.settings.enabled:
                for var in output_vars:
                    values[var.id] = var.assign_new_value(self._rng, defaults.get(var.id))
            else:
                for vid in output_ids:
                    values[vid] = defaults.get(vid)
            context.tuned = self.settings.enabled
            context.start(self._clock())
        return values

    def end_context(self, context_id: int, record: bool = True) -> int:
        """Stop a context's timer, credit its outputs, and drop it.

        Args:
            context_id: An open context.
            record: When False the context is closed without touching any
                best-value bookkeeping (used when the workload failed).

        Returns:
            Elapsed nanoseconds since the context's request.

        Raises:
            UnknownContextError: If the context is not open (including a
                second end for the same id).
        """
        now = self._clock()
        with self._lock:
            context = self._contexts.close(context_id)
            elapsed = context.stop(now)
            if record and context.tuned:
                for vid in context.output_ids:
                    var = self._variables.get(vid)
                    if var.update_best(elapsed):
                        logger.debug("New best for %s: %s (%d ns)", var.name, var.best_value, elapsed)
        logger.debug("end_context %s: %d ns", context_id, elapsed)
        return elapsed

    @contextmanager
    def context(
        self,
        inputs: InputPairs = (),
        outputs: Iterable[int] = (),
        defaults: Mapping[int, Any] | None = None,
        context_id: int | None = None,
    ) -> Iterator[dict[int, Any]]:
        """Scoped episode: begin, request, yield the values, always end.

        If the body raises, the context is still closed but the failed run is
        not credited to any variable.
        """
        cid = self.new_context_id() if context_id is None else context_id
        self.begin_context(cid)
        try:
            values = self.request_values(cid, inputs, outputs, defaults)
            yield values
        except BaseException:
            self.end_context(cid, record=False)
            raise
        else:
            self.end_context(cid)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @property
    def variables(self) -> VariableRegistry:
        return self._variables

    def open_context_ids(self) -> list[int]:
        with self._lock:
            return self._contexts.ids()

    def finalize(self) -> TuningReport:
        """Report the best value found for every declared output variable.

        Never raises. An empty registry produces the "No variables tuned!"
        report.
        """
        with self._lock:
            leaked = self._contexts.ids()
            entries = tuple(
                BestValue(
                    variable_id=var.id,
                    name=var.name,
                    value=var.best_value,
                    best_time_ns=var.best_time_ns if var.has_measurement else None,
                )
                for var in self._variables.outputs()
            )
            report = TuningReport(entries=entries, variables_declared=len(self._variables))
        if leaked:
            logger.warning("%d context(s) never ended: %s", len(leaked), leaked)
        logger.info("%s", report.format())
        return report

    def __enter__(self) -> TuningEngine:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.finalize()
