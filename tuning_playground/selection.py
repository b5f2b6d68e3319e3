"""fastest_of: tune the choice between several implementations.

SelectionHelper declares, per label, one categorical output variable over
the indices of the alternatives, plus a shared unbounded input variable
identifying the call site. Each call opens a context, asks the engine which
alternative to run, runs it, and closes the context, so the whole run of the
chosen alternative (including any context it opens itself) is timed against
the selection.

When the engine offers no preference (a negative or missing selection, as
when tuning is disabled), the helper walks the alternatives round-robin with
a cursor kept per label.

The selection and any tuners inside the alternatives are separate greedy
best-trackers. They share the timing signal but nothing else; this is not a
joint optimization.

Usage:
    helper = SelectionHelper(engine)
    for _ in range(300):
        helper.fastest_of("meta-smoother", [chebyshev, mt_gauss_seidel, two_stage_gauss_seidel])
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

from .declarations import create_categorical_int_tuner
from .engine import TuningEngine
from .errors import InvalidDescriptorError
from .values import ValueKind, make_unbounded

logger = logging.getLogger(__name__)

T = TypeVar("T")

SELECTION_INPUT_NAME = "fastest_implementation_of"


class SelectionHelper:
    """Per-label implementation selection layered over a TuningEngine."""

    def __init__(self, engine: TuningEngine) -> None:
        self.engine = engine
        self._lock = threading.Lock()
        self._input_id: int | None = None
        # label -> (selection variable id, number of alternatives, call-site ordinal)
        self._selectors: dict[str, tuple[int, int, int]] = {}
        self._cursors: dict[str, int] = {}

    def selection_variable(self, label: str) -> int | None:
        """Id of the selection variable declared for label, if any."""
        with self._lock:
            entry = self._selectors.get(label)
        return entry[0] if entry else None

    def _selector_for(self, label: str, count: int) -> tuple[int, int, int]:
        with self._lock:
            if self._input_id is None:
                self._input_id = self.engine.declare_input_type(
                    SELECTION_INPUT_NAME, make_unbounded(ValueKind.INT64)
                )
            entry = self._selectors.get(label)
            if entry is None:
                var_id = create_categorical_int_tuner(self.engine, label, count)
                entry = (var_id, count, len(self._selectors))
                self._selectors[label] = entry
            elif entry[1] != count:
                raise InvalidDescriptorError(
                    f"fastest_of({label!r}) was first called with {entry[1]} alternatives, now {count}"
                )
            return self._input_id, entry[0], entry[2]

    def _next_round_robin(self, label: str, count: int) -> int:
        with self._lock:
            index = self._cursors.get(label, 0)
            self._cursors[label] = (index + 1) % count
        return index

    def fastest_of(self, label: str, alternatives: Sequence[Callable[[], T]]) -> T:
        """Run one of the alternatives, chosen by the engine, and time it.

        Args:
            label: Name of this selection point; one selection variable per label.
            alternatives: Zero-argument callables to choose between. Must have
                the same length on every call with the same label.

        Returns:
            Whatever the chosen alternative returns.

        Raises:
            InvalidDescriptorError: If label or alternatives is empty, or if
                the number of alternatives changed for this label.
        """
        if not label:
            raise InvalidDescriptorError("fastest_of needs a non-empty label")
        count = len(alternatives)
        if count == 0:
            raise InvalidDescriptorError(f"fastest_of({label!r}) needs at least one alternative")

        input_id, selection_id, call_site = self._selector_for(label, count)
        with self.engine.context(
            inputs=[(input_id, call_site)],
            outputs=[selection_id],
            defaults={selection_id: -1},
        ) as values:
            choice = values.get(selection_id)
            if choice is None or choice < 0:
                choice = self._next_round_robin(label, count)
                logger.debug("fastest_of %s: no preference, round-robin -> %d", label, choice)
            else:
                logger.debug("fastest_of %s: engine picked %d", label, choice)
            return alternatives[choice]()
