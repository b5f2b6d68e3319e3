"""Measurement episodes ("contexts") and their registry.

A context moves through three states:

    OPEN     created by begin; waiting for its single request
    RUNNING  variables bound, timer started; the workload runs outside the engine
    CLOSED   end called; elapsed time computed and the context dropped

Contexts hold variable ids, never Variable objects. Nesting is a caller
discipline: an outer context simply stays in the registry while an inner one
opens and closes. Nothing here checks or records parent/child relations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .errors import ContextStateError, UnknownContextError


class ContextState(Enum):
    OPEN = "open"
    RUNNING = "running"
    CLOSED = "closed"


@dataclass
class Context:
    """One timed measurement episode.

    Attributes:
        id: Identifier, unique while the context is open.
        input_ids: Bound input variable ids, in request order.
        output_ids: Bound output variable ids, in request order.
        start_ns: Timer start, set by start().
        state: Current lifecycle state.
        tuned: Whether the engine assigned output values in this episode.
    """

    id: int
    input_ids: list[int] = field(default_factory=list)
    output_ids: list[int] = field(default_factory=list)
    start_ns: int | None = None
    state: ContextState = ContextState.OPEN
    tuned: bool = False

    def bind(self, input_ids: Sequence[int], output_ids: Sequence[int]) -> None:
        if self.state is not ContextState.OPEN:
            raise ContextStateError(
                f"Context {self.id} already requested values (state: {self.state.value})"
            )
        self.input_ids.extend(input_ids)
        self.output_ids.extend(output_ids)

    def start(self, now_ns: int) -> None:
        self.start_ns = now_ns
        self.state = ContextState.RUNNING

    def stop(self, now_ns: int) -> int:
        """Close the episode and return its elapsed nanoseconds.

        A context that never started has nothing bound and reports zero.
        """
        elapsed = 0 if self.start_ns is None else now_ns - self.start_ns
        self.state = ContextState.CLOSED
        return elapsed


class ContextRegistry:
    """Flat keyed store of open contexts.

    Overlapping lifetimes are allowed; ordering between different ids is the
    caller's business. Not synchronized; TuningEngine serializes access.
    """

    def __init__(self) -> None:
        self._contexts: dict[int, Context] = {}

    def open(self, context_id: int) -> Context:
        if context_id in self._contexts:
            raise ContextStateError(f"Context {context_id} is already open")
        context = Context(context_id)
        self._contexts[context_id] = context
        return context

    def get(self, context_id: int) -> Context:
        try:
            return self._contexts[context_id]
        except KeyError:
            raise UnknownContextError(context_id) from None

    def close(self, context_id: int) -> Context:
        """Remove and return a context; its id becomes free for reuse."""
        try:
            return self._contexts.pop(context_id)
        except KeyError:
            raise UnknownContextError(context_id) from None

    def ids(self) -> list[int]:
        return list(self._contexts)

    def __contains__(self, context_id: object) -> bool:
        return context_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)
