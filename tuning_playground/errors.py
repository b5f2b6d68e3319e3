"""Exceptions raised by the tuning engine.

Every error here is a contract violation by the calling harness. The engine
never retries or recovers from them; it detects the problem before touching
any state and raises immediately.
"""

from __future__ import annotations


class TuningError(RuntimeError):
    """Base class for all tuning engine errors."""

    pass


class UnknownVariableError(TuningError, KeyError):
    """Raised when a request names a variable id that was never declared."""

    def __init__(self, variable_id: int) -> None:
        self.variable_id = variable_id
        super().__init__(f"Variable {variable_id} has not been declared")

    def __str__(self) -> str:
        return self.args[0]


class UnknownContextError(TuningError, KeyError):
    """Raised when request/end names a context id that is not open."""

    def __init__(self, context_id: int) -> None:
        self.context_id = context_id
        super().__init__(f"Context {context_id} is not open")

    def __str__(self) -> str:
        return self.args[0]


class ContextStateError(TuningError):
    """Raised on a double open or a second request against the same context."""

    pass


class InvalidDescriptorError(TuningError, ValueError):
    """Raised when a variable descriptor is malformed."""

    pass


class EmptyCandidateSpaceError(InvalidDescriptorError):
    """Raised when a set or range materializes to no candidate values."""

    pass


class DuplicateVariableError(TuningError):
    """Raised on re-declaration of a variable id in strict mode."""

    pass
