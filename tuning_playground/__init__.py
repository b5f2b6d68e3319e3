"""Tuning playground: an online, best-effort autotuning engine.

A harness declares typed tuning variables, wraps each run of its workload in
a timed context, and lets the engine pick candidate values by uniform random
search. The engine remembers, per output variable, the value that gave the
shortest run.

Key exports:
- TuningEngine: declare/begin/request/end/finalize facade
- TunerSettings: engine settings, also readable from the environment
- SelectionHelper: fastest_of() over several implementations
- Descriptor factories: make_candidate_set, make_candidate_range, make_unbounded
"""

from .config import TunerSettings, configure_logging
from .declarations import (
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
from .engine import BestValue, TuningEngine, TuningReport
from .errors import (
    ContextStateError,
    DuplicateVariableError,
    EmptyCandidateSpaceError,
    InvalidDescriptorError,
    TuningError,
    UnknownContextError,
    UnknownVariableError,
)
from .harness import run_tuned_kernel
from .selection import SelectionHelper
from .space import CandidateSpace, build_space, format_options, make_range
from .values import (
    CandidateKind,
    CandidateRange,
    Role,
    StatisticalCategory,
    ValueKind,
    VariableDescriptor,
    VariableValue,
    make_candidate_range,
    make_candidate_set,
    make_unbounded,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "BestValue",
    "TunerSettings",
    "TuningEngine",
    "TuningReport",
    "configure_logging",
    # Variable metadata
    "CandidateKind",
    "CandidateRange",
    "CandidateSpace",
    "Role",
    "StatisticalCategory",
    "ValueKind",
    "VariableDescriptor",
    "VariableValue",
    "build_space",
    "format_options",
    "make_candidate_range",
    "make_candidate_set",
    "make_range",
    "make_unbounded",
    # Helpers
    "Schedule",
    "SelectionHelper",
    "create_categorical_int_tuner",
    "declare_input_view_size",
    "declare_output_continuous",
    "declare_output_range",
    "declare_output_schedules",
    "declare_output_thread_count",
    "declare_output_tile_size",
    "factors_of",
    "run_tuned_kernel",
    # Errors
    "ContextStateError",
    "DuplicateVariableError",
    "EmptyCandidateSpaceError",
    "InvalidDescriptorError",
    "TuningError",
    "UnknownContextError",
    "UnknownVariableError",
]
