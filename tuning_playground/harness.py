"""Benchmark driver for tuned kernels.

run_tuned_kernel runs a setup step once and then calls a tunable body for a
fixed number of iterations, handing it whatever the setup produced:

    def setup(num_iters):
        return make_matrix(1024), make_matrix(1024)

    def tunable(iteration, num_iters, a, b):
        with engine.context(outputs=[tile]) as values:
            multiply(a, b, tile=values[tile])

    run_tuned_kernel(setup, tunable, num_iters=1000)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

DEFAULT_ITERATIONS = 1000


def run_tuned_kernel(
    setup: Callable[[int], Any],
    tunable: Callable[..., Any],
    num_iters: int = DEFAULT_ITERATIONS,
) -> int:
    """Run setup once, then tunable(iteration, num_iters, *data) per iteration.

    A setup that returns None passes no extra arguments; a tuple is splatted;
    any other value is passed as a single argument.

    Returns:
        Number of iterations run.
    """
    if num_iters < 0:
        raise ValueError(f"num_iters must be non-negative, got {num_iters}")
    data = setup(num_iters)
    if data is None:
        args: tuple[Any, ...] = ()
    elif isinstance(data, tuple):
        args = data
    else:
        args = (data,)
    for iteration in range(num_iters):
        tunable(iteration, num_iters, *args)
    return num_iters
