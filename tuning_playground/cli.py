"""Command-line interface for the tuning playground demos."""

import json

import click

from .config import TunerSettings, configure_logging
from .demos import (
    DEFAULT_EPISODES,
    SIMPLE_TARGETS,
    SMOOTHER_TARGETS,
    format_targets,
    run_meta_smoother,
    run_meta_smoother_discrete,
    run_simple,
)
from .engine import TuningEngine

BANNER = "-" * 80


def demo_options(func):
    """Options shared by every demo command."""
    func = click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")(func)
    func = click.option("--verbose", "-v", is_flag=True, help="Trace every engine call")(func)
    func = click.option("--seed", default=None, type=int, help="Seed for candidate sampling")(func)
    func = click.option(
        "--iterations", "-n", default=DEFAULT_EPISODES, type=click.IntRange(min=0), show_default=True
    )(func)
    return func


def _settings(seed, verbose):
    try:
        env = TunerSettings.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    return TunerSettings(
        enabled=env.enabled,
        verbose=verbose or env.verbose,
        seed=seed if seed is not None else env.seed,
        strict_redeclare=env.strict_redeclare,
    )


def _run(demo, targets, iterations, seed, verbose, as_json):
    settings = _settings(seed, verbose)
    configure_logging(settings.verbose)

    if not as_json:
        click.echo(f"\nTarget values:\n{BANNER}")
        click.echo(format_targets(targets))
        click.echo(f"{BANNER}\n")

    report = demo(TuningEngine(settings), iterations=iterations)

    if as_json:
        payload = report.to_dict()
        payload["targets"] = dict(targets)
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(report.format())


@click.group()
def cli():
    """Tuning playground: online random-search autotuning demos."""


@cli.command()
@demo_options
def simple(iterations, seed, verbose, as_json):
    """Tune one integer over [1,6] toward 5."""
    _run(run_simple, SIMPLE_TARGETS, iterations, seed, verbose, as_json)


@cli.command("meta-smoother")
@demo_options
def meta_smoother(iterations, seed, verbose, as_json):
    """Pick the fastest of three simulated smoothers and tune each one."""
    _run(run_meta_smoother, SMOOTHER_TARGETS, iterations, seed, verbose, as_json)


@cli.command("meta-smoother-discrete")
@demo_options
def meta_smoother_discrete(iterations, seed, verbose, as_json):
    """Select a smoother in an outer context and tune it in an inner one."""
    _run(run_meta_smoother_discrete, SMOOTHER_TARGETS, iterations, seed, verbose, as_json)


if __name__ == "__main__":
    cli()
