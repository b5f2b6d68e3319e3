"""Engine settings and logging setup.

Settings can be built directly or read from the environment:

    TUNING_PLAYGROUND_VERBOSE   any value enables the per-call debug trace
    TUNING_PLAYGROUND_SEED      integer seed for candidate sampling
    TUNING_PLAYGROUND_DISABLE   "1" runs the engine as a pass-through
    TUNING_PLAYGROUND_STRICT    "1" rejects re-declaration of a variable id

Usage:
    from tuning_playground.config import TunerSettings, configure_logging

    settings = TunerSettings.from_env()
    configure_logging(settings.verbose)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_PREFIX = "TUNING_PLAYGROUND_"
VERBOSE_ENV = ENV_PREFIX + "VERBOSE"
SEED_ENV = ENV_PREFIX + "SEED"
DISABLE_ENV = ENV_PREFIX + "DISABLE"
STRICT_ENV = ENV_PREFIX + "STRICT"

_TRUTHY = {"1", "true", "yes", "on"}

_PACKAGE_LOGGER = "tuning_playground"
_LOG_FORMAT = "%(name)s: %(message)s"


def _env_flag(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class TunerSettings:
    """Runtime settings for a TuningEngine.

    Attributes:
        enabled: When False the engine records contexts and timings but hands
            every caller default back unchanged, like a host application with
            no tuning tool loaded.
        verbose: Emit the per-call debug trace.
        seed: Seed for the sampling generator. None draws fresh entropy.
        strict_redeclare: Reject re-declaration of an existing variable id
            instead of overwriting it.
    """

    enabled: bool = True
    verbose: bool = False
    seed: int | None = None
    strict_redeclare: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> TunerSettings:
        """Build settings from environment variables.

        Args:
            env: Mapping to read from. Defaults to os.environ.

        Returns:
            TunerSettings populated from the environment.

        Raises:
            ValueError: If the seed variable is set but is not an integer.
        """
        if env is None:
            env = os.environ

        seed: int | None = None
        raw_seed = env.get(SEED_ENV, "").strip()
        if raw_seed:
            try:
                seed = int(raw_seed)
            except ValueError:
                raise ValueError(f"{SEED_ENV} must be an integer, got {raw_seed!r}") from None

        return cls(
            enabled=not _env_flag(env, DISABLE_ENV),
            # Presence alone turns the trace on
            verbose=env.get(VERBOSE_ENV) is not None,
            seed=seed,
            strict_redeclare=_env_flag(env, STRICT_ENV),
        )


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Safe to call repeatedly; only one handler is ever installed.

    Args:
        verbose: DEBUG level when True, WARNING otherwise.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(getattr(h, "_tuning_playground", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._tuning_playground = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
