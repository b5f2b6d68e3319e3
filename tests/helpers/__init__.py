"""Test helpers for tuning playground tests."""

from __future__ import annotations

from .fake_clock import FakeClock

__all__ = [
    "FakeClock",
]
