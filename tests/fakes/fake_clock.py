"""Controllable stand-in for ``time.time``."""

from __future__ import annotations


class FrozenClock:
    """Returns ``now`` until told to advance."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
