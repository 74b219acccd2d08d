"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

from datetime import datetime
from typing import Protocol

import pendulum


class Clock(Protocol):
    """Port: the source of "now" for relative date ranges."""

    def now(self) -> pendulum.DateTime: ...


class SystemClock:
    """Production clock that reads the wall clock in *timezone*."""

    def __init__(self, timezone: str = "UTC") -> None:
        self._timezone = timezone

    def now(self) -> pendulum.DateTime:
        return pendulum.now(self._timezone)


class FrozenClock:
    """Test clock pinned to a fixed point in time."""

    def __init__(self, fixed: datetime) -> None:
        self._fixed = pendulum.instance(fixed)

    def now(self) -> pendulum.DateTime:
        return self._fixed

    def advance(self, **kwargs: int) -> None:
        """Move the frozen time forward, e.g. ``advance(days=1)``."""
        self._fixed = self._fixed.add(**kwargs)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
