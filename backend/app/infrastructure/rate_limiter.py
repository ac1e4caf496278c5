"""Rate Limiter — fixed-window request budget per client key.

Invariants:
    - At most max_requests allowed per key per window
    - Windows are aligned to the first request of the key, not wall-clock boundaries
    - State is per-process and in-memory; multi-worker deployments limit per worker

Design Decisions:
    - Fixed window over token bucket: matches the "100 requests per 15 minutes" contract
    - Expired windows are swept lazily on access, bounded by sweep_every
"""

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int


@dataclass
class _Window:
    started_at: float
    count: int


class FixedWindowRateLimiter:
    """In-memory fixed-window limiter keyed by client identifier."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 1000,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._sweep_every = sweep_every
        self._calls = 0

    def consume(self, key: str) -> RateLimitDecision:
        """Count one request against `key`. No awaits: safe on a single event loop."""
        now = self._clock()
        self._calls += 1
        if self._calls % self._sweep_every == 0:
            self._sweep(now)

        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            window = _Window(started_at=now, count=0)
            self._windows[key] = window

        reset_in = window.started_at + self.window_seconds - now
        if window.count >= self.max_requests:
            return RateLimitDecision(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                retry_after=max(1, math.ceil(reset_in)),
            )
        window.count += 1
        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - window.count,
            retry_after=0,
        )

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, w in self._windows.items()
            if now - w.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def reset(self) -> None:
        self._windows.clear()
