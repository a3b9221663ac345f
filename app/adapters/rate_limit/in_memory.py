"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateWindow:
    """Request counter for one client within its current window."""

    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter allowing ``limit`` requests per ``window_seconds`` per client.

    Each client's window opens with its first request and closes
    ``window_seconds`` later; the next request after that opens a new window
    with a fresh counter.

    Important:
        This limiter is per-process only. With several Uvicorn/Gunicorn
        workers each worker enforces its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed units per window.
            window_seconds: Length of a window in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, RateWindow] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def _is_elapsed(self, window: RateWindow, now: float) -> bool:
        return now - window.window_start >= self._window_seconds

    def _prune_locked(self, now: float) -> int:
        stale = [cid for cid, w in self._windows.items() if self._is_elapsed(w, now)]
        for cid in stale:
            del self._windows[cid]
        return len(stale)

    def _current_window(self, client_id: str, now: float) -> RateWindow:
        window = self._windows.get(client_id)
        if window is None or self._is_elapsed(window, now):
            # Sweep elapsed windows whenever a new one opens
            self._prune_locked(now)
            window = RateWindow(window_start=now, count=0)
            self._windows[client_id] = window
        return window

    def consume(self, client_id: str, *, cost: int = 1) -> RateLimitResult:
        """Check the client's budget and record the request when allowed.

        Args:
            client_id: Caller identity (e.g., ``ip:10.0.0.1``).
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If client_id is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not client_id:
            raise ValueError("client_id must be a non-empty string")

        now = self._clock()

        with self._lock:
            window = self._current_window(client_id, now)
            reset_at = window.window_start + self._window_seconds

            if window.count + cost <= self._limit:
                window.count += cost
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=max(0, self._limit - window.count),
                    reset_at=int(math.ceil(reset_at)),
                    retry_after_seconds=None,
                )

            return RateLimitResult(
                allowed=False,
                limit=self._limit,
                remaining=max(0, self._limit - window.count),
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
            )

    def prune(self) -> int:
        """Drop windows that have already elapsed.

        Returns:
            Number of client windows removed.
        """
        now = self._clock()
        with self._lock:
            return self._prune_locked(now)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)
