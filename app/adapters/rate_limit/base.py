"""Rate limiter interfaces.

The HTTP layer depends on this abstraction rather than on the in-memory
implementation, so a shared store can replace it without touching routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the client's current window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for per-client rate limiters."""

    @abstractmethod
    def consume(self, client_id: str, *, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for a client identity.

        Args:
            client_id: Unique identifier of the caller (network address).
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def tracked_clients(self) -> int:
        """Number of client identities with a live or stale window."""
        raise NotImplementedError

    def allow(self, client_id: str) -> bool:
        """Consume one unit and report whether the request may proceed."""
        return self.consume(client_id).allowed
