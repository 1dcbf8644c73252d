"""Rate limiter interfaces.

The API depends on these abstractions (not the concrete implementation) so the
bucket store can move to a shared backend (e.g., Redis) when the service runs
on more than one process.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    """Counter state of one bucket.

    Attributes:
        key: Bucket identifier (limiter name, client identity and route).
        count: Requests admitted in the current window (starts at 1).
        reset_at_ms: Absolute time, in epoch milliseconds, when the window expires.
    """

    key: str
    count: int
    reset_at_ms: float

    def is_expired(self, now_ms: float) -> bool:
        return self.reset_at_ms <= now_ms


@dataclass(frozen=True)
class RateLimitResult:
    """Decision returned for one admission check.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests still admissible in the current window.
        reset_at_ms: Epoch milliseconds when the current window resets.
        retry_after_seconds: Seconds to wait before retrying; None when allowed.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at_ms: float
    retry_after_seconds: int | None = None

    @property
    def reset_at(self) -> int:
        """Window reset as UNIX epoch seconds (for X-RateLimit-Reset)."""
        return int(self.reset_at_ms // 1000)


class AbstractRateLimitStore(ABC):
    """Shared bucket storage for fixed-window limiters.

    Implementations must apply :meth:`hit` atomically per key: concurrent hits
    on the same bucket may never lose an increment.
    """

    @abstractmethod
    def hit(self, key: str, *, now_ms: float, window_ms: int, limit: int) -> RateLimitResult:
        """Register one request against ``key`` and decide whether it is admitted.

        Args:
            key: Bucket identifier.
            now_ms: Current time in epoch milliseconds.
            window_ms: Window length used when a fresh window is opened.
            limit: Max admitted requests per window.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str) -> RateLimitEntry | None:
        """Return a snapshot of the bucket for ``key`` (expired or not)."""
        raise NotImplementedError

    @abstractmethod
    def sweep(self, now_ms: float) -> int:
        """Delete every bucket whose window has ended.

        Returns:
            Number of buckets removed.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop all buckets."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError
