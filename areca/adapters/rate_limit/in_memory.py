"""In-memory fixed-window bucket store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: every read-modify-write happens under one lock.
- Windows start at a bucket's first request (not aligned to the clock).
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import replace

from areca.adapters.rate_limit.base import AbstractRateLimitStore, RateLimitEntry, RateLimitResult

logger = logging.getLogger(__name__)


class InMemoryRateLimitStore(AbstractRateLimitStore):
    """Dictionary of buckets guarded by a lock.

    Expired buckets are replaced lazily on their next hit and removed in bulk
    by an opportunistic sweep that runs at most once per ``sweep_interval_ms``.
    """

    def __init__(self, *, sweep_interval_ms: int = 60_000) -> None:
        """Initialize an empty store.

        Args:
            sweep_interval_ms: Minimum delay between opportunistic sweeps;
                0 sweeps on every hit.

        Raises:
            ValueError: If sweep_interval_ms is negative.
        """
        if sweep_interval_ms < 0:
            raise ValueError("sweep_interval_ms must be >= 0")

        self._sweep_interval_ms = sweep_interval_ms
        self._lock = threading.RLock()
        self._buckets: dict[str, RateLimitEntry] = {}
        self._last_sweep_ms: float | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryRateLimitStore(buckets={len(self)}, sweep_interval_ms={self._sweep_interval_ms})"

    def hit(self, key: str, *, now_ms: float, window_ms: int, limit: int) -> RateLimitResult:
        with self._lock:
            self._maybe_sweep_locked(now_ms)

            entry = self._buckets.get(key)
            if entry is None or entry.is_expired(now_ms):
                entry = RateLimitEntry(key=key, count=1, reset_at_ms=now_ms + window_ms)
                self._buckets[key] = entry
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=limit - 1,
                    reset_at_ms=entry.reset_at_ms,
                )

            if entry.count < limit:
                entry.count += 1
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=limit - entry.count,
                    reset_at_ms=entry.reset_at_ms,
                )

            retry_after = max(0, math.ceil((entry.reset_at_ms - now_ms) / 1000))
            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=0,
                reset_at_ms=entry.reset_at_ms,
                retry_after_seconds=retry_after,
            )

    def get(self, key: str) -> RateLimitEntry | None:
        with self._lock:
            entry = self._buckets.get(key)
            return replace(entry) if entry is not None else None

    def sweep(self, now_ms: float) -> int:
        with self._lock:
            return self._sweep_locked(now_ms)

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._last_sweep_ms = None

    def _maybe_sweep_locked(self, now_ms: float) -> None:
        if self._last_sweep_ms is not None and now_ms - self._last_sweep_ms < self._sweep_interval_ms:
            return
        self._sweep_locked(now_ms)

    def _sweep_locked(self, now_ms: float) -> int:
        expired = [key for key, entry in self._buckets.items() if entry.is_expired(now_ms)]
        for key in expired:
            del self._buckets[key]
        self._last_sweep_ms = now_ms
        if expired:
            logger.debug(
                "rate_limit.swept",
                extra={"removed": len(expired), "remaining_buckets": len(self._buckets)},
            )
        return len(expired)
