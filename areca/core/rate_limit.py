"""Rate limiting for FastAPI routes.

This module wires the bucket store adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes declare ``Depends(rate_limit("employee"))`` only.
- Injectable state: limiters and their store live on ``app.state`` and are
  built per application instance, so tests and multiple apps never share
  buckets.
- Independent quotas: every quota class is its own limiter, and every bucket
  key includes the limiter name, the client address and the route.

Rate limiting strategy:
- Fixed window per key (not sliding): up to ``2 * max`` requests can pass
  across a window boundary, which is acceptable for abuse deterrence.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from areca.adapters.rate_limit.base import AbstractRateLimitStore, RateLimitResult
from areca.adapters.rate_limit.in_memory import InMemoryRateLimitStore
from areca.core.config import RateLimitSettings, settings
from areca.core.errors import RateLimitExceededError
from areca.core.logging import fingerprint

logger = logging.getLogger(__name__)

QUOTA_CLASSES = ("auth", "api", "work_record", "employee", "upload")


def _now_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True)
class RateLimitConfig:
    """Quota for one limiter: at most ``max`` requests per ``window_ms``."""

    window_ms: int
    max: int
    message: str = "Too many requests"

    def __post_init__(self) -> None:
        if self.max < 1:
            raise ValueError("max must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


class FixedWindowRateLimiter:
    """Admission control for one quota class.

    The limiter holds no counters itself; it applies its quota to buckets in
    the (possibly shared) store it was given.
    """

    def __init__(
        self,
        name: str,
        config: RateLimitConfig,
        store: AbstractRateLimitStore,
        *,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            name: Quota class name, used to namespace bucket keys.
            config: Window length, max requests and denial message.
            store: Bucket store shared across limiters of one application.
            clock: Time source returning epoch milliseconds.
        """
        self.name = name
        self.config = config
        self._store = store
        self._clock = clock

    def bucket_key(self, key: str) -> str:
        return f"{self.name}:{key}"

    def check(self, key: str) -> RateLimitResult:
        """Consume one request from ``key``'s budget and return the decision.

        Never raises; a denied request is reported through the result.
        """
        return self._store.hit(
            self.bucket_key(key),
            now_ms=self._clock(),
            window_ms=self.config.window_ms,
            limit=self.config.max,
        )


class RateLimiterRegistry:
    """Named limiters sharing one bucket store."""

    def __init__(
        self,
        store: AbstractRateLimitStore,
        limiters: dict[str, FixedWindowRateLimiter],
        *,
        enabled: bool = True,
        include_headers: bool = True,
    ) -> None:
        self.store = store
        self.enabled = enabled
        self.include_headers = include_headers
        self._limiters = limiters

    def __getitem__(self, name: str) -> FixedWindowRateLimiter:
        return self._limiters[name]

    def __contains__(self, name: object) -> bool:
        return name in self._limiters

    @classmethod
    def from_settings(
        cls,
        cfg: RateLimitSettings | None = None,
        *,
        store: AbstractRateLimitStore | None = None,
        clock: Callable[[], float] = _now_ms,
    ) -> "RateLimiterRegistry":
        """Build one limiter per quota class from settings.

        Args:
            cfg: Rate limit settings; defaults to the global settings.
            store: Bucket store to use; a fresh in-memory store by default.
            clock: Time source (epoch milliseconds) shared by all limiters.

        Returns:
            RateLimiterRegistry with the ``auth``, ``api``, ``work_record``,
            ``employee`` and ``upload`` limiters.
        """
        cfg = cfg or settings.rate_limit
        store = store or InMemoryRateLimitStore(sweep_interval_ms=cfg.sweep_interval_seconds * 1000)

        limiters = {
            name: FixedWindowRateLimiter(
                name,
                RateLimitConfig(
                    window_ms=getattr(cfg, f"{name}_window_seconds") * 1000,
                    max=getattr(cfg, f"{name}_max"),
                    message=getattr(cfg, f"{name}_message"),
                ),
                store,
                clock=clock,
            )
            for name in QUOTA_CLASSES
        }
        return cls(store, limiters, enabled=cfg.enabled, include_headers=cfg.include_headers)


def client_identity(request: Request) -> str:
    """Best-effort network identity of the caller.

    Prefers the first hop of X-Forwarded-For, then X-Real-IP, then the socket
    peer address.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


def route_identity(request: Request) -> str:
    """Matched route template (e.g. ``/api/employees/{employee_id}``)."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def build_rate_limit_key(request: Request) -> str:
    """Compose the bucket key from client identity and route."""
    return f"{client_identity(request)}:{route_identity(request)}"


def get_rate_limiters(request: Request) -> RateLimiterRegistry:
    """Return the registry owned by the application serving ``request``."""
    return request.app.state.rate_limiters


def rate_limit(name: str):
    """Create a FastAPI dependency enforcing the ``name`` quota class.

    Usage:
        @router.get("/employees", dependencies=[Depends(rate_limit("employee"))])

    Raises:
        ValueError: If ``name`` is not a known quota class.
    """
    if name not in QUOTA_CLASSES:
        raise ValueError(f"Unknown rate limit class: {name}")

    def enforce_rate_limit(request: Request) -> None:
        """Consume one unit of the caller's budget; raise 429 when exhausted."""
        registry = get_rate_limiters(request)
        if not registry.enabled:
            return

        limiter = registry[name]
        key = build_rate_limit_key(request)
        result = limiter.check(key)

        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "limiter": name,
                    "key_hash": fingerprint(key),
                    "limit": result.limit,
                    "remaining": result.remaining,
                },
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "limiter": name,
                "key_hash": fingerprint(key),
                "route": route_identity(request),
                "limit": result.limit,
                "window_ms": limiter.config.window_ms,
                "retry_after_s": retry_after,
            },
        )

        headers = {"Retry-After": str(retry_after)}
        if registry.include_headers:
            headers["X-RateLimit-Limit"] = str(result.limit)
            headers["X-RateLimit-Remaining"] = str(result.remaining)
            headers["X-RateLimit-Reset"] = str(result.reset_at)

        raise RateLimitExceededError(limiter.config.message, retry_after, headers)

    enforce_rate_limit.__name__ = f"enforce_{name}_rate_limit"
    return enforce_rate_limit
