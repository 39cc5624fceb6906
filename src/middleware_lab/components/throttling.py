"""Throttling components: RateLimit, ThrottleBackend, InMemoryThrottleBackend."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Protocol, runtime_checkable

from middleware_lab._types import Clock, KeyFunc
from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import Throttled
from middleware_lab.models import RateLimitStatus, RateLimitTier
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class ThrottleBackend(Protocol):
    """Pluggable storage interface for rate limit counters.

    ``increment`` returns the hit count in the current window and the epoch
    time at which that window resets.
    """

    async def increment(self, key: str, window_seconds: int) -> tuple[int, float]: ...
    async def reset(self, key: str) -> None: ...


class InMemoryThrottleBackend:
    """Fixed-window counters held in process memory. Single-process only."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._counters: dict[str, tuple[int, float]] = {}

    async def increment(self, key: str, window_seconds: int) -> tuple[int, float]:
        now = self._clock()
        count, reset_at = self._counters.get(key, (0, 0.0))
        if now > reset_at:
            # Window expired, start a new one
            count, reset_at = 0, now + window_seconds
        count += 1
        self._counters[key] = (count, reset_at)
        return count, reset_at

    async def reset(self, key: str) -> None:
        self._counters.pop(key, None)

    def __len__(self) -> int:
        return len(self._counters)


class RateLimit(FlowComponent):
    """Enforces a fixed-window limit per client IP and tier."""

    category = ComponentCategory.THROTTLING

    def __init__(
        self,
        tier: RateLimitTier,
        *,
        key_func: KeyFunc | None = None,
        backend: ThrottleBackend | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._tier = tier
        self._key_func = key_func or self._default_key
        self._clock = clock
        self._backend: ThrottleBackend = (
            backend if backend is not None else InMemoryThrottleBackend(clock)
        )

    @property
    def tier(self) -> RateLimitTier:
        return self._tier

    def _default_key(self, ctx: RequestContext) -> str:
        return f"{ctx.client_ip}:{self._tier.name}"

    @staticmethod
    def _headers(status: RateLimitStatus) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(status.limit),
            "X-RateLimit-Remaining": str(status.remaining),
            "X-RateLimit-Reset": str(status.reset_ms),
        }

    async def resolve(self, ctx: RequestContext) -> None:
        tier = self._tier
        count, reset_at = await self._backend.increment(
            self._key_func(ctx), tier.window_seconds
        )
        status = RateLimitStatus(
            tier=tier.name, limit=tier.requests, count=count, reset_at=reset_at
        )

        if count > tier.requests:
            retry_after = max(math.ceil(reset_at - self._clock()), 1)
            logger.info(
                "Limit exceeded for %s (%d/%d)", ctx.client_ip, count, tier.requests
            )
            raise Throttled(
                f"Too many requests from {ctx.client_ip}",
                retry_after=retry_after,
                headers=self._headers(status),
                context={
                    "limit": {
                        "requests": tier.requests,
                        "windowSeconds": tier.window_seconds,
                        "type": tier.name,
                    },
                    "current": {
                        "count": count,
                        "resetIn": f"{retry_after} seconds",
                    },
                },
            )

        ctx.rate_limit = status
        logger.debug(
            "Request allowed for %s (%d/%d)", ctx.client_ip, count, tier.requests
        )

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        if ctx.rate_limit is None:
            return
        response.headers.update(self._headers(ctx.rate_limit))

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {
                "429": {
                    "description": "Rate limit exceeded",
                    "headers": {
                        "Retry-After": {
                            "description": "Seconds until the window resets",
                            "schema": {"type": "integer"},
                        }
                    },
                }
            },
            "x-rate-limit": [
                f"{self._tier.name}: {self._tier.requests}/{self._tier.window_seconds}s"
            ],
        }
