"""Token-bucket rate limiter keyed by provider."""

import asyncio
import time
from collections.abc import Awaitable, Callable

from fw_eval.ratelimit.domain.observer import RateLimitObserver


class _Bucket:
    def __init__(self, rate_per_second: float, capacity: float, now: float) -> None:
        self.rate_per_second = rate_per_second
        self.capacity = capacity
        self.tokens = capacity
        self.updated = now
        self.lock = asyncio.Lock()

    def refill(self, now: float) -> None:
        elapsed = max(0.0, now - self.updated)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate_per_second)
        self.updated = now


class ProviderRateLimiter:
    """Paces calls so each provider sees at most its configured requests per minute.

    Each provider owns one bucket refilled continuously at ``rpm / 60`` tokens
    per second. With the default burst of one token, consecutive calls to the
    same provider are spaced ``60 / rpm`` seconds apart. Waiters on one
    provider are served in arrival order and never block other providers.
    Providers with no configured limit pass straight through.
    """

    def __init__(
        self,
        requests_per_minute: dict[str, int],
        observer: RateLimitObserver,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if burst < 1:
            raise ValueError("burst must be at least 1")
        for provider, rpm in requests_per_minute.items():
            if rpm < 1:
                raise ValueError(f"rate limit for {provider} must be at least 1 RPM")

        self._observer = observer
        self._clock = clock
        self._sleep = sleep
        now = clock()
        self._buckets = {
            provider: _Bucket(rate_per_second=rpm / 60.0, capacity=burst, now=now)
            for provider, rpm in requests_per_minute.items()
        }
        self._warned: set[str] = set()

    @property
    def providers(self) -> list[str]:
        return sorted(self._buckets)

    async def acquire(self, provider: str) -> None:
        bucket = self._buckets.get(provider)
        if bucket is None:
            if provider not in self._warned:
                self._warned.add(provider)
                self._observer.rate_limit_unconfigured(provider=provider)
            return

        async with bucket.lock:
            while True:
                bucket.refill(now=self._clock())
                if bucket.tokens >= 1.0:
                    bucket.tokens -= 1.0
                    return
                wait_seconds = (1.0 - bucket.tokens) / bucket.rate_per_second
                self._observer.rate_limit_waiting(
                    provider=provider, wait_seconds=wait_seconds
                )
                await self._sleep(wait_seconds)
