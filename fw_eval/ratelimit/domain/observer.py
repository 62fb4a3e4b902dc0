"""RateLimitObserver port — events emitted when a caller has to wait."""

from typing import Protocol


class RateLimitObserver(Protocol):
    def rate_limit_waiting(self, provider: str, wait_seconds: float) -> None: ...

    def rate_limit_unconfigured(self, provider: str) -> None: ...
