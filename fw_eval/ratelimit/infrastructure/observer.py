"""Structlog implementation of the RateLimitObserver port."""

import structlog


class StructlogRateLimitObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def rate_limit_waiting(self, provider: str, wait_seconds: float) -> None:
        self._log.debug(
            "rate_limit.waiting",
            provider=provider,
            wait_seconds=round(wait_seconds, 3),
        )

    def rate_limit_unconfigured(self, provider: str) -> None:
        self._log.warning("rate_limit.unconfigured", provider=provider)
