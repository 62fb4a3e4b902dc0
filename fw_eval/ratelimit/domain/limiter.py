"""RateLimiter Protocol — paces outbound model calls per provider."""

from typing import Protocol


class RateLimiter(Protocol):
    """Structural interface shared by every component that calls a provider.

    ``acquire`` must be awaited immediately before each external model call
    and must be safe to await from many tasks concurrently.
    """

    async def acquire(self, provider: str) -> None: ...
