"""FakeRateLimitObserver — records rate limiter events."""


class FakeRateLimitObserver:
    def __init__(self) -> None:
        self.waits: list[tuple[str, float]] = []
        self.unconfigured: list[str] = []

    def rate_limit_waiting(self, provider: str, wait_seconds: float) -> None:
        self.waits.append((provider, wait_seconds))

    def rate_limit_unconfigured(self, provider: str) -> None:
        self.unconfigured.append(provider)
