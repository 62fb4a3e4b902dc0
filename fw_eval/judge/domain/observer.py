"""JudgeObserver port — domain events emitted during judge invocations."""

from typing import Protocol


class JudgeObserver(Protocol):
    """Observer port for judge domain events.

    Implementations may log to structlog or record for tests.
    """

    def judge_evaluation_started(self, model: str, criteria: str) -> None: ...

    def judge_evaluation_completed(
        self, model: str, criteria: str, passed: bool, duration_ms: int
    ) -> None: ...

    def judge_evaluation_failed(self, model: str, criteria: str, reason: str) -> None: ...

    def judge_high_temperature_warned(self, temperature: float) -> None: ...
