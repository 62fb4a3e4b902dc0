"""Judge Protocol — structural interface for closed-question LLM judges."""

from typing import Protocol


class Judge(Protocol):
    """Answers one yes/no question about a candidate response.

    Implementations return True only when the judge's normalised score is
    exactly 1. Invocation and parse failures raise; they are never reported
    as a failing verdict.
    """

    async def evaluate(
        self,
        criteria: str,
        candidate: str,
        input: str = "",
        model: str | None = None,
    ) -> bool: ...
