"""FakeJudge — in-memory Judge implementation for use in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class JudgeCall:
    criteria: str
    candidate: str
    input: str
    model: str | None


class FakeJudge:
    """Satisfies the Judge protocol.

    Returns ``verdicts[criteria]`` when present, ``default`` otherwise. If
    ``error`` is set every call raises it instead.
    """

    def __init__(
        self,
        default: bool = True,
        verdicts: dict[str, bool] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._default = default
        self._verdicts = verdicts or {}
        self._error = error
        self.calls: list[JudgeCall] = []

    async def evaluate(
        self,
        criteria: str,
        candidate: str,
        input: str = "",
        model: str | None = None,
    ) -> bool:
        self.calls.append(
            JudgeCall(criteria=criteria, candidate=candidate, input=input, model=model)
        )
        if self._error is not None:
            raise self._error
        return self._verdicts.get(criteria, self._default)
