"""Structlog implementation of the JudgeObserver port."""

import structlog

_CRITERIA_PREVIEW_CHARS = 80


def _preview(criteria: str) -> str:
    if len(criteria) <= _CRITERIA_PREVIEW_CHARS:
        return criteria
    return criteria[:_CRITERIA_PREVIEW_CHARS] + "..."


class StructlogJudgeObserver:
    """Delegates judge domain events to structlog.

    Satisfies the JudgeObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def judge_evaluation_started(self, model: str, criteria: str) -> None:
        self._log.debug(
            "judge.evaluation_started", model=model, criteria=_preview(criteria)
        )

    def judge_evaluation_completed(
        self, model: str, criteria: str, passed: bool, duration_ms: int
    ) -> None:
        self._log.debug(
            "judge.evaluation_completed",
            model=model,
            criteria=_preview(criteria),
            passed=passed,
            duration_ms=duration_ms,
        )

    def judge_evaluation_failed(self, model: str, criteria: str, reason: str) -> None:
        self._log.error(
            "judge.evaluation_failed",
            model=model,
            criteria=_preview(criteria),
            reason=reason,
        )

    def judge_high_temperature_warned(self, temperature: float) -> None:
        self._log.warning("judge.high_temperature_warned", temperature=temperature)
