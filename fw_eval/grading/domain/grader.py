"""Grader Protocol and the GraderSet mapping that evaluations expose."""

from typing import Protocol, runtime_checkable

from fw_eval.judge.domain.judge import Judge


@runtime_checkable
class Grader(Protocol):
    """A single pass/fail check applied to a model or agent response.

    The judge capability is passed in on every call so that graders stay plain
    values that can be defined at import time and shared across evaluations.
    """

    async def grade(self, response: str, judge: Judge) -> bool: ...


# Insertion order is the reporting order.
type GraderSet = dict[str, Grader]

type GraderOutcome = tuple[str, bool]
