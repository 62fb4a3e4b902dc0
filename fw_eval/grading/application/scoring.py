"""Grade a response against a grader set and fold the outcomes into a score."""

from collections.abc import Sequence

from fw_eval.grading.domain.grader import GraderOutcome, GraderSet
from fw_eval.grading.infrastructure.errors import EmptyGraderSetError
from fw_eval.judge.domain.judge import Judge


def compute_score(outcomes: Sequence[GraderOutcome]) -> float:
    """Fraction of graders that passed.

    Raises:
        EmptyGraderSetError: if outcomes is empty.
    """
    if not outcomes:
        raise EmptyGraderSetError(source="response")
    passed = sum(1 for _, ok in outcomes if ok)
    return passed / len(outcomes)


async def run_graders(
    graders: GraderSet, response: str, judge: Judge
) -> list[GraderOutcome]:
    """Run every grader in insertion order, one at a time.

    A grader that raises aborts the run; the exception propagates unchanged so
    that judge failures surface as task failures instead of silent fails.
    """
    outcomes: list[GraderOutcome] = []
    for name, grader in graders.items():
        passed = await grader.grade(response, judge)
        outcomes.append((name, bool(passed)))
    return outcomes
