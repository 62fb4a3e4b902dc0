"""GraderSetLoader Protocol — resolves the grader set of an evaluation."""

from typing import Protocol

from fw_eval.evaluation.domain.evaluation import Evaluation
from fw_eval.grading.domain.grader import GraderSet


class GraderSetLoader(Protocol):
    def load(self, evaluation: Evaluation) -> GraderSet: ...
