"""Error types raised while loading and scoring grader sets."""

from fw_eval.core.errors import FwEvalError


class EmptyGraderSetError(FwEvalError):
    """Raised when an evaluation defines no graders, so no score can be computed."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Failed to score {source}: grader set is empty")


class GraderLoadError(FwEvalError):
    """Raised when an evaluation's graders module cannot be imported or is malformed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to load graders from {path}: {reason}")
