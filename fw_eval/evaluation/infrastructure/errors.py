"""Error types raised while discovering and selecting evaluations."""

from fw_eval.core.errors import FwEvalError


class EvaluationLoadError(FwEvalError):
    """Raised when an evaluation directory or its config cannot be read."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load evaluations: {reason}")


class EvaluationNotFoundError(FwEvalError):
    """Raised when an evaluation filter matches no evaluation."""

    def __init__(self, query: str, available: list[str]) -> None:
        self.query = query
        self.available = available
        choices = ", ".join(available) if available else "(none)"
        super().__init__(
            f'No evaluation matching "{query}". Available evaluations: {choices}'
        )
