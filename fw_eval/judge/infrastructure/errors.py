"""Error types raised by judge infrastructure."""

from fw_eval.core.errors import FwEvalError


class JudgeInvocationError(FwEvalError):
    """Raised when the judge cannot be invoked or returns an unparseable response."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to judge response: {reason}", retriable=retriable)
