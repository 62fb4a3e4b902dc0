"""Error types raised by the result store."""

from fw_eval.core.errors import FwEvalError


class ResultStoreError(FwEvalError):
    """Raised when the result database cannot be opened, written or read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to access result store {path}: {reason}")
