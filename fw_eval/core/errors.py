"""Base exception class for all fw-eval-specific errors."""


class FwEvalError(Exception):
    """Base class for all fw-eval errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
