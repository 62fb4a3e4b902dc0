"""Error types raised while reading or writing score files."""

from pathlib import Path

from fw_eval.core.errors import FwEvalError


class ScoreFileError(FwEvalError):
    """Raised when a score file cannot be read or does not hold Score records."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read score file {path}: {reason}")
