"""EvaluationLoader Protocol — structural interface for evaluation catalogs."""

from pathlib import Path
from typing import Protocol

from fw_eval.evaluation.domain.evaluation import Evaluation


class EvaluationLoader(Protocol):
    """Discovers every evaluation below a root directory."""

    def load(self, root: Path) -> list[Evaluation]: ...
