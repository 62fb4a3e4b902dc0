"""Evaluation — a named task specification discovered from the definition tree."""

from pathlib import Path

from pydantic import BaseModel, Field

PROMPT_FILENAME = "PROMPT.md"
GRADERS_FILENAME = "graders.py"


class Evaluation(BaseModel, frozen=True):
    """Immutable description of one evaluation directory.

    ``path`` is the stable identifier (``evals/<relative dir>``) used in
    filters, error records and debug artifact names; ``root`` is where the
    prompt and graders live on disk.
    """

    path: str = Field(min_length=1)
    root: Path
    framework: str = Field(min_length=1)
    category: str = Field(min_length=1)
    name: str = Field(min_length=1)
    enabled: bool = True

    @property
    def prompt_path(self) -> Path:
        return self.root / PROMPT_FILENAME

    @property
    def graders_path(self) -> Path:
        return self.root / GRADERS_FILENAME
