"""Backend Protocol — the one contract every execution strategy satisfies."""

from typing import Protocol

from fw_eval.execution.domain.result import GenerationOutput
from fw_eval.execution.domain.task import Task


class Backend(Protocol):
    """Turns a task into generated text.

    Implementations raise FwEvalError subclasses on failure; grading and
    failure capture happen in the executor, never in a backend.
    """

    async def execute(self, task: Task) -> GenerationOutput: ...
