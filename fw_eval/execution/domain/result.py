"""Task outcome value objects — plain data, safe to log or persist."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ToolCallInfo(BaseModel, frozen=True):
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResultInfo(BaseModel, frozen=True):
    tool_name: str
    result: str
    is_error: bool = False


class GenerationOutput(BaseModel, frozen=True):
    """What a backend produced for one task, before grading.

    ``transcript`` is the Markdown conversation log, without grader results.
    """

    prompt: str
    response_text: str
    tool_calls: list[ToolCallInfo] | None = None
    tool_results: list[ToolResultInfo] | None = None
    transcript: str | None = None


class DebugPayload(BaseModel, frozen=True):
    """Everything written to the per-task debug artifacts."""

    prompt: str
    response: str
    graders: list[tuple[str, bool]]
    tool_calls: list[ToolCallInfo] | None = None
    tool_results: list[ToolResultInfo] | None = None
    transcript: str | None = None


class TaskError(BaseModel, frozen=True):
    message: str
    trace: str | None = None


class TaskSuccess(BaseModel, frozen=True):
    ok: Literal[True] = True
    score: float = Field(ge=0.0, le=1.0)
    graders: list[tuple[str, bool]]
    debug: DebugPayload | None = None


class TaskFailure(BaseModel, frozen=True):
    ok: Literal[False] = False
    error: TaskError


type TaskResult = TaskSuccess | TaskFailure
