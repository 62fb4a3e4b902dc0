"""Task value objects — one (target, evaluation) pair and how to run it."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from fw_eval.config.domain.mcp import DEFAULT_MAX_TOOL_ROUNDS
from fw_eval.evaluation.domain.evaluation import Evaluation

MCP_LABEL_SUFFIX = " (MCP)"


class ModelTarget(BaseModel, frozen=True):
    """A provider-hosted model reached through its API."""

    kind: Literal["model"] = "model"
    provider: str = Field(min_length=1)
    name: str = Field(min_length=1)
    label: str = Field(min_length=1)


class AgentTarget(BaseModel, frozen=True):
    """A coding agent driven through its CLI executable."""

    kind: Literal["agent"] = "agent"
    type: str = Field(min_length=1)
    label: str = Field(min_length=1)
    executable_path: str = Field(min_length=1)

    @property
    def name(self) -> str:
        return self.type


type Target = Annotated[ModelTarget | AgentTarget, Field(discriminator="kind")]


class TaskOptions(BaseModel, frozen=True):
    debug: bool = False
    mcp: bool = False
    timeout_ms: int | None = Field(default=None, ge=1)
    max_tool_rounds: int = Field(default=DEFAULT_MAX_TOOL_ROUNDS, ge=1)


class Task(BaseModel, frozen=True):
    """Immutable unit of work handed to a worker exactly once."""

    target: Target
    evaluation: Evaluation
    options: TaskOptions = Field(default_factory=TaskOptions)

    @property
    def result_label(self) -> str:
        """Label persisted with the score; tool-augmented runs carry a suffix."""
        if self.options.mcp:
            return f"{self.target.label}{MCP_LABEL_SUFFIX}"
        return self.target.label

    @property
    def display_name(self) -> str:
        return f"{self.result_label} :: {self.evaluation.path}"
