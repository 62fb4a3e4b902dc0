"""Tool-session port used by the tool-augmented backend."""

from typing import Any, Protocol

from pydantic import BaseModel, Field

from fw_eval.execution.domain.result import ToolResultInfo


class ToolSpec(BaseModel, frozen=True):
    """A tool advertised by the tool server."""

    name: str = Field(min_length=1)
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_openai(self) -> dict[str, Any]:
        """Render as an OpenAI-style function tool, the format LiteLLM accepts."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }


class ToolSession(Protocol):
    """An open connection to a tool server, valid only inside its async context."""

    @property
    def tools(self) -> list[ToolSpec]: ...

    async def call(self, name: str, arguments: dict[str, Any]) -> ToolResultInfo: ...
