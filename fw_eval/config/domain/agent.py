"""CLI agent configuration model."""

from pydantic import BaseModel, Field

DEFAULT_AGENT_TIMEOUT_MS = 600_000


class AgentConfig(BaseModel, frozen=True):
    timeout_ms: int = Field(default=DEFAULT_AGENT_TIMEOUT_MS, ge=1)
    model: str | None = None
