"""Top-level HarnessConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from fw_eval.config.domain.agent import AgentConfig
from fw_eval.config.domain.execution import ExecutionConfig
from fw_eval.config.domain.judge import JudgeConfig
from fw_eval.config.domain.mcp import McpConfig
from fw_eval.config.domain.model import DEFAULT_MODELS, ModelConfig
from fw_eval.config.domain.storage import StorageConfig

type ProviderName = str

DEFAULT_RATE_LIMITS: dict[ProviderName, int] = {
    "openai": 500,
    "anthropic": 5,
    "vercel": 10,
    "google": 60,
}


class HarnessConfig(BaseModel, frozen=True):
    """Root configuration aggregate for an fw-eval invocation.

    Every section has defaults so that running without a config file is valid.
    """

    models: list[ModelConfig] = Field(
        default_factory=lambda: list(DEFAULT_MODELS), min_length=1
    )
    judge: JudgeConfig = Field(default_factory=JudgeConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    rate_limits: dict[ProviderName, int] = Field(
        default_factory=lambda: dict(DEFAULT_RATE_LIMITS)
    )
    storage: StorageConfig = Field(default_factory=StorageConfig)
