"""Execution configuration models."""

from pydantic import BaseModel, Field


class RetryConfig(BaseModel, frozen=True):
    max_attempts: int = Field(default=1, ge=1)
    initial_backoff_seconds: int = Field(default=2, ge=0)
    backoff_multiplier: int = Field(default=2, ge=1)


class ExecutionConfig(BaseModel, frozen=True):
    """Concurrency ceilings for the two pool flavours.

    API targets are cheap to run side by side; every CLI agent worker owns a
    full subprocess, so its ceiling is lower.
    """

    api_max_concurrent: int = Field(default=8, ge=1)
    agent_max_concurrent: int = Field(default=4, ge=1)
    retry: RetryConfig = Field(default_factory=RetryConfig)
