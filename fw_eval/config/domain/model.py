"""Model catalog entries."""

from pydantic import BaseModel, Field


class ModelConfig(BaseModel, frozen=True):
    """One (provider, model) pair the harness evaluates, with a display label."""

    provider: str = Field(min_length=1)
    name: str = Field(min_length=1)
    label: str = Field(min_length=1)


DEFAULT_MODELS: tuple[ModelConfig, ...] = (
    ModelConfig(provider="openai", name="gpt-4o", label="GPT-4o"),
    ModelConfig(provider="openai", name="gpt-5", label="GPT-5"),
    ModelConfig(provider="openai", name="gpt-5-chat-latest", label="GPT-5 Chat"),
    ModelConfig(provider="anthropic", name="claude-sonnet-4-0", label="Claude Sonnet 4"),
    ModelConfig(
        provider="anthropic", name="claude-sonnet-4-5", label="Claude Sonnet 4.5"
    ),
    ModelConfig(provider="anthropic", name="claude-opus-4-0", label="Claude Opus 4"),
    ModelConfig(provider="anthropic", name="claude-opus-4-5", label="Claude Opus 4.5"),
    ModelConfig(
        provider="anthropic", name="claude-haiku-4-5", label="Claude Haiku 4.5"
    ),
    ModelConfig(provider="vercel", name="v0-1.5-md", label="v0-1.5-md"),
    ModelConfig(provider="google", name="gemini-2.5-flash", label="Gemini 2.5 Flash"),
    ModelConfig(
        provider="google", name="gemini-3-pro-preview", label="Gemini 3 Pro Preview"
    ),
)
