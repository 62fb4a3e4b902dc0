"""Provider registry — maps (provider, model) pairs to LiteLLM model strings."""

from fw_eval.config.domain.model import DEFAULT_MODELS
from fw_eval.execution.infrastructure.errors import UnsupportedTargetError

# Provider name used in configs -> LiteLLM routing prefix.
PROVIDER_PREFIXES: dict[str, str] = {
    "openai": "openai",
    "anthropic": "anthropic",
    "vercel": "v0",
    "google": "gemini",
}


def supported_providers() -> list[str]:
    return sorted(PROVIDER_PREFIXES)


def resolve_model(provider: str, model: str) -> str:
    """Return the LiteLLM model string for provider/model.

    Raises:
        UnsupportedTargetError: if provider has no registered route.
    """
    prefix = PROVIDER_PREFIXES.get(provider)
    if prefix is None or not model:
        raise UnsupportedTargetError(provider=provider, model=model)
    return f"{prefix}/{model}"


def provider_for_litellm_model(model: str, default: str) -> str:
    """Return the rate-limit provider a LiteLLM model string is billed under.

    ``gemini/gemini-2.5-flash`` maps back through the routing prefix to
    ``google``. An unknown prefix is returned as-is. A bare name is looked up
    among the default models, falling back to default.
    """
    prefix, sep, _ = model.partition("/")
    if sep:
        for provider, route in PROVIDER_PREFIXES.items():
            if route == prefix:
                return provider
        return prefix
    for entry in DEFAULT_MODELS:
        if entry.name == model:
            return entry.provider
    return default
