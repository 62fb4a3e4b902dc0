"""Shared classification of LiteLLM exceptions."""

import litellm

# Failures worth another attempt after a backoff.
TRANSIENT_LLM_ERRORS: tuple[type[Exception], ...] = (
    litellm.RateLimitError,
    litellm.Timeout,
    litellm.APIConnectionError,
    litellm.ServiceUnavailableError,
    litellm.InternalServerError,
)


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, TRANSIENT_LLM_ERRORS)
