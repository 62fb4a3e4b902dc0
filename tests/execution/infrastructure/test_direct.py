"""Tests for DirectGenerationBackend."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import litellm
import pytest

from fw_eval.execution.domain.task import AgentTarget, Task
from fw_eval.execution.infrastructure.direct import DirectGenerationBackend
from fw_eval.execution.infrastructure.errors import (
    GenerationError,
    UnsupportedTargetError,
)
from fw_eval.execution.infrastructure.prompts import SYSTEM_INSTRUCTION
from tests.evaluation.builders import make_evaluation
from tests.execution.builders import make_completion, make_model_task
from tests.execution.fake_observer import FakeBackendObserver
from tests.ratelimit.fake_limiter import FakeRateLimiter

_ACOMPLETION = "fw_eval.execution.infrastructure.direct.litellm.acompletion"


def _make_backend() -> tuple[DirectGenerationBackend, FakeRateLimiter]:
    limiter = FakeRateLimiter()
    backend = DirectGenerationBackend(
        rate_limiter=limiter, observer=FakeBackendObserver()
    )
    return backend, limiter


class TestExecute:
    """One completion with the fixed system instruction; the text is returned."""

    async def test_returns_response_text(self, tmp_path: Path) -> None:
        backend, limiter = _make_backend()
        task = make_model_task(tmp_path, provider="vercel", name="v0-1.5-md")
        mock = AsyncMock(return_value=make_completion("```ts file=\"a.ts\"\n```"))

        with patch(_ACOMPLETION, new=mock):
            output = await backend.execute(task)

        assert output.response_text.startswith("```ts")
        assert output.prompt == "Protect the /dashboard route."
        assert output.tool_calls is None
        assert mock.call_args.kwargs["model"] == "v0/v0-1.5-md"
        assert mock.call_args.kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": "Protect the /dashboard route."},
        ]
        assert limiter.acquired == ["vercel"]

    async def test_empty_content_becomes_empty_text(self, tmp_path: Path) -> None:
        backend, _ = _make_backend()

        with patch(_ACOMPLETION, new=AsyncMock(return_value=make_completion(None))):
            output = await backend.execute(make_model_task(tmp_path))

        assert output.response_text == ""


class TestErrors:
    async def test_unsupported_provider(self, tmp_path: Path) -> None:
        backend, limiter = _make_backend()
        task = make_model_task(tmp_path, provider="mistral", name="large")

        with pytest.raises(UnsupportedTargetError):
            await backend.execute(task)

        assert limiter.acquired == []

    async def test_agent_target_is_rejected(self) -> None:
        backend, _ = _make_backend()
        task = Task(
            target=AgentTarget(type="cursor", label="Cursor", executable_path="/x"),
            evaluation=make_evaluation(),
        )

        with pytest.raises(UnsupportedTargetError):
            await backend.execute(task)

    async def test_call_failure_is_wrapped(self, tmp_path: Path) -> None:
        backend, _ = _make_backend()

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=ValueError("bad key"))):
            with pytest.raises(GenerationError, match="bad key") as exc_info:
                await backend.execute(make_model_task(tmp_path))

        assert exc_info.value.retriable is False

    async def test_timeout_is_retriable(self, tmp_path: Path) -> None:
        backend, _ = _make_backend()
        error = litellm.Timeout(message="slow", model="gpt-5", llm_provider="openai")

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=error)):
            with pytest.raises(GenerationError) as exc_info:
                await backend.execute(make_model_task(tmp_path))

        assert exc_info.value.retriable is True
