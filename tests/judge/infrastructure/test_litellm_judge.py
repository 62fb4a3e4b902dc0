"""Tests for LiteLLMJudge infrastructure implementation."""

from unittest.mock import AsyncMock, MagicMock, patch

import litellm
import pytest

from fw_eval.config.domain.judge import JudgeConfig
from fw_eval.judge.domain.verdict import ClosedQAVerdict
from fw_eval.judge.infrastructure.errors import JudgeInvocationError
from fw_eval.judge.infrastructure.litellm import LiteLLMJudge
from tests.judge.fake_observer import FakeJudgeObserver
from tests.ratelimit.fake_limiter import FakeRateLimiter

_ACOMPLETION = "fw_eval.judge.infrastructure.litellm.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_judge(
    temperature: float = 0.0,
) -> tuple[LiteLLMJudge, FakeJudgeObserver, FakeRateLimiter]:
    observer = FakeJudgeObserver()
    limiter = FakeRateLimiter()
    judge = LiteLLMJudge(
        config=JudgeConfig(temperature=temperature),
        rate_limiter=limiter,
        observer=observer,
    )
    return judge, observer, limiter


def _make_acompletion_response(content: str) -> MagicMock:
    """Build a mock litellm response object with the given message content."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _verdict_json(choice: str) -> str:
    return ClosedQAVerdict(reasoning="Because.", choice=choice).model_dump_json()


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    """LiteLLMJudge warns when temperature > 0.0."""

    def test_zero_temperature_emits_no_warning(self) -> None:
        _, observer, _ = _make_judge(temperature=0.0)

        assert observer.temperature_warnings == []

    def test_positive_temperature_emits_warning(self) -> None:
        _, observer, _ = _make_judge(temperature=0.5)

        assert observer.temperature_warnings == [0.5]


# ---------------------------------------------------------------------------
# evaluate() — success path
# ---------------------------------------------------------------------------


class TestEvaluateSuccess:
    """A Y verdict passes, an N verdict fails."""

    async def test_yes_verdict_passes(self) -> None:
        judge, observer, _ = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response(_verdict_json("Y")))

        with patch(_ACOMPLETION, new=mock):
            passed = await judge.evaluate(criteria="Mentions 401?", candidate="401")

        assert passed is True
        assert observer.completed[0].passed is True

    async def test_no_verdict_fails(self) -> None:
        judge, _, _ = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response(_verdict_json("N")))

        with patch(_ACOMPLETION, new=mock):
            assert await judge.evaluate(criteria="c", candidate="r") is False

    async def test_request_shape(self) -> None:
        judge, _, limiter = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response(_verdict_json("Y")))

        with patch(_ACOMPLETION, new=mock):
            await judge.evaluate(
                criteria="Uses auth()?", candidate="await auth()", input="Protect it"
            )

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "gpt-4.1"
        assert kwargs["temperature"] == 0.0
        assert kwargs["response_format"] is ClosedQAVerdict
        user = kwargs["messages"][1]["content"]
        assert "[Task]: Protect it" in user
        assert "[Submission]: await auth()" in user
        assert "[Criterion]: Uses auth()?" in user
        assert limiter.acquired == ["openai"]

    async def test_model_override(self) -> None:
        judge, observer, _ = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response(_verdict_json("Y")))

        with patch(_ACOMPLETION, new=mock):
            await judge.evaluate(criteria="c", candidate="r", model="claude-opus-4-5")

        assert mock.call_args.kwargs["model"] == "claude-opus-4-5"
        assert observer.started[0].model == "claude-opus-4-5"

    @pytest.mark.parametrize(
        ("override", "provider"),
        [
            ("anthropic/claude-opus-4-5", "anthropic"),
            ("gemini/gemini-2.5-flash", "google"),
            ("claude-opus-4-5", "anthropic"),
            ("house-judge-v1", "openai"),
        ],
    )
    async def test_override_is_paced_under_its_own_provider(
        self, override: str, provider: str
    ) -> None:
        judge, _, limiter = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response(_verdict_json("Y")))

        with patch(_ACOMPLETION, new=mock):
            await judge.evaluate(criteria="c", candidate="r", model=override)

        assert limiter.acquired == [provider]


# ---------------------------------------------------------------------------
# evaluate() — failures
# ---------------------------------------------------------------------------


class TestEvaluateFailure:
    """Failures raise JudgeInvocationError; they never become a silent False."""

    async def test_call_failure_raises(self) -> None:
        judge, observer, _ = _make_judge()
        mock = AsyncMock(side_effect=ValueError("bad request"))

        with patch(_ACOMPLETION, new=mock):
            with pytest.raises(JudgeInvocationError, match="bad request") as exc_info:
                await judge.evaluate(criteria="c", candidate="r")

        assert exc_info.value.retriable is False
        assert len(observer.failed) == 1

    async def test_rate_limit_is_retriable(self) -> None:
        judge, _, _ = _make_judge()
        error = litellm.RateLimitError(
            message="slow down", llm_provider="openai", model="gpt-4.1"
        )

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=error)):
            with pytest.raises(JudgeInvocationError) as exc_info:
                await judge.evaluate(criteria="c", candidate="r")

        assert exc_info.value.retriable is True

    async def test_unparseable_response_raises(self) -> None:
        judge, observer, _ = _make_judge()
        mock = AsyncMock(return_value=_make_acompletion_response("definitely yes"))

        with patch(_ACOMPLETION, new=mock):
            with pytest.raises(JudgeInvocationError, match="unparseable"):
                await judge.evaluate(criteria="c", candidate="r")

        assert "unparseable" in observer.failed[0].reason
