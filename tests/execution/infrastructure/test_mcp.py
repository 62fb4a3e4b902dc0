"""Tests for ToolAugmentedBackend's tool loop."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from fw_eval.execution.domain.task import TaskOptions
from fw_eval.execution.domain.tools import ToolSpec
from fw_eval.execution.infrastructure.errors import GenerationError
from fw_eval.execution.infrastructure.mcp import ToolAugmentedBackend
from tests.execution.builders import make_completion, make_model_task, make_tool_call
from tests.execution.fake_observer import FakeBackendObserver
from tests.execution.fake_tool_session import FakeToolSession
from tests.ratelimit.fake_limiter import FakeRateLimiter

_ACOMPLETION = "fw_eval.execution.infrastructure.mcp.litellm.acompletion"
_URL = "http://tools.test/mcp"

_DOCS_TOOL = ToolSpec(
    name="search_docs",
    description="Search the docs",
    input_schema={"type": "object", "properties": {"query": {"type": "string"}}},
)


def _make_backend(
    session: FakeToolSession,
) -> tuple[ToolAugmentedBackend, FakeBackendObserver, FakeRateLimiter]:
    observer = FakeBackendObserver()
    limiter = FakeRateLimiter()
    backend = ToolAugmentedBackend(
        server_url=_URL,
        rate_limiter=limiter,
        observer=observer,
        session_factory=session.factory,
    )
    return backend, observer, limiter


# ---------------------------------------------------------------------------
# Loop behaviour
# ---------------------------------------------------------------------------


class TestToolLoop:
    """The loop feeds tool results back until the model stops asking."""

    async def test_single_round_without_tools(self, tmp_path: Path) -> None:
        session = FakeToolSession(tools=[_DOCS_TOOL])
        backend, observer, _ = _make_backend(session)
        mock = AsyncMock(return_value=make_completion("final answer"))

        with patch(_ACOMPLETION, new=mock):
            output = await backend.execute(make_model_task(tmp_path))

        assert output.response_text == "final answer"
        assert output.tool_calls == []
        assert session.opened_urls == [_URL]
        assert session.closed
        tools = mock.call_args.kwargs["tools"]
        assert tools[0]["function"]["name"] == "search_docs"
        assert observer.round_limits == []

    async def test_tool_results_are_fed_back(self, tmp_path: Path) -> None:
        session = FakeToolSession(
            tools=[_DOCS_TOOL], results={"search_docs": "use clerkMiddleware()"}
        )
        backend, observer, limiter = _make_backend(session)
        mock = AsyncMock(
            side_effect=[
                make_completion(
                    "Let me check.",
                    tool_calls=[
                        make_tool_call("call_1", "search_docs", '{"query": "middleware"}')
                    ],
                    finish_reason="tool_calls",
                ),
                make_completion("Here is the middleware."),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            output = await backend.execute(make_model_task(tmp_path))

        assert output.response_text == "Let me check.\n\nHere is the middleware."
        assert session.calls == [("search_docs", {"query": "middleware"})]
        assert [c.tool_name for c in output.tool_calls or []] == ["search_docs"]
        assert [r.result for r in output.tool_results or []] == ["use clerkMiddleware()"]
        assert observer.tool_calls == [("search_docs", 1)]
        assert limiter.acquired == ["openai", "openai"]

        messages = mock.call_args.kwargs["messages"]
        assert messages[2]["role"] == "assistant"
        assert messages[2]["tool_calls"][0]["id"] == "call_1"
        assert messages[3] == {
            "role": "tool",
            "tool_call_id": "call_1",
            "content": "use clerkMiddleware()",
        }

    async def test_round_ceiling_ends_the_loop_without_error(
        self, tmp_path: Path
    ) -> None:
        session = FakeToolSession(tools=[_DOCS_TOOL])
        backend, observer, _ = _make_backend(session)
        mock = AsyncMock(
            side_effect=lambda **_: make_completion(
                "still looking",
                tool_calls=[make_tool_call("c", "search_docs")],
                finish_reason="tool_calls",
            )
        )
        task = make_model_task(tmp_path, options=TaskOptions(mcp=True, max_tool_rounds=3))

        with patch(_ACOMPLETION, new=mock):
            output = await backend.execute(task)

        assert mock.await_count == 3
        assert len(session.calls) == 3
        assert observer.round_limits == [("GPT-5", 3)]
        assert output.response_text == "\n\n".join(["still looking"] * 3)

    async def test_no_tools_are_sent_when_server_has_none(self, tmp_path: Path) -> None:
        session = FakeToolSession(tools=[])
        backend, _, _ = _make_backend(session)
        mock = AsyncMock(return_value=make_completion("ok"))

        with patch(_ACOMPLETION, new=mock):
            await backend.execute(make_model_task(tmp_path))

        assert "tools" not in mock.call_args.kwargs

    async def test_transcript_records_rounds(self, tmp_path: Path) -> None:
        session = FakeToolSession(tools=[_DOCS_TOOL])
        backend, _, _ = _make_backend(session)
        mock = AsyncMock(return_value=make_completion("done"))

        with patch(_ACOMPLETION, new=mock):
            output = await backend.execute(make_model_task(tmp_path))

        assert output.transcript is not None
        assert "MCP Evaluation Transcript" in output.transcript
        assert "done" in output.transcript


class TestErrors:
    async def test_model_failure_still_closes_the_session(self, tmp_path: Path) -> None:
        session = FakeToolSession(tools=[_DOCS_TOOL])
        backend, _, _ = _make_backend(session)

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=ValueError("boom"))):
            with pytest.raises(GenerationError, match="boom"):
                await backend.execute(make_model_task(tmp_path))

        assert session.closed
