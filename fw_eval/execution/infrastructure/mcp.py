"""ToolAugmentedBackend — an agentic loop over the tools of an MCP server."""

import json
import time
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

import litellm

from fw_eval.core.llm import is_transient
from fw_eval.execution.domain.observer import BackendObserver
from fw_eval.execution.domain.result import (
    GenerationOutput,
    ToolCallInfo,
    ToolResultInfo,
)
from fw_eval.execution.domain.task import Task
from fw_eval.execution.domain.tools import ToolSession
from fw_eval.execution.infrastructure.direct import require_model_target
from fw_eval.execution.infrastructure.errors import GenerationError
from fw_eval.execution.infrastructure.prompts import SYSTEM_INSTRUCTION, load_prompt
from fw_eval.execution.infrastructure.providers import resolve_model
from fw_eval.execution.infrastructure.tool_session import McpToolSession
from fw_eval.execution.infrastructure.transcript import (
    ToolRound,
    build_tool_loop_transcript,
)
from fw_eval.ratelimit.domain.limiter import RateLimiter

BACKEND_NAME = "mcp"
MAX_OUTPUT_TOKENS = 16_384
RESPONSE_SEPARATOR = "\n\n"

type SessionFactory = Callable[[str], AbstractAsyncContextManager[ToolSession]]


def _parse_arguments(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class ToolAugmentedBackend:
    """Runs the model in a tool loop against the configured tool server.

    Each round calls the model with the server's tools. Requested tools are
    invoked one after another and their results fed back. The loop ends when
    the model asks for no tools or after ``max_tool_rounds`` rounds; hitting
    the ceiling is not an error. The response graded is every round's
    assistant text joined by blank lines.
    """

    def __init__(
        self,
        server_url: str,
        rate_limiter: RateLimiter,
        observer: BackendObserver,
        session_factory: SessionFactory | None = None,
    ) -> None:
        litellm.suppress_debug_info = True
        self._server_url = server_url
        self._rate_limiter = rate_limiter
        self._observer = observer
        self._session_factory = session_factory or (
            lambda url: McpToolSession(url=url, observer=observer)
        )

    async def execute(self, task: Task) -> GenerationOutput:
        """
        Raises:
            UnsupportedTargetError: if the target has no provider route.
            ToolSessionError: if the tool server cannot be reached.
            GenerationError: if a model call fails.
        """
        target = require_model_target(task)
        model = resolve_model(provider=target.provider, model=target.name)
        prompt = load_prompt(task.evaluation)

        self._observer.generation_started(
            backend=BACKEND_NAME, target=target.label, evaluation=task.evaluation.path
        )
        start = time.monotonic()
        async with self._session_factory(self._server_url) as session:
            rounds = await self._run_loop(
                session=session,
                provider=target.provider,
                model=model,
                prompt=prompt,
                max_rounds=task.options.max_tool_rounds,
                target_label=target.label,
            )

        texts = [r.text for r in rounds if r.text]
        response_text = RESPONSE_SEPARATOR.join(texts)
        self._observer.generation_completed(
            backend=BACKEND_NAME,
            target=target.label,
            evaluation=task.evaluation.path,
            duration_ms=int((time.monotonic() - start) * 1000),
            chars=len(response_text),
        )
        return GenerationOutput(
            prompt=prompt,
            response_text=response_text,
            tool_calls=[c for r in rounds for c in r.tool_calls],
            tool_results=[res for r in rounds for res in r.tool_results],
            transcript=build_tool_loop_transcript(
                system_prompt=SYSTEM_INSTRUCTION, prompt=prompt, rounds=rounds
            ),
        )

    async def _run_loop(
        self,
        session: ToolSession,
        provider: str,
        model: str,
        prompt: str,
        max_rounds: int,
        target_label: str,
    ) -> list[ToolRound]:
        tools = [tool.to_openai() for tool in session.tools]
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt},
        ]
        rounds: list[ToolRound] = []

        for round_index in range(1, max_rounds + 1):
            choice = await self._complete(
                provider=provider, model=model, messages=messages, tools=tools
            )
            message = choice.message
            text: str = message.content or ""
            requested = list(message.tool_calls or [])

            if not requested:
                rounds.append(
                    ToolRound(
                        index=round_index,
                        finish_reason=str(choice.finish_reason or "stop"),
                        text=text,
                    )
                )
                return rounds

            messages.append(
                {
                    "role": "assistant",
                    "content": text or None,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments or "{}",
                            },
                        }
                        for call in requested
                    ],
                }
            )

            calls: list[ToolCallInfo] = []
            results: list[ToolResultInfo] = []
            for call in requested:
                name: str = call.function.name
                args = _parse_arguments(call.function.arguments)
                calls.append(ToolCallInfo(tool_name=name, args=args))
                self._observer.tool_called(tool_name=name, round_index=round_index)
                result = await session.call(name, args)
                results.append(result)
                messages.append(
                    {"role": "tool", "tool_call_id": call.id, "content": result.result}
                )

            rounds.append(
                ToolRound(
                    index=round_index,
                    finish_reason=str(choice.finish_reason or "tool_calls"),
                    text=text,
                    tool_calls=calls,
                    tool_results=results,
                )
            )

        self._observer.tool_round_limit_reached(target=target_label, max_rounds=max_rounds)
        return rounds

    async def _complete(
        self,
        provider: str,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ) -> Any:
        await self._rate_limiter.acquire(provider)
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": MAX_OUTPUT_TOKENS,
        }
        if tools:
            kwargs["tools"] = tools
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as exc:
            raise GenerationError(reason=str(exc), retriable=is_transient(exc)) from exc
        return response.choices[0]
