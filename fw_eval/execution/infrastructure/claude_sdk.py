"""ClaudeSdkAgentBackend — drives the Claude agent through claude_agent_sdk."""

import asyncio
import time
from pathlib import Path

from claude_agent_sdk import query
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    McpHttpServerConfig,
    ResultMessage,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from fw_eval.config.domain.agent import AgentConfig
from fw_eval.config.domain.mcp import McpConfig
from fw_eval.execution.domain.observer import BackendObserver
from fw_eval.execution.domain.result import (
    GenerationOutput,
    ToolCallInfo,
    ToolResultInfo,
)
from fw_eval.execution.domain.task import AgentTarget, Task
from fw_eval.execution.infrastructure.cli_agent import require_agent_target
from fw_eval.execution.infrastructure.errors import (
    AgentInvocationError,
    AgentTimeoutError,
)
from fw_eval.execution.infrastructure.prompts import build_agent_prompt
from fw_eval.execution.infrastructure.transcript import (
    ToolRound,
    build_tool_loop_transcript,
)
from fw_eval.execution.infrastructure.tool_session import NO_RESULT
from fw_eval.execution.infrastructure.workdir import agent_work_dir

BACKEND_NAME = "claude-sdk"


class _StreamCapture:
    """Accumulates assistant text and tool traffic from the SDK message stream."""

    def __init__(self) -> None:
        self.result: ResultMessage | None = None
        self.texts: list[str] = []
        self.rounds: list[ToolRound] = []
        # Keyed by tool_use_id until a ToolResultBlock resolves the call.
        self._pending: dict[str, str] = {}

    @property
    def tool_calls(self) -> list[ToolCallInfo]:
        return [c for r in self.rounds for c in r.tool_calls]

    @property
    def tool_results(self) -> list[ToolResultInfo]:
        return [res for r in self.rounds for res in r.tool_results]

    def add_assistant(self, message: AssistantMessage) -> None:
        text_parts: list[str] = []
        calls: list[ToolCallInfo] = []
        for block in message.content:
            if isinstance(block, TextBlock):
                text_parts.append(block.text)
            elif isinstance(block, ToolUseBlock):
                self._pending[block.id] = block.name
                calls.append(ToolCallInfo(tool_name=block.name, args=dict(block.input)))
        text = "".join(text_parts)
        if text:
            self.texts.append(text)
        if text or calls:
            self.rounds.append(
                ToolRound(
                    index=len(self.rounds) + 1,
                    finish_reason="tool_use" if calls else "end_turn",
                    text=text,
                    tool_calls=calls,
                )
            )

    def add_user(self, message: UserMessage) -> None:
        # UserMessage.content may be a str (plain text) or a list of blocks.
        content = message.content
        if not isinstance(content, list) or not self.rounds:
            return
        resolved: list[ToolResultInfo] = []
        for block in content:
            if not isinstance(block, ToolResultBlock):
                continue
            name = self._pending.pop(block.tool_use_id, None)
            if name is None:
                continue
            resolved.append(
                ToolResultInfo(
                    tool_name=name,
                    result=_block_text(block),
                    is_error=bool(block.is_error),
                )
            )
        if resolved:
            last = self.rounds[-1]
            self.rounds[-1] = ToolRound(
                index=last.index,
                finish_reason=last.finish_reason,
                text=last.text,
                tool_calls=last.tool_calls,
                tool_results=[*last.tool_results, *resolved],
            )


def _block_text(block: ToolResultBlock) -> str:
    # content may be str, list-of-dicts, or None.
    raw = block.content
    if isinstance(raw, str):
        return raw or NO_RESULT
    if isinstance(raw, list):
        text = " ".join(
            str(item.get("text", "")) for item in raw if isinstance(item, dict)
        ).strip()
        return text or NO_RESULT
    return NO_RESULT


class ClaudeSdkAgentBackend:
    """Runs the Claude agent via the SDK in a throwaway working directory.

    The tool server, when requested, is attached through
    ``ClaudeAgentOptions.mcp_servers`` instead of a ``.mcp.json`` file. The
    executable resolved at startup is passed as ``cli_path``.
    """

    def __init__(
        self,
        agent_config: AgentConfig,
        mcp_config: McpConfig,
        observer: BackendObserver,
        work_root: Path | None = None,
    ) -> None:
        self._agent_config = agent_config
        self._mcp_config = mcp_config
        self._observer = observer
        self._work_root = work_root

    async def execute(self, task: Task) -> GenerationOutput:
        """
        Raises:
            AgentTimeoutError: if the session outlives the timeout.
            AgentInvocationError: if the SDK raises, the agent reports an error,
                or the stream yields no text at all.
        """
        target = require_agent_target(task)
        prompt = build_agent_prompt(task.evaluation)
        timeout_ms = task.options.timeout_ms or self._agent_config.timeout_ms

        self._observer.generation_started(
            backend=BACKEND_NAME, target=target.label, evaluation=task.evaluation.path
        )
        start = time.monotonic()
        async with agent_work_dir(observer=self._observer, root=self._work_root) as work_dir:
            self._observer.agent_spawned(
                agent=target.type,
                executable=target.executable_path,
                work_dir=str(work_dir),
            )
            options = self._build_options(
                target=target, work_dir=work_dir, mcp=task.options.mcp
            )
            try:
                async with asyncio.timeout(timeout_ms / 1000):
                    capture = await self._collect(prompt=prompt, options=options)
            except TimeoutError:
                self._observer.agent_timed_out(agent=target.type, timeout_ms=timeout_ms)
                raise AgentTimeoutError(agent=target.type, timeout_ms=timeout_ms) from None

        duration_ms = int((time.monotonic() - start) * 1000)
        response = self._response_text(capture)
        self._observer.agent_exited(agent=target.type, exit_code=0, duration_ms=duration_ms)
        self._observer.generation_completed(
            backend=BACKEND_NAME,
            target=target.label,
            evaluation=task.evaluation.path,
            duration_ms=duration_ms,
            chars=len(response),
        )
        return GenerationOutput(
            prompt=prompt,
            response_text=response,
            tool_calls=capture.tool_calls,
            tool_results=capture.tool_results,
            transcript=build_tool_loop_transcript(
                system_prompt="",
                prompt=prompt,
                rounds=capture.rounds,
                title=f"{target.label} Agent Transcript",
            ),
        )

    async def _collect(self, prompt: str, options: ClaudeAgentOptions) -> _StreamCapture:
        capture = _StreamCapture()
        try:
            async for message in query(prompt=prompt, options=options):
                if isinstance(message, ResultMessage):
                    capture.result = message
                elif isinstance(message, AssistantMessage):
                    capture.add_assistant(message)
                elif isinstance(message, UserMessage):
                    capture.add_user(message)
        except Exception as exc:
            # ClaudeSDKError, or the bare Exception the SDK raises when its
            # message reader hits a fatal error such as the CLI exiting.
            raise AgentInvocationError(reason=str(exc), retriable=True) from exc
        return capture

    def _response_text(self, capture: _StreamCapture) -> str:
        result = capture.result
        if result is not None and result.is_error:
            raise AgentInvocationError(
                reason=f"agent returned error response: {result.result}"
            )
        if capture.texts:
            return "\n\n".join(capture.texts)
        if result is not None and result.result:
            return result.result
        raise AgentInvocationError(reason="agent produced no output")

    def _build_options(
        self, target: AgentTarget, work_dir: Path, mcp: bool
    ) -> ClaudeAgentOptions:
        mcp_servers: dict[str, McpHttpServerConfig] = {}
        if mcp:
            mcp_servers[self._mcp_config.server_name] = McpHttpServerConfig(
                type="http", url=self._mcp_config.server_url
            )
        return ClaudeAgentOptions(
            model=self._agent_config.model,
            cwd=work_dir,
            cli_path=target.executable_path,
            mcp_servers=mcp_servers,
            permission_mode="bypassPermissions",
            setting_sources=[],
        )
