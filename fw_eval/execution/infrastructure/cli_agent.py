"""CliAgentBackend — runs a coding agent CLI as a subprocess per task."""

import asyncio
import contextlib
import time
from pathlib import Path

from fw_eval.config.domain.agent import AgentConfig
from fw_eval.config.domain.mcp import McpConfig
from fw_eval.execution.domain.observer import BackendObserver
from fw_eval.execution.domain.result import GenerationOutput
from fw_eval.execution.domain.task import AgentTarget, Task
from fw_eval.execution.infrastructure.agents import get_agent_info
from fw_eval.execution.infrastructure.errors import (
    AgentInvocationError,
    AgentTimeoutError,
    UnsupportedTargetError,
)
from fw_eval.execution.infrastructure.prompts import build_agent_prompt
from fw_eval.execution.infrastructure.transcript import build_agent_transcript
from fw_eval.execution.infrastructure.workdir import agent_work_dir, write_mcp_config

BACKEND_NAME = "cli-agent"
TERMINATE_GRACE_SECONDS = 5.0


def require_agent_target(task: Task) -> AgentTarget:
    target = task.target
    if not isinstance(target, AgentTarget):
        raise UnsupportedTargetError(provider=target.kind, model=target.name)
    return target


async def _terminate(process: asyncio.subprocess.Process) -> None:
    """SIGTERM, then SIGKILL if the process ignores it."""
    with contextlib.suppress(ProcessLookupError):
        process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_SECONDS)
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()


class CliAgentBackend:
    """Spawns ``<executable> <flags> <prompt>`` in a throwaway working directory.

    With MCP enabled a ``.mcp.json`` pointing at the tool server is written
    into the directory first. Combined stdout and stderr is the response.
    A nonzero exit that still produced output is graded as usual.
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
            AgentTimeoutError: if the process outlives the timeout; it is killed.
            AgentInvocationError: if the process cannot start or prints nothing.
        """
        target = require_agent_target(task)
        info = get_agent_info(target.type)
        prompt = build_agent_prompt(task.evaluation)
        timeout_ms = task.options.timeout_ms or self._agent_config.timeout_ms

        self._observer.generation_started(
            backend=BACKEND_NAME, target=target.label, evaluation=task.evaluation.path
        )
        async with agent_work_dir(observer=self._observer, root=self._work_root) as work_dir:
            if task.options.mcp:
                write_mcp_config(
                    work_dir=work_dir,
                    server_name=self._mcp_config.server_name,
                    server_url=self._mcp_config.server_url,
                )
            self._observer.agent_spawned(
                agent=target.type,
                executable=target.executable_path,
                work_dir=str(work_dir),
            )
            output, exit_code, duration_ms = await self._run(
                target=target,
                args=[*info.args, prompt],
                work_dir=work_dir,
                timeout_ms=timeout_ms,
            )

        if not output.strip():
            raise AgentInvocationError(
                reason=f"{target.type} exited with code {exit_code} and no output"
            )

        self._observer.generation_completed(
            backend=BACKEND_NAME,
            target=target.label,
            evaluation=task.evaluation.path,
            duration_ms=duration_ms,
            chars=len(output),
        )
        return GenerationOutput(
            prompt=prompt,
            response_text=output,
            transcript=build_agent_transcript(
                agent_label=target.label,
                prompt=prompt,
                output=output,
                duration_ms=duration_ms,
                exit_code=exit_code,
            ),
        )

    async def _run(
        self,
        target: AgentTarget,
        args: list[str],
        work_dir: Path,
        timeout_ms: int,
    ) -> tuple[str, int, int]:
        start = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                target.executable_path,
                *args,
                cwd=work_dir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AgentInvocationError(reason=str(exc)) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout_ms / 1000
            )
        except TimeoutError:
            await _terminate(process)
            self._observer.agent_timed_out(agent=target.type, timeout_ms=timeout_ms)
            raise AgentTimeoutError(agent=target.type, timeout_ms=timeout_ms) from None
        except asyncio.CancelledError:
            await _terminate(process)
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        exit_code = process.returncode if process.returncode is not None else -1
        self._observer.agent_exited(
            agent=target.type, exit_code=exit_code, duration_ms=duration_ms
        )
        output = stdout.decode("utf-8", errors="replace") + stderr.decode(
            "utf-8", errors="replace"
        )
        return output, exit_code, duration_ms
