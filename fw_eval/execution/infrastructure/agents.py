"""Agent registry — known CLI coding agents and how to launch them."""

import shutil
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel

from fw_eval.execution.domain.task import AgentTarget
from fw_eval.execution.infrastructure.errors import (
    AgentTypeNotSupportedError,
    ExecutableNotFoundError,
)


class AgentInfo(BaseModel, frozen=True):
    type: str
    label: str
    command: str
    # Flags placed before the prompt argument for non-interactive runs.
    args: tuple[str, ...] = ()
    driver: Literal["subprocess", "sdk"] = "subprocess"


AGENTS: dict[str, AgentInfo] = {
    "claude-code": AgentInfo(
        type="claude-code",
        label="Claude Code",
        command="claude",
        args=("--print", "--dangerously-skip-permissions"),
    ),
    "cursor": AgentInfo(
        type="cursor",
        label="Cursor",
        command="cursor-agent",
        args=("--print", "--force"),
    ),
    "claude-sdk": AgentInfo(
        type="claude-sdk",
        label="Claude Agent SDK",
        command="claude",
        driver="sdk",
    ),
}


def all_agent_types() -> list[str]:
    return list(AGENTS)


def get_agent_info(agent_type: str) -> AgentInfo:
    """
    Raises:
        AgentTypeNotSupportedError: if agent_type is not registered.
    """
    info = AGENTS.get(agent_type)
    if info is None:
        raise AgentTypeNotSupportedError(
            agent_type=agent_type, available=all_agent_types()
        )
    return info


def resolve_agent_target(
    agent_type: str,
    which: Callable[[str], str | None] = shutil.which,
) -> AgentTarget:
    """Look the agent's executable up on PATH once, before any task runs.

    Raises:
        AgentTypeNotSupportedError: if agent_type is not registered.
        ExecutableNotFoundError: if the executable is not on PATH.
    """
    info = get_agent_info(agent_type)
    executable = which(info.command)
    if executable is None:
        raise ExecutableNotFoundError(agent_type=agent_type, executable=info.command)
    return AgentTarget(type=info.type, label=info.label, executable_path=executable)
