"""Tests for the agent registry."""

import pytest

from fw_eval.execution.infrastructure.agents import (
    all_agent_types,
    get_agent_info,
    resolve_agent_target,
)
from fw_eval.execution.infrastructure.errors import (
    AgentTypeNotSupportedError,
    ExecutableNotFoundError,
)


class TestRegistry:
    def test_known_agent_types(self) -> None:
        assert all_agent_types() == ["claude-code", "cursor", "claude-sdk"]

    def test_claude_code_command(self) -> None:
        info = get_agent_info("claude-code")

        assert info.command == "claude"
        assert info.args == ("--print", "--dangerously-skip-permissions")
        assert info.driver == "subprocess"

    def test_cursor_command(self) -> None:
        assert get_agent_info("cursor").command == "cursor-agent"

    def test_unknown_agent_lists_choices(self) -> None:
        with pytest.raises(AgentTypeNotSupportedError, match="claude-code, cursor"):
            get_agent_info("copilot")


class TestResolveAgentTarget:
    def test_resolves_executable_once(self) -> None:
        looked_up: list[str] = []

        def which(command: str) -> str | None:
            looked_up.append(command)
            return f"/usr/local/bin/{command}"

        target = resolve_agent_target("cursor", which=which)

        assert looked_up == ["cursor-agent"]
        assert target.executable_path == "/usr/local/bin/cursor-agent"
        assert target.name == "cursor"
        assert target.label == "Cursor"

    def test_missing_executable(self) -> None:
        with pytest.raises(ExecutableNotFoundError, match="'claude'"):
            resolve_agent_target("claude-code", which=lambda _: None)
