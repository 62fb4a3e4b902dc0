"""Markdown transcripts written alongside debug artifacts."""

import json
from dataclasses import dataclass, field

from fw_eval.execution.domain.result import ToolCallInfo, ToolResultInfo

ASSISTANT_PREVIEW_CHARS = 500
TOOL_RESULT_PREVIEW_CHARS = 1000
AGENT_OUTPUT_PREVIEW_CHARS = 10_000


@dataclass(frozen=True)
class ToolRound:
    """One model call of the tool loop and the tool traffic it triggered."""

    index: int
    finish_reason: str
    text: str
    tool_calls: list[ToolCallInfo] = field(default_factory=list)
    tool_results: list[ToolResultInfo] = field(default_factory=list)


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}...\n\n_(truncated, {len(text)} chars total)_"


def build_tool_loop_transcript(
    system_prompt: str,
    prompt: str,
    rounds: list[ToolRound],
    title: str = "MCP Evaluation Transcript",
) -> str:
    lines = [f"# {title}\n"]
    if system_prompt:
        lines.extend(["## System Prompt\n", "```", system_prompt.strip(), "```\n"])
    lines += [
        "## User Prompt\n",
        "```markdown",
        prompt.strip(),
        "```\n",
        "---\n",
        "## Conversation\n",
    ]
    for round_ in rounds:
        lines.append(f"### Step {round_.index} ({round_.finish_reason})\n")
        if round_.text:
            lines.append("**Assistant:**\n")
            lines.append(_truncate(round_.text, ASSISTANT_PREVIEW_CHARS))
            lines.append("\n")
        if round_.tool_calls:
            lines.append("**Tool Calls:**\n")
            for call in round_.tool_calls:
                lines.append(f"`{call.tool_name}`")
                lines.append("```json")
                lines.append(json.dumps(call.args, indent=2))
                lines.append("```\n")
        if round_.tool_results:
            lines.append("**Tool Results:**\n")
            for result in round_.tool_results:
                lines.append(f"`{result.tool_name}` returned:")
                lines.append("```")
                lines.append(_truncate(result.result, TOOL_RESULT_PREVIEW_CHARS))
                lines.append("```\n")
        lines.append("---\n")
    return "\n".join(lines)


def build_agent_transcript(
    agent_label: str,
    prompt: str,
    output: str,
    duration_ms: int,
    exit_code: int,
) -> str:
    shown = output[:AGENT_OUTPUT_PREVIEW_CHARS]
    if len(output) > AGENT_OUTPUT_PREVIEW_CHARS:
        shown += "\n... (truncated)"
    return "\n".join(
        [
            f"# {agent_label} Agent Transcript\n",
            "## Execution Info",
            f"- **Duration**: {duration_ms / 1000:.2f}s",
            f"- **Exit Code**: {exit_code}",
            f"- **Success**: {str(exit_code == 0).lower()}\n",
            "## Prompt",
            "```markdown",
            prompt.strip(),
            "```\n",
            "## Output",
            "```",
            shown,
            "```\n",
        ]
    )


def append_grader_results(transcript: str, graders: list[tuple[str, bool]]) -> str:
    """Close a transcript with the score line and a PASS/FAIL table."""
    passed = sum(1 for _, ok in graders if ok)
    percent = passed / len(graders) * 100 if graders else 0.0
    lines = [
        transcript.rstrip("\n") + "\n",
        "## Grader Results\n",
        f"**Score: {percent:.1f}%** ({passed}/{len(graders)})\n",
        "| Grader | Result |",
        "|--------|--------|",
    ]
    lines.extend(f"| {name} | {'PASS' if ok else 'FAIL'} |" for name, ok in graders)
    lines.append("")
    return "\n".join(lines)
