"""Fixed instructions wrapped around every evaluation prompt."""

from pathlib import Path

from fw_eval.evaluation.domain.evaluation import Evaluation

SYSTEM_INSTRUCTION = """\
YOU MUST output all files as fenced code blocks, like so

```lang file="path/to/file.ts"

```
"""

AGENT_SYSTEM_INSTRUCTION = """\
YOU MUST output all files as fenced code blocks, like so

```lang file="path/to/file.ts"
// file content
```

Do not ask clarifying questions. Complete the task with the information provided.
"""

AGENT_PROMPT_SEPARATOR = "\n\n---\n\n"


def load_prompt(evaluation: Evaluation) -> str:
    return Path(evaluation.prompt_path).read_text(encoding="utf-8")


def build_agent_prompt(evaluation: Evaluation) -> str:
    """Agent instruction, a horizontal rule, then the evaluation's own prompt."""
    return (
        AGENT_SYSTEM_INSTRUCTION.strip()
        + AGENT_PROMPT_SEPARATOR
        + load_prompt(evaluation)
    )
