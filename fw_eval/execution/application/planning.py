"""Task planning — target selection, the targets × evaluations product, run ids."""

from collections.abc import Sequence
from datetime import UTC, datetime

from fw_eval.config.domain.model import ModelConfig
from fw_eval.evaluation.domain.evaluation import Evaluation
from fw_eval.execution.domain.task import ModelTarget, Target, Task, TaskOptions
from fw_eval.execution.infrastructure.errors import TargetNotFoundError


def model_targets(models: Sequence[ModelConfig]) -> list[ModelTarget]:
    return [
        ModelTarget(provider=m.provider, name=m.name, label=m.label) for m in models
    ]


def select_targets(
    targets: Sequence[ModelTarget], query: str | None
) -> list[ModelTarget]:
    """Keep targets whose name or label contains *query* (case-insensitive).

    Raises:
        TargetNotFoundError: if a query is given and nothing matches.
    """
    if not query:
        return list(targets)
    needle = query.lower()
    selected = [
        t for t in targets if needle in t.name.lower() or needle in t.label.lower()
    ]
    if not selected:
        raise TargetNotFoundError(query=query, available=[t.name for t in targets])
    return selected


def build_tasks(
    targets: Sequence[Target],
    evaluations: Sequence[Evaluation],
    options: TaskOptions,
) -> list[Task]:
    """Cross product, ordered target-major so each target's tasks are adjacent."""
    return [
        Task(target=target, evaluation=evaluation, options=options)
        for target in targets
        for evaluation in evaluations
    ]


def make_run_id(mode: str, now: datetime | None = None) -> str:
    """``api`` → ``api-2025-01-01T00-00-00-000000Z``."""
    stamp = (now or datetime.now(UTC)).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return f"{mode}-{stamp}"


def run_mode(mcp: bool, agent_type: str | None = None) -> str:
    """Run id prefix: ``api``, ``mcp``, ``agent-<type>`` or ``agent-<type>-mcp``."""
    if agent_type is None:
        return "mcp" if mcp else "api"
    return f"agent-{agent_type}-mcp" if mcp else f"agent-{agent_type}"
