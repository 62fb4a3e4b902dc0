"""Console reporting — a rich table of scores plus a run summary line."""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from fw_eval.storage.domain.records import Score


def _score_style(value: float) -> str:
    if value >= 0.8:
        return "green"
    if value >= 0.5:
        return "yellow"
    return "red"


def build_score_table(scores: Sequence[Score], title: str = "Scores") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Label")
    table.add_column("Model", style="dim")
    table.add_column("Framework")
    table.add_column("Category")
    table.add_column("Score", justify="right")

    ordered = sorted(scores, key=lambda s: (s.label, s.framework, s.category))
    for score in ordered:
        table.add_row(
            score.label,
            score.model,
            score.framework,
            score.category,
            f"[{_score_style(score.value)}]{score.value * 100:.1f}%[/]",
        )
    return table


def render_run_summary(
    console: Console,
    run_id: str,
    scores: Sequence[Score],
    succeeded: int,
    failed: int,
    output_path: str | None = None,
) -> None:
    if scores:
        console.print(build_score_table(scores, title=f"Run {run_id}"))
    status = "green" if failed == 0 else "yellow"
    console.print(
        f"[{status}]{succeeded} succeeded, {failed} failed[/] "
        f"({succeeded + failed} tasks)"
    )
    if output_path is not None:
        console.print(f"Scores written to: {output_path}")
