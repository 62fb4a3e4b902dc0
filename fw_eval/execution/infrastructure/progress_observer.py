"""ProgressTaskObserver — per-target Rich progress bars on stderr."""

from __future__ import annotations

import sys
from collections import Counter

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.progress import Task as ProgressTask
from rich.text import Text

_OVERALL = "Overall"

_TARGET_COLORS: list[str] = ["cyan", "green", "yellow", "magenta", "blue"]


class _SegmentedBarColumn(ProgressColumn):
    """Bar with finished, in-flight and waiting segments."""

    def __init__(self, bar_width: int = 36) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: ProgressTask) -> Text:
        total = task.total or 0
        done_cells = inflight_cells = 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            inflight_cells = min(
                int(task.fields.get("inflight", 0) / total * self.bar_width),
                self.bar_width - done_cells,
            )
        waiting_cells = self.bar_width - done_cells - inflight_cells
        return Text.assemble(
            ("█" * done_cells, "bright_green"),
            ("▒" * inflight_cells, "grey50"),
            ("░" * waiting_cells, "dim white"),
        )


class _TallyColumn(ProgressColumn):
    """Renders ``done+inflight/total`` followed by the failure count, if any."""

    def render(self, task: ProgressTask) -> Text:
        text = Text.assemble(
            (str(int(task.completed)), "bright_green"),
            ("+", "dim white"),
            (str(task.fields.get("inflight", 0)), "grey50"),
            ("/", "dim white"),
            str(int(task.total or 0)),
        )
        failed = task.fields.get("failed", 0)
        if failed:
            text.append(f"  {failed} failed", style="red")
        return text


class ProgressTaskObserver:
    """Renders one Rich progress row per target plus an Overall row.

    Only run and task lifecycle events produce output. Pass ``disabled=True``
    to keep the counters without drawing anything (useful in tests).

    Does NOT inherit from TaskObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self.done: Counter[str] = Counter()
        self.inflight: Counter[str] = Counter()
        self.failed: Counter[str] = Counter()
        self._row_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None
        self._live: Live | None = None

    def _refresh(self, *keys: str) -> None:
        if self._progress is None:
            return
        for key in keys:
            row = self._row_ids.get(key)
            if row is None:
                continue
            self._progress.update(
                row,
                completed=self.done[key],
                inflight=self.inflight[key],
                failed=self.failed[key],
            )

    def _finish(self, target: str, failed: bool) -> None:
        for key in (target, _OVERALL):
            self.done[key] += 1
            self.inflight[key] = max(0, self.inflight[key] - 1)
            if failed:
                self.failed[key] += 1
        self._refresh(target, _OVERALL)

    def run_started(
        self, run_id: str, target_totals: dict[str, int], max_concurrent: int
    ) -> None:
        self.done.clear()
        self.inflight.clear()
        self.failed.clear()
        self._row_ids = {}

        if self._disabled:
            return

        pad = max((len(name) for name in [*target_totals, _OVERALL]), default=0)
        colored = sys.stderr.isatty()
        console = Console(stderr=True)
        self._progress = Progress(
            TextColumn("{task.description}"),
            _SegmentedBarColumn(),
            _TallyColumn(),
            TimeElapsedColumn(),
            console=console,
            refresh_per_second=10,
        )
        self._row_ids[_OVERALL] = self._progress.add_task(
            f"[bold]{_OVERALL:<{pad}}[/bold]",
            total=float(sum(target_totals.values())),
            inflight=0,
            failed=0,
        )
        for index, (name, total) in enumerate(target_totals.items()):
            description = f"{name:<{pad}}"
            if colored:
                color = _TARGET_COLORS[index % len(_TARGET_COLORS)]
                description = f"[{color}]{description}[/{color}]"
            self._row_ids[name] = self._progress.add_task(
                description, total=float(total), inflight=0, failed=0
            )

        self._live = Live(
            Group(Text(f"  {run_id}", style="dim"), self._progress),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def run_completed(
        self, run_id: str, succeeded: int, failed: int, elapsed_seconds: float
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._live = None
        self._progress = None
        self._row_ids = {}

    def task_started(self, run_id: str, target: str, evaluation: str) -> None:
        self.inflight[target] += 1
        self.inflight[_OVERALL] += 1
        self._refresh(target, _OVERALL)

    def task_completed(
        self, run_id: str, target: str, evaluation: str, score: float
    ) -> None:
        self._finish(target=target, failed=False)

    def task_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        self._finish(target=target, failed=True)

    def task_retry(
        self,
        run_id: str,
        target: str,
        evaluation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        # Sleeping through backoff; the next attempt reports task_started again.
        for key in (target, _OVERALL):
            self.inflight[key] = max(0, self.inflight[key] - 1)
        self._refresh(target, _OVERALL)

    def debug_artifacts_written(
        self, run_id: str, target: str, evaluation: str, path: str
    ) -> None:
        pass

    def debug_artifacts_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        pass
