"""Dispatcher — runs a task list through the worker pool and records the outcome."""

import asyncio
import time
from collections import Counter
from pathlib import Path

from pydantic import BaseModel
from rich.text import Text

from fw_eval.core.errors import FwEvalError
from fw_eval.execution.application.context import RunContext
from fw_eval.execution.application.executor import TaskExecutor
from fw_eval.execution.application.pool import WorkerPool
from fw_eval.execution.domain.backend import Backend
from fw_eval.execution.domain.result import TaskFailure, TaskResult, TaskSuccess
from fw_eval.execution.domain.task import Task
from fw_eval.execution.infrastructure.debug_writer import DebugArtifactWriter
from fw_eval.reporting.console import render_run_summary
from fw_eval.reporting.json_file import write_json_atomic
from fw_eval.storage.domain.records import ErrorDetails, Score
from fw_eval.storage.infrastructure.sqlite_store import utcnow


class RunOutcome(BaseModel, frozen=True):
    run_id: str
    scores: list[Score]
    succeeded: int
    failed: int
    output_path: Path | None = None


class Dispatcher:
    """Runs every task of a run to completion, then reports.

    Each settled task is written to the store straight away: a Score row on
    success, an Error row on failure. A failing task never stops its
    siblings. Once all tasks settle, the run's scores are read back from the
    store, written to the JSON score file, and summarised on the console.
    """

    def __init__(
        self,
        context: RunContext,
        backend: Backend,
        max_concurrent: int,
        debug_writer: DebugArtifactWriter | None = None,
    ) -> None:
        self._context = context
        self._backend = backend
        self._max_concurrent = max_concurrent
        self._debug_writer = debug_writer

    async def run(
        self, run_id: str, tasks: list[Task], output_path: Path | None = None
    ) -> RunOutcome:
        observer = self._context.task_observer
        observer.run_started(
            run_id=run_id,
            target_totals=dict(Counter(task.result_label for task in tasks)),
            max_concurrent=self._max_concurrent,
        )
        started_at = time.monotonic()

        executor = TaskExecutor(
            run_id=run_id,
            backend=self._backend,
            grader_loader=self._context.grader_loader,
            judge=self._context.judge,
            retry=self._context.config.execution.retry,
            observer=observer,
        )

        settled: list[asyncio.Task[TaskResult]] = []
        try:
            async with WorkerPool(self._max_concurrent) as pool:
                for task in tasks:
                    settled.append(
                        pool.submit(self._run_one(run_id, task, executor, pool))
                    )
        except* FwEvalError as eg:
            # Only store failures get here.
            raise eg.exceptions[0]

        succeeded = sum(1 for t in settled if t.result().ok)
        failed = len(settled) - succeeded

        scores = [stored.score for stored in self._context.store.get_results(run_id)]
        if output_path is not None:
            write_json_atomic(output_path, scores)

        observer.run_completed(
            run_id=run_id,
            succeeded=succeeded,
            failed=failed,
            elapsed_seconds=time.monotonic() - started_at,
        )
        render_run_summary(
            self._context.console,
            run_id=run_id,
            scores=scores,
            succeeded=succeeded,
            failed=failed,
            output_path=str(output_path) if output_path is not None else None,
        )
        return RunOutcome(
            run_id=run_id,
            scores=scores,
            succeeded=succeeded,
            failed=failed,
            output_path=output_path,
        )

    async def _run_one(
        self, run_id: str, task: Task, executor: TaskExecutor, pool: WorkerPool
    ) -> TaskResult:
        result = await executor.execute(task, pool)
        if isinstance(result, TaskSuccess):
            self._record_success(run_id, task, result)
        else:
            self._record_failure(run_id, task, result)
        return result

    def _record_success(self, run_id: str, task: Task, result: TaskSuccess) -> None:
        self._context.store.save_result(
            run_id,
            Score(
                model=task.target.name,
                label=task.result_label,
                framework=task.evaluation.framework,
                category=task.evaluation.category,
                value=result.score,
                updated_at=utcnow(),
            ),
        )
        if self._debug_writer is not None and result.debug is not None:
            try:
                path = self._debug_writer.write(
                    run_id=run_id, task=task, score=result.score, payload=result.debug
                )
            except OSError as exc:
                self._context.task_observer.debug_artifacts_failed(
                    run_id=run_id,
                    target=task.result_label,
                    evaluation=task.evaluation.path,
                    reason=str(exc),
                )
                return
            self._context.task_observer.debug_artifacts_written(
                run_id=run_id,
                target=task.result_label,
                evaluation=task.evaluation.path,
                path=str(path),
            )

    def _record_failure(self, run_id: str, task: Task, result: TaskFailure) -> None:
        self._context.store.save_error(
            run_id,
            ErrorDetails(
                model=task.target.name,
                label=task.result_label,
                framework=task.evaluation.framework,
                category=task.evaluation.category,
                evaluation_path=task.evaluation.path,
            ),
            result.error,
        )
        self._context.console.print(
            Text.assemble(
                ("[error]", "bold red"),
                f" {task.result_label}: {result.error.message}",
            )
        )
