"""TaskExecutor — generates, grades, and scores one task with retry and backoff."""

import asyncio
import traceback

from fw_eval.config.domain.execution import RetryConfig
from fw_eval.core.errors import FwEvalError
from fw_eval.execution.application.pool import WorkerPool
from fw_eval.execution.domain.backend import Backend
from fw_eval.execution.domain.observer import TaskObserver
from fw_eval.execution.domain.result import (
    DebugPayload,
    GenerationOutput,
    TaskError,
    TaskFailure,
    TaskResult,
    TaskSuccess,
)
from fw_eval.execution.domain.task import Task
from fw_eval.execution.infrastructure.errors import TaskTimeoutError
from fw_eval.execution.infrastructure.transcript import append_grader_results
from fw_eval.grading.application.scoring import compute_score, run_graders
from fw_eval.grading.domain.loader import GraderSetLoader
from fw_eval.judge.domain.judge import Judge


def to_task_error(exc: BaseException) -> TaskError:
    return TaskError(
        message=str(exc) or type(exc).__name__,
        trace="".join(traceback.format_exception(exc)),
    )


class TaskExecutor:
    """Turns a Task into a TaskResult; never raises for task-level errors.

    Retriable FwEvalErrors are retried up to ``retry.max_attempts`` times. The
    pool slot is held only while an attempt is running, never during backoff.
    Any exception that survives the retries becomes a TaskFailure so that
    sibling tasks keep running.
    """

    def __init__(
        self,
        run_id: str,
        backend: Backend,
        grader_loader: GraderSetLoader,
        judge: Judge,
        retry: RetryConfig,
        observer: TaskObserver,
    ) -> None:
        self._run_id = run_id
        self._backend = backend
        self._grader_loader = grader_loader
        self._judge = judge
        self._retry = retry
        self._observer = observer

    async def execute(self, task: Task, pool: WorkerPool) -> TaskResult:
        backoff = float(self._retry.initial_backoff_seconds)
        target = task.result_label
        evaluation = task.evaluation.path

        for attempt in range(1, self._retry.max_attempts + 1):
            async with pool.slot():
                self._observer.task_started(
                    run_id=self._run_id, target=target, evaluation=evaluation
                )
                try:
                    result = await self._attempt(task)
                except FwEvalError as exc:
                    if not exc.retriable or attempt == self._retry.max_attempts:
                        return self._fail(task, exc)
                    self._observer.task_retry(
                        run_id=self._run_id,
                        target=target,
                        evaluation=evaluation,
                        attempt=attempt,
                        reason=str(exc),
                        backoff_seconds=backoff,
                    )
                except Exception as exc:
                    return self._fail(task, exc)
                else:
                    self._observer.task_completed(
                        run_id=self._run_id,
                        target=target,
                        evaluation=evaluation,
                        score=result.score,
                    )
                    return result
            # Slot released; back off outside it.
            await asyncio.sleep(backoff)
            backoff *= self._retry.backoff_multiplier

        raise AssertionError("unreachable: retry loop always returns")

    async def _attempt(self, task: Task) -> TaskSuccess:
        output = await self._generate(task)
        graders = self._grader_loader.load(task.evaluation)
        outcomes = await run_graders(graders, output.response_text, self._judge)
        score = compute_score(outcomes)
        debug = _debug_payload(output, outcomes) if task.options.debug else None
        return TaskSuccess(score=score, graders=outcomes, debug=debug)

    async def _generate(self, task: Task) -> GenerationOutput:
        # Agent backends enforce their own wall-clock budget and kill the process.
        timeout_ms = task.options.timeout_ms
        if timeout_ms is None or task.target.kind == "agent":
            return await self._backend.execute(task)
        try:
            async with asyncio.timeout(timeout_ms / 1000):
                return await self._backend.execute(task)
        except TimeoutError:
            raise TaskTimeoutError(
                task_name=task.display_name, timeout_ms=timeout_ms
            ) from None

    def _fail(self, task: Task, exc: BaseException) -> TaskFailure:
        self._observer.task_failed(
            run_id=self._run_id,
            target=task.result_label,
            evaluation=task.evaluation.path,
            reason=str(exc),
        )
        return TaskFailure(error=to_task_error(exc))


def _debug_payload(
    output: GenerationOutput, outcomes: list[tuple[str, bool]]
) -> DebugPayload:
    transcript = output.transcript
    if transcript:
        transcript = append_grader_results(transcript, outcomes)
    return DebugPayload(
        prompt=output.prompt,
        response=output.response_text,
        graders=outcomes,
        tool_calls=output.tool_calls,
        tool_results=output.tool_results,
        transcript=transcript,
    )
