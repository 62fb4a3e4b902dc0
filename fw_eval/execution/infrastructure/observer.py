"""Structlog implementations of the TaskObserver and BackendObserver ports."""

import structlog


class StructlogTaskObserver:
    """Delegates dispatch events to structlog.

    Satisfies the TaskObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(
        self, run_id: str, target_totals: dict[str, int], max_concurrent: int
    ) -> None:
        self._log.info(
            "run.started",
            run_id=run_id,
            total_tasks=sum(target_totals.values()),
            targets=list(target_totals),
            max_concurrent=max_concurrent,
        )

    def run_completed(
        self, run_id: str, succeeded: int, failed: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "run.completed",
            run_id=run_id,
            succeeded=succeeded,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def task_started(self, run_id: str, target: str, evaluation: str) -> None:
        self._log.info(
            "task.started", run_id=run_id, target=target, evaluation=evaluation
        )

    def task_completed(
        self, run_id: str, target: str, evaluation: str, score: float
    ) -> None:
        self._log.info(
            "task.completed",
            run_id=run_id,
            target=target,
            evaluation=evaluation,
            score=score,
        )

    def task_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        self._log.error(
            "task.failed",
            run_id=run_id,
            target=target,
            evaluation=evaluation,
            reason=reason,
        )

    def task_retry(
        self,
        run_id: str,
        target: str,
        evaluation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        self._log.warning(
            "task.retry",
            run_id=run_id,
            target=target,
            evaluation=evaluation,
            attempt=attempt,
            reason=reason,
            backoff_seconds=backoff_seconds,
        )

    def debug_artifacts_written(
        self, run_id: str, target: str, evaluation: str, path: str
    ) -> None:
        self._log.debug(
            "task.debug_artifacts_written",
            run_id=run_id,
            target=target,
            evaluation=evaluation,
            path=path,
        )

    def debug_artifacts_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        self._log.warning(
            "task.debug_artifacts_failed",
            run_id=run_id,
            target=target,
            evaluation=evaluation,
            reason=reason,
        )


class StructlogBackendObserver:
    """Delegates backend events to structlog under ``backend.*`` names."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def generation_started(self, backend: str, target: str, evaluation: str) -> None:
        self._log.debug(
            f"backend.{backend}.generation_started",
            target=target,
            evaluation=evaluation,
        )

    def generation_completed(
        self, backend: str, target: str, evaluation: str, duration_ms: int, chars: int
    ) -> None:
        self._log.debug(
            f"backend.{backend}.generation_completed",
            target=target,
            evaluation=evaluation,
            duration_ms=duration_ms,
            chars=chars,
        )

    def tool_session_opened(self, url: str, num_tools: int) -> None:
        self._log.info("backend.mcp.session_opened", url=url, num_tools=num_tools)

    def tool_session_close_failed(self, url: str, reason: str) -> None:
        self._log.warning("backend.mcp.session_close_failed", url=url, reason=reason)

    def tool_called(self, tool_name: str, round_index: int) -> None:
        self._log.debug("backend.mcp.tool_called", tool=tool_name, round=round_index)

    def tool_round_limit_reached(self, target: str, max_rounds: int) -> None:
        self._log.info(
            "backend.mcp.round_limit_reached", target=target, max_rounds=max_rounds
        )

    def agent_spawned(self, agent: str, executable: str, work_dir: str) -> None:
        self._log.debug(
            "backend.agent.spawned", agent=agent, executable=executable, work_dir=work_dir
        )

    def agent_exited(self, agent: str, exit_code: int, duration_ms: int) -> None:
        self._log.debug(
            "backend.agent.exited",
            agent=agent,
            exit_code=exit_code,
            duration_ms=duration_ms,
        )

    def agent_timed_out(self, agent: str, timeout_ms: int) -> None:
        self._log.warning("backend.agent.timed_out", agent=agent, timeout_ms=timeout_ms)

    def work_dir_cleanup_failed(self, path: str, reason: str) -> None:
        self._log.warning("backend.agent.cleanup_failed", path=path, reason=reason)
