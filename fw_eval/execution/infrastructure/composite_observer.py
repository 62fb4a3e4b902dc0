"""CompositeTaskObserver — fans out all events to a list of observers."""

from fw_eval.execution.domain.observer import TaskObserver


class CompositeTaskObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from TaskObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[TaskObserver]) -> None:
        self._observers = observers

    def run_started(
        self, run_id: str, target_totals: dict[str, int], max_concurrent: int
    ) -> None:
        for obs in self._observers:
            obs.run_started(
                run_id=run_id,
                target_totals=target_totals,
                max_concurrent=max_concurrent,
            )

    def run_completed(
        self, run_id: str, succeeded: int, failed: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.run_completed(
                run_id=run_id,
                succeeded=succeeded,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )

    def task_started(self, run_id: str, target: str, evaluation: str) -> None:
        for obs in self._observers:
            obs.task_started(run_id=run_id, target=target, evaluation=evaluation)

    def task_completed(
        self, run_id: str, target: str, evaluation: str, score: float
    ) -> None:
        for obs in self._observers:
            obs.task_completed(
                run_id=run_id, target=target, evaluation=evaluation, score=score
            )

    def task_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.task_failed(
                run_id=run_id, target=target, evaluation=evaluation, reason=reason
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
        for obs in self._observers:
            obs.task_retry(
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
        for obs in self._observers:
            obs.debug_artifacts_written(
                run_id=run_id, target=target, evaluation=evaluation, path=path
            )

    def debug_artifacts_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.debug_artifacts_failed(
                run_id=run_id, target=target, evaluation=evaluation, reason=reason
            )
