"""Observer ports for task dispatch and backend execution."""

from typing import Protocol


class TaskObserver(Protocol):
    """Run- and task-level events emitted by the dispatcher and executor.

    ``target`` is the result label of the task (suffixed for tool-augmented
    runs) and ``evaluation`` its evaluation path.
    """

    def run_started(
        self, run_id: str, target_totals: dict[str, int], max_concurrent: int
    ) -> None: ...

    def run_completed(
        self, run_id: str, succeeded: int, failed: int, elapsed_seconds: float
    ) -> None: ...

    def task_started(self, run_id: str, target: str, evaluation: str) -> None: ...

    def task_completed(
        self, run_id: str, target: str, evaluation: str, score: float
    ) -> None: ...

    def task_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None: ...

    def task_retry(
        self,
        run_id: str,
        target: str,
        evaluation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None: ...

    def debug_artifacts_written(
        self, run_id: str, target: str, evaluation: str, path: str
    ) -> None: ...

    def debug_artifacts_failed(
        self, run_id: str, target: str, evaluation: str, reason: str
    ) -> None: ...


class BackendObserver(Protocol):
    """Events from inside a backend while a single task generates its response."""

    def generation_started(self, backend: str, target: str, evaluation: str) -> None: ...

    def generation_completed(
        self, backend: str, target: str, evaluation: str, duration_ms: int, chars: int
    ) -> None: ...

    def tool_session_opened(self, url: str, num_tools: int) -> None: ...

    def tool_session_close_failed(self, url: str, reason: str) -> None: ...

    def tool_called(self, tool_name: str, round_index: int) -> None: ...

    def tool_round_limit_reached(self, target: str, max_rounds: int) -> None: ...

    def agent_spawned(self, agent: str, executable: str, work_dir: str) -> None: ...

    def agent_exited(self, agent: str, exit_code: int, duration_ms: int) -> None: ...

    def agent_timed_out(self, agent: str, timeout_ms: int) -> None: ...

    def work_dir_cleanup_failed(self, path: str, reason: str) -> None: ...
