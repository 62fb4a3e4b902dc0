"""ResultStore Protocol — append-only log of scores and errors, keyed by run."""

from typing import Protocol

from fw_eval.execution.domain.result import TaskError
from fw_eval.storage.domain.records import ErrorDetails, ErrorRecord, Score, StoredScore


class ResultStore(Protocol):
    def initialize(self) -> None: ...

    def save_result(self, run_id: str, score: Score) -> int: ...

    def save_error(
        self,
        run_id: str,
        details: ErrorDetails,
        error: BaseException | TaskError | object,
    ) -> int: ...

    def get_results(self, run_id: str | None = None) -> list[StoredScore]: ...

    def get_latest_results(self) -> list[StoredScore]: ...

    def get_errors(self, run_id: str | None = None) -> list[ErrorRecord]: ...
