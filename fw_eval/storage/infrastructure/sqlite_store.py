"""SQLite result store — two append-only tables, one row per task outcome."""

import sqlite3
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from fw_eval.execution.domain.result import TaskError
from fw_eval.storage.domain.records import ErrorDetails, ErrorRecord, Score, StoredScore
from fw_eval.storage.infrastructure.errors import ResultStoreError

SCHEMA = """
CREATE TABLE IF NOT EXISTS results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT NOT NULL,
    model TEXT NOT NULL,
    label TEXT NOT NULL,
    framework TEXT NOT NULL,
    category TEXT NOT NULL,
    value REAL NOT NULL,
    timestamp TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS errors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT NOT NULL,
    model TEXT NOT NULL,
    label TEXT,
    framework TEXT,
    category TEXT,
    evaluation_path TEXT NOT NULL,
    error_message TEXT NOT NULL,
    stack_trace TEXT,
    timestamp TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_results_run_id ON results(run_id);
CREATE INDEX IF NOT EXISTS idx_errors_run_id ON errors(run_id);
"""


def utcnow() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_error(error: BaseException | TaskError | object) -> tuple[str, str | None]:
    """Reduce any error value to ``(message, trace)`` plain strings."""
    if isinstance(error, TaskError):
        return error.message, error.trace
    if isinstance(error, BaseException):
        trace = "".join(traceback.format_exception(error))
        return str(error) or type(error).__name__, trace
    return str(error), None


class SqliteResultStore:
    """Durable log of Score and Error rows.

    Rows are only ever inserted; identity comes from SQLite's AUTOINCREMENT,
    so concurrent single-row appends never race on a read-modify-write.
    Each operation uses its own short-lived connection in WAL mode.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self._path), timeout=5.0, isolation_level=None)
        except sqlite3.Error as exc:
            raise ResultStoreError(path=str(self._path), reason=str(exc)) from exc
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as exc:
            raise ResultStoreError(path=str(self._path), reason=str(exc)) from exc
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create both tables if missing; safe to call on every start."""
        if self._path.parent != Path():
            self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    def save_result(self, run_id: str, score: Score) -> int:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO results (run_id, model, label, framework, category, value, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    run_id,
                    score.model,
                    score.label,
                    score.framework,
                    score.category,
                    score.value,
                    score.updated_at or utcnow(),
                ),
            )
            return int(cursor.lastrowid or 0)

    def save_error(
        self,
        run_id: str,
        details: ErrorDetails,
        error: BaseException | TaskError | object,
    ) -> int:
        message, trace = normalize_error(error)
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO errors (
                    run_id, model, label, framework, category,
                    evaluation_path, error_message, stack_trace, timestamp
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    run_id,
                    details.model,
                    details.label,
                    details.framework,
                    details.category,
                    details.evaluation_path,
                    message,
                    trace,
                    utcnow(),
                ),
            )
            return int(cursor.lastrowid or 0)

    def get_results(self, run_id: str | None = None) -> list[StoredScore]:
        """All score rows, optionally for one run, newest timestamp first."""
        query = "SELECT * FROM results"
        params: tuple[str, ...] = ()
        if run_id is not None:
            query += " WHERE run_id = ?"
            params = (run_id,)
        query += " ORDER BY timestamp DESC, id DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_stored_score(row) for row in rows]

    def get_latest_results(self) -> list[StoredScore]:
        """Rows of whichever run inserted the most recent row."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT run_id FROM results ORDER BY id DESC LIMIT 1"
            ).fetchone()
        if row is None:
            return []
        return self.get_results(run_id=row["run_id"])

    def get_errors(self, run_id: str | None = None) -> list[ErrorRecord]:
        query = "SELECT * FROM errors"
        params: tuple[str, ...] = ()
        if run_id is not None:
            query += " WHERE run_id = ?"
            params = (run_id,)
        query += " ORDER BY id DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [ErrorRecord(**dict(row)) for row in rows]


def _row_to_stored_score(row: sqlite3.Row) -> StoredScore:
    return StoredScore(
        id=row["id"],
        run_id=row["run_id"],
        score=Score(
            model=row["model"],
            label=row["label"],
            framework=row["framework"],
            category=row["category"],
            value=row["value"],
            updated_at=row["timestamp"],
        ),
    )
