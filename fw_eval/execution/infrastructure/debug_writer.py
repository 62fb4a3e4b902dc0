"""Per-task debug artifacts: a JSON dump and, when available, a Markdown transcript."""

import json
from pathlib import Path

from fw_eval.execution.domain.result import DebugPayload
from fw_eval.execution.domain.task import Task


def artifact_stem(task: Task) -> str:
    """``evals/auth/protect`` + ``gpt-5`` → ``evals__auth__protect__gpt-5``."""
    return f"{task.evaluation.path.replace('/', '__')}__{task.target.name}"


class DebugArtifactWriter:
    """Writes debug artifacts under ``<debug_dir>/<run_id>/``."""

    def __init__(self, debug_dir: Path) -> None:
        self._debug_dir = debug_dir

    def write(
        self, run_id: str, task: Task, score: float, payload: DebugPayload
    ) -> Path:
        """Write ``<stem>.json`` (and ``<stem>.md`` if a transcript exists); return the JSON path."""
        run_dir = self._debug_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        stem = artifact_stem(task)

        document = {
            "runId": run_id,
            "evaluation": task.evaluation.path,
            "model": task.target.name,
            "label": task.result_label,
            "score": score,
            **payload.model_dump(mode="json", exclude={"transcript"}),
        }
        json_path = run_dir / f"{stem}.json"
        json_path.write_text(json.dumps(document, indent=2), encoding="utf-8")

        if payload.transcript:
            (run_dir / f"{stem}.md").write_text(payload.transcript, encoding="utf-8")
        return json_path
