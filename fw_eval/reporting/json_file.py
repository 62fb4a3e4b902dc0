"""JSON score files — written atomically, read back for merging."""

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from fw_eval.reporting.errors import ScoreFileError
from fw_eval.storage.domain.records import Score

_SCORES_ADAPTER = TypeAdapter(list[Score])


def write_json_atomic(path: Path, records: Sequence[BaseModel]) -> None:
    """Serialise records as a JSON array using camelCase keys.

    The file is written to a sibling temp file and renamed into place, so
    readers never see a partial document. Unset optional fields are omitted.
    """
    payload = [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    ) as tmp:
        json.dump(payload, tmp, indent=2)
        tmp.write("\n")
    os.replace(tmp.name, path)


def read_scores(path: Path) -> list[Score]:
    """Load a score file; a missing file is an empty list.

    Raises:
        ScoreFileError: If the file cannot be read or its records are not
            Score rows (for example a ``--policy latest`` export).
    """
    if not path.exists():
        return []
    try:
        return _SCORES_ADAPTER.validate_json(path.read_bytes())
    except OSError as exc:
        raise ScoreFileError(path=path, reason=str(exc)) from exc
    except ValidationError as exc:
        raise ScoreFileError(
            path=path, reason=f"{exc.error_count()} invalid record field(s)"
        ) from exc
