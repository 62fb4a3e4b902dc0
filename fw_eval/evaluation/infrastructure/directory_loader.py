"""Directory evaluation loader — walks the definition tree and returns Evaluations."""

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from fw_eval.evaluation.domain.evaluation import (
    GRADERS_FILENAME,
    PROMPT_FILENAME,
    Evaluation,
)
from fw_eval.evaluation.domain.observer import EvaluationCatalogObserver
from fw_eval.evaluation.infrastructure.errors import EvaluationLoadError

DEFAULT_FRAMEWORK = "Next.js"
CONFIG_FILENAMES = ("config.yaml", "config.yml", "config.json")

_SKIPPED_DIRS = frozenset({"__pycache__", "node_modules"})
_ORDINAL_PREFIX = re.compile(r"^[0-9]+-")
_SEGMENT_SEPARATORS = re.compile(r"[/_-]+")


class _EvaluationFileConfig(BaseModel, frozen=True, extra="forbid"):
    framework: str | None = None
    category: str | None = None
    name: str | None = None
    enabled: bool = True


def to_title_case(value: str) -> str:
    """Turn a directory name such as ``001-api_routes`` into ``Api Routes``."""
    stripped = _ORDINAL_PREFIX.sub("", value)
    segments = [s for s in _SEGMENT_SEPARATORS.split(stripped) if s]
    return " ".join(s[0].upper() + s[1:] for s in segments)


class DirectoryEvaluationLoader:
    """Discovers evaluations in a directory tree.

    A directory is an evaluation when it holds both ``PROMPT.md`` and
    ``graders.py``; its subdirectories are not searched further. Hidden
    directories are skipped.
    """

    def __init__(self, observer: EvaluationCatalogObserver) -> None:
        self._observer = observer

    def load(self, root: Path) -> list[Evaluation]:
        """
        Load every evaluation below root, sorted by path.

        Collects ALL per-directory config problems before raising a single
        EvaluationLoadError listing every issue found.

        Raises:
            EvaluationLoadError: if root is not a directory or any evaluation
                config file is unreadable or invalid.
        """
        root_str = str(root)
        self._observer.catalog_loading_started(root=root_str)

        if not root.is_dir():
            reason = f"evaluation root not found: {root_str}"
            self._observer.catalog_loading_failed(root=root_str, reason=reason)
            raise EvaluationLoadError(reason=reason)

        evaluations: list[Evaluation] = []
        errors: list[str] = []
        for directory in self._walk(root):
            result = self._build_evaluation(root=root, directory=directory)
            if isinstance(result, str):
                errors.append(result)
            else:
                evaluations.append(result)
                self._observer.catalog_evaluation_found(
                    path=result.path, enabled=result.enabled
                )

        if errors:
            reason = "; ".join(errors)
            self._observer.catalog_loading_failed(root=root_str, reason=reason)
            raise EvaluationLoadError(reason=reason)

        evaluations.sort(key=lambda e: e.path)
        self._observer.catalog_loading_completed(
            root=root_str,
            total=len(evaluations),
            disabled=sum(1 for e in evaluations if not e.enabled),
        )
        return evaluations

    def _walk(self, current: Path) -> list[Path]:
        """Return every evaluation directory at or below current, depth first."""
        if _is_evaluation_directory(current):
            return [current]
        found: list[Path] = []
        for entry in sorted(current.iterdir()):
            if not entry.is_dir():
                continue
            if entry.name.startswith(".") or entry.name in _SKIPPED_DIRS:
                continue
            found.extend(self._walk(entry))
        return found

    def _build_evaluation(self, root: Path, directory: Path) -> Evaluation | str:
        """Build an Evaluation for directory, or return an error description."""
        relative = directory.relative_to(root).as_posix()
        if relative == ".":
            return f"{root}: evaluation files must live in a subdirectory"

        config = _read_config(directory)
        if isinstance(config, str):
            return config

        segments = relative.split("/")
        return Evaluation(
            path=f"evals/{relative}",
            root=directory.resolve(),
            framework=config.framework or DEFAULT_FRAMEWORK,
            category=config.category or to_title_case(segments[0]),
            name=config.name or to_title_case(segments[-1]),
            enabled=config.enabled,
        )


def _is_evaluation_directory(directory: Path) -> bool:
    return (directory / PROMPT_FILENAME).is_file() and (
        directory / GRADERS_FILENAME
    ).is_file()


def _read_config(directory: Path) -> _EvaluationFileConfig | str:
    """Parse the first config file present, YAML being a superset of JSON."""
    for filename in CONFIG_FILENAMES:
        path = directory / filename
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            return f"{path}: {exc}"
        if raw is None:
            return _EvaluationFileConfig()
        if not isinstance(raw, dict):
            return f"{path}: expected a mapping, got {type(raw).__name__}"
        try:
            return _EvaluationFileConfig.model_validate(raw)
        except ValidationError as exc:
            return f"{path}: {exc.error_count()} invalid field(s)"
    return _EvaluationFileConfig()
