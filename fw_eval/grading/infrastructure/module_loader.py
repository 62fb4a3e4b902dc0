"""Loads each evaluation's ``graders.py`` as an isolated Python module."""

import hashlib
import importlib.util
from types import ModuleType

from fw_eval.evaluation.domain.evaluation import Evaluation
from fw_eval.grading.domain.grader import Grader, GraderSet
from fw_eval.grading.infrastructure.errors import EmptyGraderSetError, GraderLoadError

GRADERS_ATTRIBUTE = "graders"


class PythonGraderSetLoader:
    """Imports ``<evaluation>/graders.py`` and returns its ``graders`` mapping.

    Every file gets a unique module name derived from its path, so evaluations
    with identically named helpers never collide. Modules are imported once
    per loader and reused by every task of the same evaluation.
    """

    def __init__(self) -> None:
        self._cache: dict[str, GraderSet] = {}

    def load(self, evaluation: Evaluation) -> GraderSet:
        """
        Raises:
            GraderLoadError: if the module cannot be imported or ``graders`` is
                missing or not a mapping of grader objects.
            EmptyGraderSetError: if ``graders`` is empty.
        """
        if evaluation.path in self._cache:
            return self._cache[evaluation.path]

        path = evaluation.graders_path
        module = self._import(evaluation)
        graders = getattr(module, GRADERS_ATTRIBUTE, None)
        if graders is None:
            raise GraderLoadError(
                path=str(path), reason=f"module defines no '{GRADERS_ATTRIBUTE}'"
            )
        if not isinstance(graders, dict):
            raise GraderLoadError(
                path=str(path),
                reason=f"'{GRADERS_ATTRIBUTE}' must be a dict, got {type(graders).__name__}",
            )
        if not graders:
            raise EmptyGraderSetError(source=evaluation.path)
        invalid = [name for name, g in graders.items() if not isinstance(g, Grader)]
        if invalid:
            raise GraderLoadError(
                path=str(path), reason=f"not graders: {', '.join(map(str, invalid))}"
            )

        self._cache[evaluation.path] = graders
        return graders

    def _import(self, evaluation: Evaluation) -> ModuleType:
        path = evaluation.graders_path
        digest = hashlib.sha1(evaluation.path.encode("utf-8")).hexdigest()[:12]
        module_name = f"fw_eval_graders_{digest}"

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise GraderLoadError(path=str(path), reason="not an importable file")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise GraderLoadError(
                path=str(path), reason=f"{type(exc).__name__}: {exc}"
            ) from exc
        return module
