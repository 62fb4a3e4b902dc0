"""Tests for PythonGraderSetLoader."""

from pathlib import Path

import pytest

from fw_eval.grading.domain.grader import Grader
from fw_eval.grading.infrastructure.errors import EmptyGraderSetError, GraderLoadError
from fw_eval.grading.infrastructure.module_loader import PythonGraderSetLoader
from tests.evaluation.builders import make_evaluation, write_evaluation_dir


def _load(tmp_path: Path, graders_source: str, path: str = "evals/auth/protect"):
    root = write_evaluation_dir(tmp_path, "auth/protect", graders=graders_source)
    evaluation = make_evaluation(path=path, root=root)
    return PythonGraderSetLoader().load(evaluation)


class TestLoad:
    """Valid graders modules load into a name → grader mapping."""

    def test_loads_graders_in_definition_order(self, tmp_path: Path) -> None:
        source = (
            "from fw_eval.grading.graders import contains, define_graders, matches\n"
            "graders = define_graders({\n"
            "    'middleware': contains('clerkMiddleware'),\n"
            "    'matcher': matches(r'matcher'),\n"
            "})\n"
        )

        graders = _load(tmp_path, source)

        assert list(graders) == ["middleware", "matcher"]
        assert all(isinstance(g, Grader) for g in graders.values())

    def test_repeated_loads_reuse_the_module(self, tmp_path: Path) -> None:
        root = write_evaluation_dir(tmp_path, "auth/protect")
        evaluation = make_evaluation(root=root)
        loader = PythonGraderSetLoader()

        assert loader.load(evaluation) is loader.load(evaluation)


class TestLoadErrors:
    """Malformed modules raise descriptive errors."""

    def test_empty_grader_set(self, tmp_path: Path) -> None:
        with pytest.raises(EmptyGraderSetError, match="evals/auth/protect"):
            _load(tmp_path, "graders = {}\n")

    def test_missing_attribute(self, tmp_path: Path) -> None:
        with pytest.raises(GraderLoadError, match="defines no 'graders'"):
            _load(tmp_path, "x = 1\n")

    def test_not_a_dict(self, tmp_path: Path) -> None:
        with pytest.raises(GraderLoadError, match="must be a dict"):
            _load(tmp_path, "graders = [1, 2]\n")

    def test_non_grader_values(self, tmp_path: Path) -> None:
        with pytest.raises(GraderLoadError, match="not graders: bad"):
            _load(tmp_path, "graders = {'bad': 42}\n")

    def test_import_error_is_wrapped(self, tmp_path: Path) -> None:
        with pytest.raises(GraderLoadError, match="ZeroDivisionError"):
            _load(tmp_path, "1 / 0\n")
