"""Evaluation selection — narrows the catalog to what the operator asked for."""

from pathlib import Path

from fw_eval.evaluation.domain.evaluation import Evaluation
from fw_eval.evaluation.domain.loader import EvaluationLoader
from fw_eval.evaluation.infrastructure.errors import EvaluationNotFoundError

_PATH_PREFIX = "evals/"


def normalize_eval_path(value: str) -> str:
    """Normalise a user-supplied evaluation reference to the ``evals/...`` form."""
    if value.startswith("./"):
        return normalize_eval_path(value[2:])
    if value.startswith(_PATH_PREFIX):
        return value
    return f"{_PATH_PREFIX}{value}"


def matches_filter(evaluation: Evaluation, query: str) -> bool:
    """True if ``evaluation`` matches ``query``.

    A query matches on the exact normalised path, a path suffix, or a
    case-insensitive substring of the category or the path.
    """
    normalized = normalize_eval_path(query)
    lowered = query.lower()
    return (
        evaluation.path == normalized
        or evaluation.path.endswith(f"/{normalized}")
        or evaluation.path.endswith(f"/{query}")
        or lowered in evaluation.category.lower()
        or lowered in evaluation.path.lower()
    )


def select_evaluations(
    evaluations: list[Evaluation], queries: list[str] | None = None
) -> list[Evaluation]:
    """Return the enabled evaluations matching any of ``queries``.

    With no queries every enabled evaluation is returned.

    Raises:
        EvaluationNotFoundError: if a query matches nothing. The error lists every
            available evaluation path so the operator can correct the filter.
    """
    enabled = [e for e in evaluations if e.enabled]
    if not queries:
        return enabled

    selected: list[Evaluation] = []
    for query in queries:
        matched = [e for e in enabled if matches_filter(evaluation=e, query=query)]
        if not matched:
            raise EvaluationNotFoundError(
                query=query, available=[e.path for e in enabled]
            )
        for evaluation in matched:
            if evaluation not in selected:
                selected.append(evaluation)
    return selected


def load_selected_evaluations(
    loader: EvaluationLoader, root: Path, queries: list[str] | None = None
) -> list[Evaluation]:
    """Discover the catalog below root through loader, then select from it."""
    return select_evaluations(loader.load(root=root), queries=queries)
