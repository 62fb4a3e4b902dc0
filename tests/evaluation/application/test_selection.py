"""Tests for evaluation filtering."""

from pathlib import Path

import pytest

from fw_eval.evaluation.application.selection import (
    load_selected_evaluations,
    matches_filter,
    normalize_eval_path,
    select_evaluations,
)
from fw_eval.evaluation.infrastructure.errors import EvaluationNotFoundError
from tests.evaluation.builders import make_evaluation
from tests.evaluation.fake_loader import FakeEvaluationLoader

_PROTECT = make_evaluation(path="evals/auth/protect-route", category="Auth")
_SIGN_IN = make_evaluation(path="evals/auth/sign-in", category="Auth")
_WEBHOOK = make_evaluation(path="evals/webhooks/verify", category="Webhooks")
_DISABLED = make_evaluation(path="evals/billing/plans", category="Billing", enabled=False)

_CATALOG = [_PROTECT, _SIGN_IN, _WEBHOOK, _DISABLED]


class TestNormalize:
    def test_adds_prefix(self) -> None:
        assert normalize_eval_path("auth/sign-in") == "evals/auth/sign-in"

    def test_strips_dot_slash(self) -> None:
        assert normalize_eval_path("./evals/auth/sign-in") == "evals/auth/sign-in"


class TestMatchesFilter:
    """Exact path, suffix, category and path substrings all match."""

    def test_exact_path(self) -> None:
        assert matches_filter(_WEBHOOK, "evals/webhooks/verify")

    def test_path_suffix(self) -> None:
        assert matches_filter(_WEBHOOK, "verify")

    def test_category_substring_is_case_insensitive(self) -> None:
        assert matches_filter(_WEBHOOK, "WEBHOOK")

    def test_path_substring(self) -> None:
        assert matches_filter(_PROTECT, "protect")

    def test_unrelated_query(self) -> None:
        assert not matches_filter(_PROTECT, "billing")


class TestSelectEvaluations:
    """select_evaluations skips disabled entries and rejects empty matches."""

    def test_no_queries_returns_enabled_only(self) -> None:
        assert select_evaluations(_CATALOG) == [_PROTECT, _SIGN_IN, _WEBHOOK]

    def test_queries_are_unioned_without_duplicates(self) -> None:
        selected = select_evaluations(_CATALOG, ["auth", "sign-in", "verify"])

        assert selected == [_PROTECT, _SIGN_IN, _WEBHOOK]

    def test_unknown_query_lists_available(self) -> None:
        with pytest.raises(EvaluationNotFoundError) as exc_info:
            select_evaluations(_CATALOG, ["payments"])

        message = str(exc_info.value)
        assert 'No evaluation matching "payments"' in message
        assert "evals/webhooks/verify" in message
        assert "evals/billing/plans" not in message

    def test_disabled_evaluation_cannot_be_selected(self) -> None:
        with pytest.raises(EvaluationNotFoundError):
            select_evaluations(_CATALOG, ["billing"])


class TestLoadSelectedEvaluations:
    """The catalog comes from whichever loader is passed in."""

    def test_selects_from_the_loaded_catalog(self, tmp_path: Path) -> None:
        loader = FakeEvaluationLoader(_CATALOG)

        selected = load_selected_evaluations(loader, root=tmp_path, queries=["webhook"])

        assert selected == [_WEBHOOK]
        assert loader.roots == [tmp_path]

    def test_no_queries_returns_enabled_catalog(self, tmp_path: Path) -> None:
        loader = FakeEvaluationLoader(_CATALOG)

        assert load_selected_evaluations(loader, root=tmp_path) == [
            _PROTECT,
            _SIGN_IN,
            _WEBHOOK,
        ]

    def test_unmatched_query_raises(self, tmp_path: Path) -> None:
        loader = FakeEvaluationLoader(_CATALOG)

        with pytest.raises(EvaluationNotFoundError):
            load_selected_evaluations(loader, root=tmp_path, queries=["orgs"])
