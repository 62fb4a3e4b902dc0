"""Tests for console reporting."""

import io

from rich.console import Console

from fw_eval.reporting.console import build_score_table, render_run_summary
from fw_eval.storage.domain.records import Score


def _console() -> tuple[Console, io.StringIO]:
    output = io.StringIO()
    return Console(file=output, width=200, force_terminal=False), output


def _score(label: str, value: float) -> Score:
    return Score(
        model="gpt-5",
        label=label,
        framework="Next.js",
        category="Auth",
        value=value,
        updated_at="2025-01-01T00:00:00.000Z",
    )


class TestScoreTable:
    def test_one_row_per_score(self) -> None:
        table = build_score_table([_score("B", 1.0), _score("A", 0.5)])

        assert table.row_count == 2

    def test_values_render_as_percentages(self) -> None:
        console, output = _console()

        console.print(build_score_table([_score("GPT-5", 0.875)]))

        assert "87.5%" in output.getvalue()


class TestRunSummary:
    def test_counts_and_output_path(self) -> None:
        console, output = _console()

        render_run_summary(
            console,
            run_id="api-run",
            scores=[_score("GPT-5", 1.0)],
            succeeded=1,
            failed=2,
            output_path="scores.json",
        )

        text = output.getvalue()
        assert "Run api-run" in text
        assert "1 succeeded, 2 failed (3 tasks)" in text
        assert "Scores written to: scores.json" in text

    def test_no_scores_prints_no_table(self) -> None:
        console, output = _console()

        render_run_summary(console, run_id="api-run", scores=[], succeeded=0, failed=1)

        assert "Run api-run" not in output.getvalue()
