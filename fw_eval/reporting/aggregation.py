"""Cross-run aggregation of stored scores.

Two export policies exist and answer different questions:

* ``best_scores`` — the best value ever recorded per (model, category,
  framework). Canonical for the published score files.
* ``latest_run_averages`` — per (model, category), the mean over the rows of
  that model's most recent run. Use it to see where a model stands now.

Do not substitute one for the other.
"""

from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from fw_eval.config.domain.model import DEFAULT_MODELS
from fw_eval.execution.domain.task import MCP_LABEL_SUFFIX
from fw_eval.storage.domain.records import Score, StoredScore

DEFAULT_PROVIDER = "openai"

type ScoreKey = tuple[str, str, str]


def score_key(score: Score) -> ScoreKey:
    return (score.model, score.category, score.framework)


def best_scores(scores: Iterable[Score]) -> list[Score]:
    """Keep the highest-valued row per (model, category, framework).

    Ties keep the first row seen; output follows first-seen key order.
    """
    best: dict[ScoreKey, Score] = {}
    for score in scores:
        key = score_key(score)
        current = best.get(key)
        if current is None or score.value > current.value:
            best[key] = score
    return list(best.values())


class CategoryAverage(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    model: str
    label: str
    category: str
    run_id: str
    value: float
    samples: int


def latest_run_averages(records: Iterable[StoredScore]) -> list[CategoryAverage]:
    """Average each model's most recent run per category.

    A model's most recent run is the run owning that model's highest row id.
    """
    rows = list(records)
    latest_row: dict[str, StoredScore] = {}
    for row in rows:
        current = latest_row.get(row.score.model)
        if current is None or row.id > current.id:
            latest_row[row.score.model] = row

    buckets: dict[tuple[str, str], list[StoredScore]] = {}
    for row in rows:
        latest = latest_row[row.score.model]
        if row.run_id != latest.run_id:
            continue
        buckets.setdefault((row.score.model, row.score.category), []).append(row)

    averages: list[CategoryAverage] = []
    for (model, category), bucket in sorted(buckets.items()):
        values = [r.score.value for r in bucket]
        averages.append(
            CategoryAverage(
                model=model,
                label=latest_row[model].score.label,
                category=category,
                run_id=latest_row[model].run_id,
                value=sum(values) / len(values),
                samples=len(values),
            )
        )
    return averages


def is_tool_augmented(score: Score) -> bool:
    return MCP_LABEL_SUFFIX.strip() in score.label


def split_by_mode(scores: Iterable[Score]) -> tuple[list[Score], list[Score]]:
    """Partition into (baseline, tool-augmented) by the label suffix."""
    baseline: list[Score] = []
    tool: list[Score] = []
    for score in scores:
        (tool if is_tool_augmented(score) else baseline).append(score)
    return baseline, tool


class MergedScore(BaseModel):
    """A baseline score enriched with its tool-augmented counterpart.

    Keys found only in the tool-augmented set carry ``value=0`` and
    ``improvement`` equal to the full tool-augmented value. That zero is a
    placeholder for "not measured", not a real baseline result.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    model: str
    label: str
    framework: str
    category: str
    value: float
    updated_at: str
    provider: str
    mcp_score: float | None = None
    improvement: float | None = None


def provider_for_model(model: str) -> str:
    for entry in DEFAULT_MODELS:
        if entry.name == model:
            return entry.provider
    return DEFAULT_PROVIDER


def merge_scores(
    baseline: Iterable[Score],
    tool: Iterable[Score],
    provider_lookup: Callable[[str], str] = provider_for_model,
) -> list[MergedScore]:
    """Join baseline and tool-augmented scores on (model, category, framework)."""
    tool_by_key: dict[ScoreKey, Score] = {}
    for score in tool:
        tool_by_key[score_key(score)] = score

    merged: list[MergedScore] = []
    for base in baseline:
        match = tool_by_key.pop(score_key(base), None)
        entry = MergedScore(**base.model_dump(), provider=provider_lookup(base.model))
        if match is not None:
            entry = entry.model_copy(
                update={
                    "mcp_score": match.value,
                    "improvement": match.value - base.value,
                }
            )
        merged.append(entry)

    for only_tool in tool_by_key.values():
        merged.append(
            MergedScore(
                **only_tool.model_dump(exclude={"label", "value"}),
                label=only_tool.label.replace(MCP_LABEL_SUFFIX, ""),
                value=0.0,
                provider=provider_lookup(only_tool.model),
                mcp_score=only_tool.value,
                improvement=only_tool.value,
            )
        )
    return merged
