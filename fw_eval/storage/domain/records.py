"""Persisted record types — Score rows and Error rows of the result log."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Score(BaseModel):
    """One graded outcome for a (target, evaluation) pair.

    Serialises with camelCase keys (``updatedAt``) for the JSON score files.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    model: str
    label: str
    framework: str
    category: str
    value: float = Field(ge=0.0, le=1.0)
    updated_at: str


class StoredScore(BaseModel, frozen=True):
    """A Score as read back from the store, with its engine-assigned identity."""

    id: int
    run_id: str
    score: Score


class ErrorDetails(BaseModel, frozen=True):
    """Context of a failed task, captured before the error is normalised."""

    model: str
    label: str | None = None
    framework: str | None = None
    category: str | None = None
    evaluation_path: str


class ErrorRecord(BaseModel, frozen=True):
    id: int
    run_id: str
    model: str
    label: str | None
    framework: str | None
    category: str | None
    evaluation_path: str
    error_message: str
    stack_trace: str | None
    timestamp: str
