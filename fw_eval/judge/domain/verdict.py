"""ClosedQAVerdict — structured output of a single judge invocation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

CHOICE_SCORES: dict[str, float] = {"Y": 1.0, "N": 0.0}


class ClosedQAVerdict(BaseModel):
    """Immutable judge answer: a ``Y``/``N`` choice plus the judge's reasoning."""

    model_config = ConfigDict(frozen=True)

    reasoning: str
    choice: Literal["Y", "N"]

    @property
    def score(self) -> float:
        return CHOICE_SCORES[self.choice]
