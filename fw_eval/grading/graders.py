"""Grader authoring helpers imported by each evaluation's ``graders.py``.

Example::

    from fw_eval.grading.graders import contains, define_graders, judge, matches

    graders = define_graders({
        "middleware_file": contains("middleware.ts"),
        "verify_call": matches(r"await\\s+verifyWebhook\\s*\\("),
        "explains_errors": judge("Does the answer explain the 401 and 403 cases?"),
    })
"""

import inspect
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from fw_eval.grading.domain.grader import Grader, GraderSet
from fw_eval.judge.domain.judge import Judge

type CheckFunction = Callable[[str], bool | Awaitable[bool]]


class JudgeRubric(BaseModel):
    """Closed question put to the judge, with optional task context and model."""

    model_config = ConfigDict(frozen=True)

    criteria: str = Field(min_length=1)
    input: str = ""
    model: str | None = None


# ---------------------------------------------------------------------------
# Atomic graders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContainsGrader:
    needle: str
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.needle:
            raise ValueError("contains() needle must be a non-empty string")

    async def grade(self, response: str, judge: Judge) -> bool:
        if self.case_sensitive:
            return self.needle in response
        return self.needle.lower() in response.lower()


@dataclass(frozen=True)
class ContainsAnyGrader:
    needles: tuple[str, ...]
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.needles:
            raise ValueError("contains_any() needs at least one needle")
        if any(not needle for needle in self.needles):
            raise ValueError("contains_any() needles must be non-empty strings")

    async def grade(self, response: str, judge: Judge) -> bool:
        haystack = response if self.case_sensitive else response.lower()
        for needle in self.needles:
            target = needle if self.case_sensitive else needle.lower()
            if target in haystack:
                return True
        return False


@dataclass(frozen=True)
class MatchesGrader:
    pattern: re.Pattern[str]

    async def grade(self, response: str, judge: Judge) -> bool:
        return self.pattern.search(response) is not None


@dataclass(frozen=True)
class CheckGrader:
    """Adapts a plain ``str -> bool`` callable (sync or async) to a grader."""

    fn: CheckFunction

    async def grade(self, response: str, judge: Judge) -> bool:
        result = self.fn(response)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)


@dataclass(frozen=True)
class JudgeGrader:
    rubric: JudgeRubric

    async def grade(self, response: str, judge: Judge) -> bool:
        return await judge.evaluate(
            criteria=self.rubric.criteria,
            candidate=response,
            input=self.rubric.input,
            model=self.rubric.model,
        )


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AllOfGrader:
    graders: tuple[Grader, ...]

    async def grade(self, response: str, judge: Judge) -> bool:
        for grader in self.graders:
            if not await grader.grade(response, judge):
                return False
        return True


@dataclass(frozen=True)
class AnyOfGrader:
    graders: tuple[Grader, ...]

    async def grade(self, response: str, judge: Judge) -> bool:
        for grader in self.graders:
            if await grader.grade(response, judge):
                return True
        return False


# ---------------------------------------------------------------------------
# Public constructors
# ---------------------------------------------------------------------------


def contains(needle: str, case_sensitive: bool = False) -> Grader:
    """Pass when needle occurs in the response; case-insensitive by default."""
    return ContainsGrader(needle=needle, case_sensitive=case_sensitive)


def contains_any(needles: list[str], case_sensitive: bool = False) -> Grader:
    """Pass when at least one needle occurs; stops at the first hit."""
    return ContainsAnyGrader(needles=tuple(needles), case_sensitive=case_sensitive)


def matches(pattern: str | re.Pattern[str]) -> Grader:
    """Pass when pattern is found anywhere in the response (``re.search``)."""
    compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    return MatchesGrader(pattern=compiled)


def check(fn: CheckFunction) -> Grader:
    return CheckGrader(fn=fn)


def all_of(*graders: Grader) -> Grader:
    if not graders:
        raise ValueError("all_of() needs at least one grader")
    return AllOfGrader(graders=graders)


def any_of(*graders: Grader) -> Grader:
    if not graders:
        raise ValueError("any_of() needs at least one grader")
    return AnyOfGrader(graders=graders)


def judge(rubric: str | JudgeRubric) -> Grader:
    """Delegate the decision to the LLM judge with the given rubric."""
    if isinstance(rubric, str):
        rubric = JudgeRubric(criteria=rubric)
    return JudgeGrader(rubric=rubric)


def register_judges(
    rubrics: Mapping[str, str | JudgeRubric], model: str | None = None
) -> dict[str, Grader]:
    """Create one judge grader per named rubric, sharing ``model`` when given.

    The returned registry is meant to be defined once and reused across
    evaluations, e.g. ``llm_checks["environment_variables"]``.
    """
    registry: dict[str, Grader] = {}
    for name, rubric in rubrics.items():
        if isinstance(rubric, str):
            rubric = JudgeRubric(criteria=rubric, model=model)
        elif model is not None and rubric.model is None:
            rubric = rubric.model_copy(update={"model": model})
        registry[name] = judge(rubric)
    return registry


def define_graders(graders: Mapping[str, Grader]) -> GraderSet:
    """Validate the shape of a grader mapping and return it as a GraderSet.

    Raises:
        TypeError: if a key is not a string or a value is not a grader.
        ValueError: if a key is empty.
    """
    for name, grader in graders.items():
        if not isinstance(name, str):
            raise TypeError(f"grader names must be strings, got {name!r}")
        if not name:
            raise ValueError("grader names must be non-empty")
        if not isinstance(grader, Grader):
            raise TypeError(
                f"grader {name!r} is not a grader; wrap plain functions with check()"
            )
    return graders if isinstance(graders, dict) else dict(graders)
