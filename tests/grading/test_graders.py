"""Tests for the grader authoring helpers."""

import re

import pytest

from fw_eval.grading.domain.grader import Grader
from fw_eval.grading.graders import (
    JudgeRubric,
    all_of,
    any_of,
    check,
    contains,
    contains_any,
    define_graders,
    judge,
    matches,
    register_judges,
)
from tests.judge.fake_judge import FakeJudge


# ---------------------------------------------------------------------------
# contains / contains_any
# ---------------------------------------------------------------------------


class TestContains:
    """contains() is a case-insensitive substring check by default."""

    async def test_matches_regardless_of_case(self) -> None:
        grader = contains("clerkMiddleware")

        assert await grader.grade("export default CLERKMIDDLEWARE()", FakeJudge())

    async def test_absent_needle_fails(self) -> None:
        assert not await contains("auth()").grade("no helpers here", FakeJudge())

    async def test_case_sensitive_option(self) -> None:
        grader = contains("Auth", case_sensitive=True)

        assert not await grader.grade("auth", FakeJudge())
        assert await grader.grade("Auth", FakeJudge())

    def test_empty_needle_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            contains("")


class TestContainsAny:
    """contains_any() passes if any needle occurs."""

    async def test_one_hit_is_enough(self) -> None:
        grader = contains_any(["getAuth", "auth()"])

        assert await grader.grade("const { userId } = await auth()", FakeJudge())

    async def test_no_hit_fails(self) -> None:
        grader = contains_any(["getAuth", "currentUser"])

        assert not await grader.grade("nothing relevant", FakeJudge())

    async def test_case_insensitive_by_default(self) -> None:
        grader = contains_any(["ClerkProvider", "SignedIn"])

        assert await grader.grade("<clerkprovider>{children}</clerkprovider>", FakeJudge())

    async def test_case_sensitive_option_rejects_mismatch(self) -> None:
        grader = contains_any(["ClerkProvider", "SignedIn"], case_sensitive=True)

        assert not await grader.grade("<clerkprovider /><signedin />", FakeJudge())
        assert await grader.grade("<SignedIn />", FakeJudge())

    @pytest.mark.parametrize(
        ("needle", "response", "case_sensitive"),
        [
            ("auth()", "await auth()", False),
            ("auth()", "await AUTH()", False),
            ("auth()", "await AUTH()", True),
            ("auth()", "await getAuth", False),
            ("Clerk", "", False),
        ],
    )
    async def test_single_needle_agrees_with_contains(
        self, needle: str, response: str, case_sensitive: bool
    ) -> None:
        single = contains(needle, case_sensitive=case_sensitive)
        any_single = contains_any([needle], case_sensitive=case_sensitive)

        assert await any_single.grade(response, FakeJudge()) == await single.grade(
            response, FakeJudge()
        )

    def test_empty_list_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            contains_any([])

    def test_empty_needle_in_list_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            contains_any(["ok", ""])


# ---------------------------------------------------------------------------
# matches / check
# ---------------------------------------------------------------------------


class TestMatches:
    """matches() searches anywhere in the response."""

    async def test_pattern_found_mid_text(self) -> None:
        grader = matches(r"await\s+verifyWebhook\s*\(")

        assert await grader.grade("x = await  verifyWebhook(req)", FakeJudge())

    async def test_pattern_not_found(self) -> None:
        assert not await matches(r"^export").grade("const a = 1", FakeJudge())

    async def test_accepts_compiled_pattern(self) -> None:
        grader = matches(re.compile("SIGNING_SECRET", re.IGNORECASE))

        assert await grader.grade("process.env.signing_secret", FakeJudge())


class TestCheck:
    """check() adapts sync and async predicates."""

    async def test_sync_predicate(self) -> None:
        grader = check(lambda response: len(response) > 3)

        assert await grader.grade("long enough", FakeJudge())
        assert not await grader.grade("no", FakeJudge())

    async def test_async_predicate(self) -> None:
        async def has_export(response: str) -> bool:
            return "export" in response

        assert await check(has_export).grade("export const x = 1", FakeJudge())


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class TestCombinators:
    """all_of / any_of compose graders and reject empty input."""

    async def test_all_of_requires_every_grader(self) -> None:
        grader = all_of(contains("a"), contains("b"))

        assert await grader.grade("ab", FakeJudge())
        assert not await grader.grade("a", FakeJudge())

    async def test_any_of_requires_one_grader(self) -> None:
        grader = any_of(contains("x"), contains("b"))

        assert await grader.grade("b", FakeJudge())
        assert not await grader.grade("c", FakeJudge())

    def test_all_of_without_graders_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            all_of()

    def test_any_of_without_graders_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            any_of()

    async def test_all_of_stops_before_judge_when_a_check_fails(self) -> None:
        fake_judge = FakeJudge()
        grader = all_of(contains("missing"), judge("Is it good?"))

        assert not await grader.grade("text", fake_judge)
        assert fake_judge.calls == []


# ---------------------------------------------------------------------------
# Judge graders
# ---------------------------------------------------------------------------


class TestJudgeGraders:
    """judge() delegates to the judge with the response as the candidate."""

    async def test_passes_criteria_and_candidate(self) -> None:
        fake_judge = FakeJudge(default=True)

        passed = await judge("Mentions the 401 case?").grade("returns 401", fake_judge)

        assert passed
        call = fake_judge.calls[0]
        assert call.criteria == "Mentions the 401 case?"
        assert call.candidate == "returns 401"
        assert call.model is None

    async def test_rubric_input_and_model_are_forwarded(self) -> None:
        fake_judge = FakeJudge()
        rubric = JudgeRubric(criteria="c", input="the task", model="gpt-5")

        await judge(rubric).grade("r", fake_judge)

        assert fake_judge.calls[0].input == "the task"
        assert fake_judge.calls[0].model == "gpt-5"

    async def test_judge_failure_propagates(self) -> None:
        fake_judge = FakeJudge(error=RuntimeError("judge down"))

        with pytest.raises(RuntimeError, match="judge down"):
            await judge("c").grade("r", fake_judge)

    async def test_register_judges_shares_model(self) -> None:
        fake_judge = FakeJudge()
        registry = register_judges(
            {
                "env_vars": "Are env vars documented?",
                "pinned": JudgeRubric(criteria="Pinned", model="claude-opus-4-5"),
            },
            model="gpt-4.1",
        )

        await registry["env_vars"].grade("r", fake_judge)
        await registry["pinned"].grade("r", fake_judge)

        assert [c.model for c in fake_judge.calls] == ["gpt-4.1", "claude-opus-4-5"]


# ---------------------------------------------------------------------------
# define_graders
# ---------------------------------------------------------------------------


class TestDefineGraders:
    """define_graders validates the mapping shape."""

    def test_returns_the_same_dict(self) -> None:
        graders = {"a": contains("a")}

        assert define_graders(graders) is graders

    def test_plain_function_is_rejected(self) -> None:
        with pytest.raises(TypeError, match="check\\(\\)"):
            define_graders({"a": lambda r: True})  # type: ignore[dict-item]

    def test_empty_name_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            define_graders({"": contains("a")})

    def test_every_constructor_yields_a_grader(self) -> None:
        built = [
            contains("a"),
            contains_any(["a"]),
            matches("a"),
            check(lambda r: True),
            judge("a"),
            all_of(contains("a")),
            any_of(contains("a")),
        ]

        assert all(isinstance(g, Grader) for g in built)
