"""LiteLLMJudge — closed-question judge backed by LiteLLM structured output."""

import time

import litellm

from fw_eval.config.domain.judge import JudgeConfig
from fw_eval.core.llm import is_transient
from fw_eval.execution.infrastructure.providers import provider_for_litellm_model
from fw_eval.judge.domain.observer import JudgeObserver
from fw_eval.judge.domain.verdict import ClosedQAVerdict
from fw_eval.judge.infrastructure.errors import JudgeInvocationError
from fw_eval.ratelimit.domain.limiter import RateLimiter

_SYSTEM_PROMPT = """\
You are assessing a submitted answer on a given task based on a criterion. \
Read the data carefully, decide whether the submission meets the criterion, \
explain your reasoning step by step, then answer with a single choice:

Y - the submission meets the criterion
N - the submission does not meet the criterion

Respond with a JSON object containing:
- reasoning: a short explanation of the decision
- choice: "Y" or "N"
"""


def _user_message(criteria: str, candidate: str, input: str) -> str:
    return (
        "[BEGIN DATA]\n"
        "***\n"
        f"[Task]: {input}\n"
        "***\n"
        f"[Submission]: {candidate}\n"
        "***\n"
        f"[Criterion]: {criteria}\n"
        "***\n"
        "[END DATA]\n"
        "Does the submission meet the criterion?"
    )


class LiteLLMJudge:
    """Judge implementation that delegates to an LLM via LiteLLM.

    One instance is shared by every grader of a run. Each call is paced
    through the rate limiter under the provider of the model actually used:
    the configured judge provider, or the one a rubric model override routes to.
    """

    def __init__(
        self,
        config: JudgeConfig,
        rate_limiter: RateLimiter,
        observer: JudgeObserver,
    ) -> None:
        litellm.suppress_debug_info = True
        self._config = config
        self._rate_limiter = rate_limiter
        self._observer = observer

        if config.temperature > 0.0:
            self._observer.judge_high_temperature_warned(
                temperature=config.temperature
            )

    async def evaluate(
        self,
        criteria: str,
        candidate: str,
        input: str = "",
        model: str | None = None,
    ) -> bool:
        """Ask the judge whether candidate meets criteria.

        Raises:
            JudgeInvocationError: if the LLM call fails or the response cannot
                be parsed into a ClosedQAVerdict. Transient provider failures
                are marked retriable.
        """
        judge_model = model or self._config.model
        self._observer.judge_evaluation_started(model=judge_model, criteria=criteria)

        provider = (
            self._config.provider
            if not model
            else provider_for_litellm_model(model, default=self._config.provider)
        )
        await self._rate_limiter.acquire(provider)
        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=judge_model,
                temperature=self._config.temperature,
                response_format=ClosedQAVerdict,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": _user_message(
                            criteria=criteria, candidate=candidate, input=input
                        ),
                    },
                ],
            )
        except Exception as exc:
            reason = str(exc)
            self._observer.judge_evaluation_failed(
                model=judge_model, criteria=criteria, reason=reason
            )
            raise JudgeInvocationError(
                reason=reason, retriable=is_transient(exc)
            ) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        raw_content: str = response.choices[0].message.content
        try:
            verdict = ClosedQAVerdict.model_validate_json(raw_content)
        except Exception as exc:
            reason = f"unparseable judge response: {exc}"
            self._observer.judge_evaluation_failed(
                model=judge_model, criteria=criteria, reason=reason
            )
            raise JudgeInvocationError(reason=reason) from exc

        passed = verdict.score == 1.0
        self._observer.judge_evaluation_completed(
            model=judge_model,
            criteria=criteria,
            passed=passed,
            duration_ms=duration_ms,
        )
        return passed
