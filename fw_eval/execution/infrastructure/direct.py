"""DirectGenerationBackend — one completion per task, no tools."""

import time

import litellm

from fw_eval.core.llm import is_transient
from fw_eval.execution.domain.observer import BackendObserver
from fw_eval.execution.domain.result import GenerationOutput
from fw_eval.execution.domain.task import ModelTarget, Task
from fw_eval.execution.infrastructure.errors import (
    GenerationError,
    UnsupportedTargetError,
)
from fw_eval.execution.infrastructure.prompts import SYSTEM_INSTRUCTION, load_prompt
from fw_eval.execution.infrastructure.providers import resolve_model
from fw_eval.ratelimit.domain.limiter import RateLimiter

BACKEND_NAME = "direct"


def require_model_target(task: Task) -> ModelTarget:
    target = task.target
    if not isinstance(target, ModelTarget):
        raise UnsupportedTargetError(provider=target.kind, model=target.name)
    return target


class DirectGenerationBackend:
    """Sends the evaluation prompt with the fixed system instruction and returns the text."""

    def __init__(self, rate_limiter: RateLimiter, observer: BackendObserver) -> None:
        litellm.suppress_debug_info = True
        self._rate_limiter = rate_limiter
        self._observer = observer

    async def execute(self, task: Task) -> GenerationOutput:
        """
        Raises:
            UnsupportedTargetError: if the target has no provider route.
            GenerationError: if the completion call fails; transient provider
                failures are marked retriable.
        """
        target = require_model_target(task)
        model = resolve_model(provider=target.provider, model=target.name)
        prompt = load_prompt(task.evaluation)

        self._observer.generation_started(
            backend=BACKEND_NAME, target=target.label, evaluation=task.evaluation.path
        )
        await self._rate_limiter.acquire(target.provider)
        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTION},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as exc:
            raise GenerationError(reason=str(exc), retriable=is_transient(exc)) from exc

        text: str = response.choices[0].message.content or ""
        self._observer.generation_completed(
            backend=BACKEND_NAME,
            target=target.label,
            evaluation=task.evaluation.path,
            duration_ms=int((time.monotonic() - start) * 1000),
            chars=len(text),
        )
        return GenerationOutput(prompt=prompt, response_text=text)
