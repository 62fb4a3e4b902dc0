"""RunContext — the shared collaborators of one harness invocation."""

from dataclasses import dataclass

from rich.console import Console

from fw_eval.config.domain.config import HarnessConfig
from fw_eval.execution.domain.observer import BackendObserver, TaskObserver
from fw_eval.grading.domain.loader import GraderSetLoader
from fw_eval.judge.domain.judge import Judge
from fw_eval.ratelimit.domain.limiter import RateLimiter
from fw_eval.storage.domain.store import ResultStore


@dataclass(frozen=True)
class RunContext:
    """Built once per process and passed explicitly to whatever needs it.

    The rate limiter is shared by the judge and every backend, so provider
    budgets hold across all concurrent tasks of the run.
    """

    config: HarnessConfig
    rate_limiter: RateLimiter
    judge: Judge
    grader_loader: GraderSetLoader
    store: ResultStore
    task_observer: TaskObserver
    backend_observer: BackendObserver
    console: Console
