"""Helpers that build Evaluation objects and evaluation directories for tests."""

from pathlib import Path

from fw_eval.evaluation.domain.evaluation import Evaluation


def make_evaluation(
    path: str = "evals/auth/protect-route",
    root: Path | None = None,
    framework: str = "Next.js",
    category: str = "Auth",
    name: str = "Protect Route",
    enabled: bool = True,
) -> Evaluation:
    return Evaluation(
        path=path,
        root=root or Path("/nonexistent") / path,
        framework=framework,
        category=category,
        name=name,
        enabled=enabled,
    )


def write_evaluation_dir(
    root: Path,
    relative: str,
    prompt: str = "Protect the /dashboard route.",
    graders: str = 'from fw_eval.grading.graders import contains\n\ngraders = {"middleware": contains("clerkMiddleware")}\n',
    config: str | None = None,
) -> Path:
    """Create ``root/relative`` holding PROMPT.md, graders.py and optionally config.yaml."""
    directory = root / relative
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "PROMPT.md").write_text(prompt, encoding="utf-8")
    (directory / "graders.py").write_text(graders, encoding="utf-8")
    if config is not None:
        (directory / "config.yaml").write_text(config, encoding="utf-8")
    return directory
