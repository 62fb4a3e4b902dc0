"""CLI entrypoint for fw-eval — typer app with run, agent, export and merge commands."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog
import typer
from pydantic import BaseModel
from rich.console import Console

from fw_eval.config.domain.config import HarnessConfig
from fw_eval.config.infrastructure.observer import StructlogConfigObserver
from fw_eval.config.infrastructure.yaml_loader import YamlConfigLoader
from fw_eval.core.errors import FwEvalError
from fw_eval.evaluation.application.selection import load_selected_evaluations
from fw_eval.evaluation.domain.evaluation import Evaluation
from fw_eval.evaluation.domain.loader import EvaluationLoader
from fw_eval.evaluation.infrastructure.directory_loader import DirectoryEvaluationLoader
from fw_eval.evaluation.infrastructure.observer import (
    StructlogEvaluationCatalogObserver,
)
from fw_eval.execution.application.context import RunContext
from fw_eval.execution.application.dispatcher import Dispatcher
from fw_eval.execution.application.planning import (
    build_tasks,
    make_run_id,
    model_targets,
    run_mode,
    select_targets,
)
from fw_eval.execution.domain.backend import Backend
from fw_eval.execution.domain.observer import TaskObserver
from fw_eval.execution.domain.task import Task, TaskOptions
from fw_eval.execution.infrastructure.agents import (
    all_agent_types,
    get_agent_info,
    resolve_agent_target,
)
from fw_eval.execution.infrastructure.claude_sdk import ClaudeSdkAgentBackend
from fw_eval.execution.infrastructure.cli_agent import CliAgentBackend
from fw_eval.execution.infrastructure.composite_observer import CompositeTaskObserver
from fw_eval.execution.infrastructure.debug_writer import DebugArtifactWriter
from fw_eval.execution.infrastructure.direct import DirectGenerationBackend
from fw_eval.execution.infrastructure.mcp import ToolAugmentedBackend
from fw_eval.execution.infrastructure.observer import (
    StructlogBackendObserver,
    StructlogTaskObserver,
)
from fw_eval.execution.infrastructure.progress_observer import ProgressTaskObserver
from fw_eval.grading.infrastructure.module_loader import PythonGraderSetLoader
from fw_eval.judge.infrastructure.litellm import LiteLLMJudge
from fw_eval.judge.infrastructure.observer import StructlogJudgeObserver
from fw_eval.ratelimit.infrastructure.observer import StructlogRateLimitObserver
from fw_eval.ratelimit.infrastructure.token_bucket import ProviderRateLimiter
from fw_eval.reporting.aggregation import (
    best_scores,
    is_tool_augmented,
    latest_run_averages,
    merge_scores,
)
from fw_eval.reporting.json_file import read_scores, write_json_atomic
from fw_eval.storage.domain.records import StoredScore
from fw_eval.storage.infrastructure.sqlite_store import SqliteResultStore

app = typer.Typer(
    add_completion=False, help="Score LLMs and coding agents on framework tasks."
)

DEFAULT_CONFIG_PATH = Path("fw-eval.yaml")
DEFAULT_EVALS_DIR = Path("evals")

SCORES_FILE = Path("scores.json")
MCP_SCORES_FILE = Path("scores-mcp.json")
AGENT_SCORES_FILE = Path("agent-scores.json")
MERGED_SCORES_FILE = Path("llm-scores.json")
LATEST_SCORES_FILES = (
    Path("scores-latest.json"),
    Path("scores-mcp-latest.json"),
    Path("agent-scores-latest.json"),
)

EXPORT_POLICIES = ("best", "latest")


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _load_config(config_path: Path) -> HarnessConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _load_evaluations(evals_dir: Path, queries: list[str] | None) -> list[Evaluation]:
    loader: EvaluationLoader = DirectoryEvaluationLoader(
        observer=StructlogEvaluationCatalogObserver()
    )
    return load_selected_evaluations(loader, root=evals_dir, queries=queries)


def _build_context(
    config: HarnessConfig, db_path: Path | None, log_format: str
) -> RunContext:
    rate_limiter = ProviderRateLimiter(
        requests_per_minute=config.rate_limits,
        observer=StructlogRateLimitObserver(),
    )
    judge = LiteLLMJudge(
        config=config.judge,
        rate_limiter=rate_limiter,
        observer=StructlogJudgeObserver(),
    )
    store = SqliteResultStore(path=db_path or config.storage.database)
    store.initialize()

    observers: list[TaskObserver] = [StructlogTaskObserver()]
    if log_format != "json":
        observers.append(ProgressTaskObserver())

    return RunContext(
        config=config,
        rate_limiter=rate_limiter,
        judge=judge,
        grader_loader=PythonGraderSetLoader(),
        store=store,
        task_observer=CompositeTaskObserver(observers=observers),
        backend_observer=StructlogBackendObserver(),
        console=Console(),
    )


def _dispatch(
    context: RunContext,
    backend: Backend,
    max_concurrent: int,
    run_id: str,
    tasks: list[Task],
    output: Path,
    debug: bool,
) -> None:
    debug_writer = (
        DebugArtifactWriter(debug_dir=context.config.storage.debug_dir)
        if debug
        else None
    )
    dispatcher = Dispatcher(
        context=context,
        backend=backend,
        max_concurrent=max_concurrent,
        debug_writer=debug_writer,
    )
    asyncio.run(dispatcher.run(run_id=run_id, tasks=tasks, output_path=output))


@app.command()
def run(
    eval_filter: list[str] | None = typer.Option(
        None, "--eval", "-e", help="Evaluation path, suffix, or category (repeatable)"
    ),
    model: str | None = typer.Option(
        None, "--model", "-m", help="Only run models whose name contains this text"
    ),
    mcp: bool = typer.Option(False, "--mcp", help="Give the model the MCP tool server"),
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Write per-task debug artifacts"
    ),
    timeout: int | None = typer.Option(
        None, "--timeout", min=1, help="Per-task timeout in milliseconds"
    ),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config"),
    evals_dir: Path = typer.Option(DEFAULT_EVALS_DIR, "--evals-dir"),
    db: Path | None = typer.Option(None, "--db", help="SQLite result store"),
    output: Path | None = typer.Option(None, "--output", "-o"),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Run evaluations against API models."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        evaluations = _load_evaluations(evals_dir, eval_filter)
        targets = select_targets(model_targets(config.models), model)
        options = TaskOptions(
            debug=debug,
            mcp=mcp,
            timeout_ms=timeout,
            max_tool_rounds=config.mcp.max_tool_rounds,
        )
        tasks = build_tasks(targets, evaluations, options)
        context = _build_context(config, db, log_format)

        backend: Backend
        if mcp:
            backend = ToolAugmentedBackend(
                server_url=config.mcp.server_url,
                rate_limiter=context.rate_limiter,
                observer=context.backend_observer,
            )
        else:
            backend = DirectGenerationBackend(
                rate_limiter=context.rate_limiter,
                observer=context.backend_observer,
            )

        _dispatch(
            context=context,
            backend=backend,
            max_concurrent=config.execution.api_max_concurrent,
            run_id=make_run_id(run_mode(mcp=mcp)),
            tasks=tasks,
            output=output or (MCP_SCORES_FILE if mcp else SCORES_FILE),
            debug=debug,
        )
    except KeyboardInterrupt:
        typer.echo("Run interrupted.")
        raise typer.Exit(code=1) from None
    except FwEvalError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc


@app.command()
def agent(
    agent_type: str = typer.Option(
        ..., "--agent", "-a", help=f"Agent type: {', '.join(all_agent_types())}"
    ),
    eval_filter: list[str] | None = typer.Option(
        None, "--eval", "-e", help="Evaluation path, suffix, or category (repeatable)"
    ),
    mcp: bool = typer.Option(
        False, "--mcp", help="Attach the MCP tool server to the agent"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Write per-task debug artifacts"
    ),
    timeout: int | None = typer.Option(
        None, "--timeout", min=1, help="Agent wall-clock timeout in milliseconds"
    ),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config"),
    evals_dir: Path = typer.Option(DEFAULT_EVALS_DIR, "--evals-dir"),
    db: Path | None = typer.Option(None, "--db", help="SQLite result store"),
    output: Path | None = typer.Option(None, "--output", "-o"),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """Run evaluations against a CLI coding agent."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        info = get_agent_info(agent_type)
        target = resolve_agent_target(agent_type)
        evaluations = _load_evaluations(evals_dir, eval_filter)
        options = TaskOptions(debug=debug, mcp=mcp, timeout_ms=timeout)
        tasks = build_tasks([target], evaluations, options)
        context = _build_context(config, db, log_format)

        backend_cls = (
            ClaudeSdkAgentBackend if info.driver == "sdk" else CliAgentBackend
        )
        backend = backend_cls(
            agent_config=config.agent,
            mcp_config=config.mcp,
            observer=context.backend_observer,
        )

        _dispatch(
            context=context,
            backend=backend,
            max_concurrent=config.execution.agent_max_concurrent,
            run_id=make_run_id(run_mode(mcp=mcp, agent_type=agent_type)),
            tasks=tasks,
            output=output or AGENT_SCORES_FILE,
            debug=debug,
        )
    except KeyboardInterrupt:
        typer.echo("Run interrupted.")
        raise typer.Exit(code=1) from None
    except FwEvalError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc


def _partition(
    rows: list[StoredScore],
) -> tuple[list[StoredScore], list[StoredScore], list[StoredScore]]:
    """Split stored rows into (API baseline, API tool-augmented, agent)."""
    agents = set(all_agent_types())
    baseline: list[StoredScore] = []
    tool: list[StoredScore] = []
    agent_rows: list[StoredScore] = []
    for row in rows:
        if row.score.model in agents:
            agent_rows.append(row)
        elif is_tool_augmented(row.score):
            tool.append(row)
        else:
            baseline.append(row)
    return baseline, tool, agent_rows


@app.command()
def export(
    policy: str = typer.Option(
        "best", "--policy", help="Aggregation policy: 'best' or 'latest'"
    ),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config"),
    db: Path | None = typer.Option(None, "--db", help="SQLite result store"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o"),
) -> None:
    """Aggregate the result store into the score files."""
    if policy not in EXPORT_POLICIES:
        typer.echo(
            f"Invalid policy: {policy!r}. Must be one of: {', '.join(EXPORT_POLICIES)}."
        )
        raise typer.Exit(code=1)

    _configure_structlog(log_format="console")
    try:
        config = _load_config(config_path)
        store = SqliteResultStore(path=db or config.storage.database)
        store.initialize()
        filenames = (
            (SCORES_FILE, MCP_SCORES_FILE, AGENT_SCORES_FILE)
            if policy == "best"
            else LATEST_SCORES_FILES
        )
        groups = zip(filenames, _partition(store.get_results()))
        for filename, rows in groups:
            records: Sequence[BaseModel]
            if policy == "best":
                records = best_scores(row.score for row in rows)
            else:
                records = latest_run_averages(rows)
            path = output_dir / filename
            write_json_atomic(path, records)
            typer.echo(f"Wrote {len(records)} records to {path}")
    except KeyboardInterrupt:
        typer.echo("Export interrupted.")
        raise typer.Exit(code=1) from None
    except FwEvalError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc


@app.command()
def merge(
    baseline: Path = typer.Option(SCORES_FILE, "--baseline"),
    mcp: Path = typer.Option(MCP_SCORES_FILE, "--mcp"),
    output: Path = typer.Option(MERGED_SCORES_FILE, "--output", "-o"),
) -> None:
    """Merge baseline and MCP score files into one file with improvements."""
    try:
        merged = merge_scores(read_scores(baseline), read_scores(mcp))
    except FwEvalError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    write_json_atomic(output, merged)
    typer.echo(f"Wrote {len(merged)} records to {output}")


if __name__ == "__main__":
    app()
