"""Per-task scratch directories for agent runs."""

import json
import shutil
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fw_eval.execution.domain.observer import BackendObserver

MCP_CONFIG_FILENAME = ".mcp.json"


@asynccontextmanager
async def agent_work_dir(
    observer: BackendObserver, root: Path | None = None
) -> AsyncIterator[Path]:
    """Yield a fresh empty directory and remove it on every exit path.

    A failed removal is reported to the observer and does not replace the
    outcome of the block.
    """
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix="fw-eval-agent-", dir=root))
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            observer.work_dir_cleanup_failed(path=str(path), reason=str(exc))


def mcp_config_document(server_name: str, server_url: str) -> dict[str, object]:
    return {"mcpServers": {server_name: {"type": "http", "url": server_url}}}


def write_mcp_config(work_dir: Path, server_name: str, server_url: str) -> Path:
    """Write ``.mcp.json`` so the agent picks up the tool server from its cwd."""
    path = work_dir / MCP_CONFIG_FILENAME
    document = mcp_config_document(server_name=server_name, server_url=server_url)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path
