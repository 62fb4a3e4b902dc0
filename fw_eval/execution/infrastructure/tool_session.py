"""McpToolSession — a scoped MCP client session over streamable HTTP."""

from contextlib import AsyncExitStack
from types import TracebackType
from typing import Any, Self

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, TextContent

from fw_eval.execution.domain.observer import BackendObserver
from fw_eval.execution.domain.result import ToolResultInfo
from fw_eval.execution.domain.tools import ToolSpec
from fw_eval.execution.infrastructure.errors import ToolSessionError

NO_RESULT = "(no result)"


class McpToolSession:
    """Connects to an MCP server on enter and releases it on every exit path.

    Usage::

        async with McpToolSession(url=url, observer=observer) as session:
            result = await session.call("search_docs", {"query": "middleware"})

    Errors raised while closing are reported to the observer and swallowed so
    that they never mask the outcome of the work done inside the block.
    """

    def __init__(self, url: str, observer: BackendObserver) -> None:
        self._url = url
        self._observer = observer
        self._stack: AsyncExitStack | None = None
        self._session: ClientSession | None = None
        self._tools: list[ToolSpec] = []

    @property
    def tools(self) -> list[ToolSpec]:
        return list(self._tools)

    async def __aenter__(self) -> Self:
        stack = AsyncExitStack()
        try:
            read, write, _ = await stack.enter_async_context(
                streamablehttp_client(self._url)
            )
            session = await stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
            listed = await session.list_tools()
        except Exception as exc:
            await self._close(stack)
            raise ToolSessionError(url=self._url, reason=str(exc)) from exc

        self._stack = stack
        self._session = session
        self._tools = [
            ToolSpec(
                name=tool.name,
                description=tool.description or "",
                input_schema=dict(tool.inputSchema),
            )
            for tool in listed.tools
        ]
        self._observer.tool_session_opened(url=self._url, num_tools=len(self._tools))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        stack, self._stack, self._session = self._stack, None, None
        if stack is not None:
            await self._close(stack)

    async def call(self, name: str, arguments: dict[str, Any]) -> ToolResultInfo:
        """Invoke a tool and return its text output.

        Tool-level failures come back as an error result the model can react
        to; transport failures raise.

        Raises:
            ToolSessionError: if the session is not open or the transport fails.
        """
        if self._session is None:
            raise ToolSessionError(url=self._url, reason="session is not open")
        try:
            result = await self._session.call_tool(name, arguments)
        except McpError as exc:
            return ToolResultInfo(tool_name=name, result=str(exc), is_error=True)
        except Exception as exc:
            raise ToolSessionError(url=self._url, reason=str(exc)) from exc
        return ToolResultInfo(
            tool_name=name,
            result=_result_text(result),
            is_error=bool(result.isError),
        )

    async def _close(self, stack: AsyncExitStack) -> None:
        try:
            await stack.aclose()
        except Exception as exc:
            self._observer.tool_session_close_failed(url=self._url, reason=str(exc))


def _result_text(result: CallToolResult) -> str:
    parts = [block.text for block in result.content if isinstance(block, TextContent)]
    text = "\n".join(part for part in parts if part)
    return text or NO_RESULT
