"""Tool-server (MCP) configuration model."""

from pydantic import BaseModel, Field

DEFAULT_MCP_SERVER_URL = "https://mcp.clerk.dev/mcp"
DEFAULT_MAX_TOOL_ROUNDS = 10


class McpConfig(BaseModel, frozen=True):
    server_name: str = Field(default="clerk", min_length=1)
    server_url: str = Field(default=DEFAULT_MCP_SERVER_URL, min_length=1)
    max_tool_rounds: int = Field(default=DEFAULT_MAX_TOOL_ROUNDS, ge=1)
