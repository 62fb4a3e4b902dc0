"""Error types raised by execution backends and the dispatcher."""

from fw_eval.core.errors import FwEvalError


class UnsupportedTargetError(FwEvalError):
    """Raised when no provider route exists for a (provider, model) pair."""

    def __init__(self, provider: str, model: str) -> None:
        super().__init__(f"Unsupported: {provider}/{model}")


class GenerationError(FwEvalError):
    """Raised when a model completion call fails."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to generate response: {reason}", retriable=retriable)


class ToolSessionError(FwEvalError):
    """Raised when the tool server cannot be reached or a tool call fails at transport level."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to use tool server {url}: {reason}", retriable=True)


class AgentInvocationError(FwEvalError):
    """Raised when an agent process cannot be started or produced no output."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to invoke agent: {reason}", retriable=retriable)


class AgentTimeoutError(FwEvalError):
    """Raised when an agent exceeds its wall-clock budget and is killed."""

    def __init__(self, agent: str, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Agent {agent} timed out after {timeout_ms} ms")


class TaskTimeoutError(FwEvalError):
    """Raised when a task exceeds the dispatcher-level timeout."""

    def __init__(self, task_name: str, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Task {task_name} timed out after {timeout_ms} ms")


class AgentTypeNotSupportedError(FwEvalError):
    """Raised when the requested agent type is not registered."""

    def __init__(self, agent_type: str, available: list[str]) -> None:
        self.available = available
        super().__init__(
            f"Failed to select agent: unsupported agent type '{agent_type}'"
            f" (available: {', '.join(available)})"
        )


class ExecutableNotFoundError(FwEvalError):
    """Raised when an agent's CLI executable is not on PATH."""

    def __init__(self, agent_type: str, executable: str) -> None:
        super().__init__(
            f"Failed to locate executable '{executable}' for agent '{agent_type}';"
            f" make sure it is installed and on PATH"
        )


class TargetNotFoundError(FwEvalError):
    """Raised when a model filter matches no configured model."""

    def __init__(self, query: str, available: list[str]) -> None:
        self.query = query
        self.available = available
        super().__init__(
            f'No model matching "{query}". Available models: {", ".join(available)}'
        )
