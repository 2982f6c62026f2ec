"""Exception types raised by the agent."""


class FsAgentError(Exception):
    """Base class for agent errors."""


class ConfigurationError(FsAgentError):
    """Raised when required configuration is missing or invalid."""


class CompletionError(FsAgentError):
    """Raised when the completion endpoint fails."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} API error: {message}")
        self.provider = provider


class PathOutsideWorkspaceError(FsAgentError):
    """Raised when a tool path resolves outside the configured workspace root."""
