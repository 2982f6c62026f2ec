"""Base types and definitions for tools."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from fsagent.exceptions import PathOutsideWorkspaceError

ToolHandler = Callable[[BaseModel], Awaitable[str]]


class ToolFailure(str):
    """Text returned by a handler that reports a failed action.

    It behaves like any other result string; the registry uses the type to flag the
    execution as an error, so file contents that happen to look like an error message
    are never mistaken for one.
    """


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool available to the AI assistant."""

    name: str
    description: str
    input_schema_class: type[BaseModel]
    handler: ToolHandler

    def get_json_schema(self) -> dict[str, Any]:
        """Get JSON schema for this tool's input."""
        return self.input_schema_class.model_json_schema()

    def parse_input(self, raw_input: dict[str, Any]) -> BaseModel:
        """Parse and validate tool input."""
        return self.input_schema_class.model_validate(raw_input)


def resolve_path(path: str, workspace_root: Path | None) -> Path:
    """Resolve a model-supplied path.

    Without a workspace root the path is used as given. With one, the path is
    resolved against the root and must stay inside it.

    Raises:
        PathOutsideWorkspaceError: If the path escapes the workspace root
    """
    if workspace_root is None:
        return Path(path)

    root = workspace_root.resolve()
    candidate = (root / path).resolve()
    if candidate != root and root not in candidate.parents:
        raise PathOutsideWorkspaceError(path)
    return candidate


def is_protected_directory(target: Path, workspace_root: Path | None) -> bool:
    """True if removing target would take the workspace root or working directory with it."""
    anchor = (workspace_root or Path.cwd()).resolve()
    resolved = target.resolve()
    return resolved == anchor or resolved in anchor.parents
