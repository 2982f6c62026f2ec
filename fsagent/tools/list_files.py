"""List files tool."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fsagent.exceptions import PathOutsideWorkspaceError
from fsagent.tools.base import ToolDefinition, ToolFailure, resolve_path


class ListFilesInput(BaseModel):
    """Input schema for listing a directory."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(default=".", description="Optional path to list contents from.")


def create_list_files_tool(workspace_root: Path | None = None) -> ToolDefinition:
    async def list_files_handler(params: ListFilesInput) -> str:
        """List directory entries, marking directories with a trailing slash."""
        try:
            # a blank path means the default, like an omitted one
            directory = resolve_path(params.path.strip() or ".", workspace_root)
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
            names = [f"{entry.name}/" if entry.is_dir() else entry.name for entry in entries]
            return json.dumps(names, indent=2)
        except PathOutsideWorkspaceError:
            return ToolFailure(f"❌ Path is outside the workspace: {params.path}")
        except OSError as e:
            return ToolFailure(f"❌ Error listing files: {e}")

    return ToolDefinition(
        name="list_files",
        description="Lists files and directories at a given path. Defaults to '.' if no path provided.",
        input_schema_class=ListFilesInput,
        handler=list_files_handler,
    )
