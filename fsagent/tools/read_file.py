"""Read file tool."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fsagent.exceptions import PathOutsideWorkspaceError
from fsagent.tools.base import ToolDefinition, ToolFailure, resolve_path


class ReadFileInput(BaseModel):
    """Input schema for reading a file."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Relative path, e.g. './pyproject.toml'")


def create_read_file_tool(workspace_root: Path | None = None) -> ToolDefinition:
    async def read_file_handler(params: ReadFileInput) -> str:
        if not params.path.strip():
            return ToolFailure("❌ Invalid input parameters.")
        try:
            return resolve_path(params.path, workspace_root).read_text(encoding="utf-8")
        except PathOutsideWorkspaceError:
            return ToolFailure(f"❌ Path is outside the workspace: {params.path}")
        except (OSError, UnicodeDecodeError) as e:
            return ToolFailure(f"❌ Error reading file: {e}")

    return ToolDefinition(
        name="read_file",
        description="Reads the contents of a file at a given relative path. Only use for text files.",
        input_schema_class=ReadFileInput,
        handler=read_file_handler,
    )
