"""Delete file tool."""

import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fsagent.exceptions import PathOutsideWorkspaceError
from fsagent.tools.base import ToolDefinition, ToolFailure, is_protected_directory, resolve_path


class DeleteFileInput(BaseModel):
    """Input schema for deleting a file or directory."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="File or directory path to delete")


def create_delete_file_tool(workspace_root: Path | None = None) -> ToolDefinition:
    async def delete_file_handler(params: DeleteFileInput) -> str:
        """Remove a file or directory tree. A missing path counts as deleted."""
        if not params.path.strip():
            return ToolFailure("❌ Invalid input parameters.")

        try:
            target = resolve_path(params.path, workspace_root)
            if target.is_dir() and not target.is_symlink():
                if is_protected_directory(target, workspace_root):
                    return ToolFailure(f"❌ Refusing to delete the workspace itself: {params.path}")
                shutil.rmtree(target)
            else:
                target.unlink(missing_ok=True)
        except PathOutsideWorkspaceError:
            return ToolFailure(f"❌ Path is outside the workspace: {params.path}")
        except OSError as e:
            return ToolFailure(f"Error deleting file: {e}")
        return f"Successfully deleted: {params.path}"

    return ToolDefinition(
        name="delete_file",
        description="Delete a file or directory.",
        input_schema_class=DeleteFileInput,
        handler=delete_file_handler,
    )
