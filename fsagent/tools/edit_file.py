"""Edit file tool."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fsagent.exceptions import PathOutsideWorkspaceError
from fsagent.tools.base import ToolDefinition, ToolFailure, resolve_path

EDIT_FILE_DESCRIPTION = """Make edits to a text file.

Replaces ALL occurrences of 'old_str' with 'new_str' in the given file. 'old_str' and 'new_str' MUST be different \
from each other. Matching is literal text, not a regular expression.

If the file specified with path doesn't exist and 'old_str' is empty, it will be created with 'new_str' as its \
content."""


class EditFileInput(BaseModel):
    """Input schema for editing or creating a file."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Path to the file")
    old_str: str = Field(..., description="Text to search for")
    new_str: str = Field(..., description="Text to replace old_str with")


def _create_file(target: Path, content: str, display_path: str) -> str:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        return ToolFailure(f"❌ Failed to create file: {e}")
    return f"✅ Created new file at {display_path}"


def create_edit_file_tool(workspace_root: Path | None = None) -> ToolDefinition:
    async def edit_file_handler(params: EditFileInput) -> str:
        """Replace text in a file, or create the file when old_str is empty."""
        if not params.path.strip() or params.old_str == params.new_str:
            return ToolFailure("❌ Invalid input parameters.")

        try:
            target = resolve_path(params.path, workspace_root)
        except PathOutsideWorkspaceError:
            return ToolFailure(f"❌ Path is outside the workspace: {params.path}")

        try:
            # newline="" keeps the file's own line endings intact on rewrite
            with target.open(encoding="utf-8", newline="") as f:
                content = f.read()
        except FileNotFoundError as e:
            if params.old_str == "":
                return _create_file(target, params.new_str, params.path)
            return ToolFailure(f"❌ Error editing file: {e}")
        except (OSError, UnicodeDecodeError) as e:
            return ToolFailure(f"❌ Error editing file: {e}")

        if not params.old_str or params.old_str not in content:
            return ToolFailure("❌ old_str not found in file.")

        try:
            target.write_text(content.replace(params.old_str, params.new_str), encoding="utf-8", newline="")
        except OSError as e:
            return ToolFailure(f"❌ Error editing file: {e}")
        return "✅ File edited successfully."

    return ToolDefinition(
        name="edit_file",
        description=EDIT_FILE_DESCRIPTION,
        input_schema_class=EditFileInput,
        handler=edit_file_handler,
    )
