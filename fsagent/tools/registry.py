"""Tools registry for managing and executing AI assistant tools."""

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fsagent.models.llm import ToolExecution
from fsagent.tools.base import ToolDefinition, ToolFailure
from fsagent.tools.delete_file import create_delete_file_tool
from fsagent.tools.edit_file import create_edit_file_tool
from fsagent.tools.list_files import create_list_files_tool
from fsagent.tools.read_file import create_read_file_tool
from fsagent.utils.logging import get_logger

logger = get_logger(__name__)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"]) or "input"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class ToolsRegistry:
    """Ordered registry of the filesystem tools exposed to the model."""

    def __init__(self, workspace_root: Path | None = None, register_defaults: bool = True):
        """Initialize tools registry.

        Args:
            workspace_root: Directory the filesystem tools are confined to, or None for no restriction
            register_defaults: Register the built-in filesystem tools
        """
        self.workspace_root = workspace_root
        self._tools: dict[str, ToolDefinition] = {}
        if register_defaults:
            self._register_default_tools()

    def _register_default_tools(self) -> None:
        """Register the built-in filesystem tools."""
        tools = [
            create_list_files_tool(self.workspace_root),
            create_read_file_tool(self.workspace_root),
            create_edit_file_tool(self.workspace_root),
            create_delete_file_tool(self.workspace_root),
        ]

        for tool in tools:
            self.register_tool(tool)

    def register_tool(self, tool: ToolDefinition) -> None:
        """Register a new tool in the registry."""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def list_tools(self) -> list[ToolDefinition]:
        """Get registered tools in registration order."""
        return list(self._tools.values())

    def get_tool_names(self) -> list[str]:
        """Get list of all registered tool names."""
        return list(self._tools.keys())

    def has_tool(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def describe_tools(self) -> list[dict[str, Any]]:
        """Describe every tool with its name, description and input schema."""
        return [
            {"name": tool.name, "description": tool.description, "input_schema": tool.get_json_schema()}
            for tool in self._tools.values()
        ]

    async def execute(self, name: str, raw_input: Any) -> ToolExecution:
        """Validate the input and run the named tool.

        Never raises: unknown tools, invalid input and unexpected handler
        failures all come back as an error result the model can read.
        """
        tool_input = raw_input if isinstance(raw_input, dict) else {}
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolExecution(name=name, input=tool_input, output=f"❌ Unknown tool: {name}", is_error=True)

        if not isinstance(raw_input, dict):
            logger.warning(f"Tool {name} called with non-object input: {raw_input!r}")
            return ToolExecution(
                name=name,
                input=tool_input,
                output=f"❌ Invalid input for {name}: input must be an object",
                is_error=True,
            )

        try:
            params = tool.parse_input(raw_input)
        except ValidationError as e:
            logger.warning(f"Invalid input for tool {name}: {e}")
            return ToolExecution(
                name=name,
                input=tool_input,
                output=f"❌ Invalid input for {name}: {_format_validation_error(e)}",
                is_error=True,
            )

        logger.debug(f"Executing tool: {name} with input: {raw_input}")
        try:
            output = await tool.handler(params)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}", exc_info=True)
            return ToolExecution(name=name, input=tool_input, output=f"❌ Tool error: {e}", is_error=True)

        logger.debug(f"Tool {name} returned: {output[:100]}...")
        return ToolExecution(
            name=name, input=tool_input, output=str(output), is_error=isinstance(output, ToolFailure)
        )
