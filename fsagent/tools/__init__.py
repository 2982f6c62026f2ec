"""Filesystem tools for the conversational AI assistant."""

from fsagent.tools.base import ToolDefinition
from fsagent.tools.registry import ToolsRegistry

__all__ = ["ToolDefinition", "ToolsRegistry"]
