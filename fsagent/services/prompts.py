"""System prompt construction."""

import json

from fsagent.services.parser import TOOL_CALL_END, TOOL_CALL_START
from fsagent.tools.registry import ToolsRegistry


def get_system_prompt(registry: ToolsRegistry) -> str:
    """Generate the system prompt documenting every registered tool.

    Args:
        registry: Tools the model may call

    Returns:
        System prompt string
    """
    tools = registry.describe_tools()

    tool_lines = []
    for index, tool in enumerate(tools, start=1):
        tool_lines.append(
            f"{index}) {tool['name']}\n"
            f"   • Description: {tool['description']}\n"
            f"   • Input schema: {json.dumps(tool['input_schema'])}"
        )

    example = json.dumps({"name": "list_files", "input": {"path": "./"}})

    return f"""You are an AI assistant with access to {len(tools)} tools.
Only use these tools when they will help answer the query.

{chr(10).join(tool_lines)}

You are a powerful agentic AI coding assistant, pair programming with a USER to solve their coding task.
The task may require creating a new codebase, modifying or debugging an existing codebase, or simply answering a \
question.

Follow these rules regarding tool calls:
1. ALWAYS follow the tool call schema exactly as specified and provide all required parameters.
2. NEVER call tools that are not listed above.
3. NEVER refer to tool names when speaking to the USER. Say "I will edit your file", not "I will use edit_file".
4. Only call tools when they are necessary. If the task is general or you already know the answer, just respond.
5. Before calling a tool, briefly explain to the USER why you are calling it.
6. Call at most one tool per reply, wrapped in a single {TOOL_CALL_START} block like this:

{TOOL_CALL_START}
{example}
{TOOL_CALL_END}

After the tool runs you will get its output as a user message starting with "Tool result:". Then continue \
reasoning or call another tool.
If you do not need a tool, just reply normally."""
