"""Extraction of tool calls embedded in free-text model replies.

The model requests a tool by writing a single delimited block::

    <tool_call>
    {"name": "list_files", "input": {"path": "./"}}
    </tool_call>

Anything before the block is the model's narration for the user.
"""

import json
import re
from dataclasses import dataclass

from pydantic import ValidationError

from fsagent.models.llm import ToolCall

TOOL_CALL_START = "<tool_call>"
TOOL_CALL_END = "</tool_call>"

_TOOL_CALL_PATTERN = re.compile(re.escape(TOOL_CALL_START) + r"(.*?)" + re.escape(TOOL_CALL_END), re.DOTALL)


@dataclass(frozen=True)
class ParsedReply:
    """A model reply split into narration and an optional tool call."""

    narration: str
    call: ToolCall | None = None
    error: str | None = None

    @property
    def wants_tool(self) -> bool:
        """True when the reply contained a tool-call block, valid or not."""
        return self.call is not None or self.error is not None


def parse_tool_call(text: str) -> ParsedReply:
    """Parse the first tool-call block out of a model reply.

    A reply without a complete block is a plain reply. A block whose contents
    are not a JSON object with a string "name" and an object "input" yields an
    error describing the problem instead of a call, so the model can correct
    itself.
    """
    match = _TOOL_CALL_PATTERN.search(text)
    if not match:
        return ParsedReply(narration=text.strip())

    narration = text[: match.start()].strip()
    payload = match.group(1).strip()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        return ParsedReply(narration=narration, error=f"tool call is not valid JSON ({e.msg} at position {e.pos})")

    if not isinstance(data, dict):
        return ParsedReply(narration=narration, error='tool call must be a JSON object with "name" and "input"')
    if not isinstance(data.get("name"), str) or not data["name"]:
        return ParsedReply(narration=narration, error='tool call is missing a string "name"')
    if data.get("input") is None:
        data["input"] = {}

    try:
        call = ToolCall.model_validate({"name": data["name"], "input": data["input"]})
    except ValidationError:
        return ParsedReply(narration=narration, error=f'"input" for {data["name"]} must be a JSON object')

    return ParsedReply(narration=narration, call=call)
