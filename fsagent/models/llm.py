"""LLM-related data models and types (provider-agnostic)."""

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class LLMMessage(BaseModel):
    """A message for LLM conversation."""

    role: Role
    content: str

    model_config = ConfigDict(frozen=True)


class ToolCall(BaseModel):
    """A tool invocation parsed from a model reply."""

    name: str
    input: dict[str, Any] = Field(default_factory=dict)


@dataclass
class LLMUsage:
    """Token usage information from the LLM provider."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def add(self, other: "LLMUsage | None") -> None:
        """Accumulate another usage record into this one."""
        if other is None:
            return
        self.input_tokens += other.input_tokens
        self.output_tokens += other.output_tokens
        self.total_tokens += other.total_tokens


@dataclass
class LLMResponse:
    """Provider-agnostic response from a completion client."""

    content: str
    stop_reason: str | None
    usage: LLMUsage | None
    model: str
    provider: str


@dataclass
class ToolExecution:
    """Outcome of dispatching one tool call."""

    name: str
    input: dict[str, Any]
    output: str
    is_error: bool = False


@dataclass
class TurnResult:
    """Result from running one user turn through the agent loop."""

    reply: str
    stop_reason: Literal["end_turn", "max_steps"]
    steps: list[ToolExecution] = field(default_factory=list)
    turns: int = 0
    usage: LLMUsage = field(default_factory=LLMUsage)
