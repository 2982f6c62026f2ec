"""Conversation transcript shared between the agent loop and the completion client."""

from collections.abc import Iterator
from functools import lru_cache

import tiktoken

from fsagent.models.llm import LLMMessage, Role
from fsagent.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_tokenizer() -> tiktoken.Encoding | None:
    """Load the tokenizer used for transcript size estimates."""
    try:
        # Close approximation for the hosted chat models
        return tiktoken.get_encoding("cl100k_base")
    except Exception as e:
        logger.warning(f"Tokenizer unavailable, falling back to character estimate: {e}")
        return None


def estimate_tokens(text: str) -> int:
    """Estimate the token count for a piece of text."""
    tokenizer = get_tokenizer()
    try:
        return len(tokenizer.encode(text)) if tokenizer else len(text) // 4
    except Exception:
        # Fallback: roughly 4 characters per token
        return len(text) // 4


class Conversation:
    """Ordered, append-only transcript of role-tagged messages.

    The full transcript is resent on every completion request. Messages are
    never edited or removed; starting over means creating a new Conversation.
    """

    def __init__(self, system_prompt: str | None = None):
        self._messages: list[LLMMessage] = []
        self._token_estimate = 0
        if system_prompt:
            self.append("system", system_prompt)

    def append(self, role: Role, content: str) -> LLMMessage:
        """Append a message and return it."""
        message = LLMMessage(role=role, content=content)
        self._messages.append(message)
        self._token_estimate += estimate_tokens(content)
        return message

    def add_user(self, content: str) -> LLMMessage:
        return self.append("user", content)

    def add_assistant(self, content: str) -> LLMMessage:
        return self.append("assistant", content)

    def add_tool_result(self, output: str) -> LLMMessage:
        """Feed a tool outcome back to the model as a user message."""
        return self.append("user", f"Tool result:\n{output}")

    @property
    def messages(self) -> list[LLMMessage]:
        """Snapshot of the transcript in order."""
        return list(self._messages)

    @property
    def token_estimate(self) -> int:
        return self._token_estimate

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[LLMMessage]:
        return iter(list(self._messages))
