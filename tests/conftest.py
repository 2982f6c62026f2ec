"""Shared fixtures for the test suite."""

from unittest.mock import patch

import pytest

from fsagent.models.llm import LLMMessage, LLMResponse, LLMUsage
from fsagent.tools.registry import ToolsRegistry


class ScriptedClient:
    """Completion client that replays canned replies and records every request."""

    provider = "scripted"

    def __init__(self, replies: list[str]):
        self.replies = list(replies)
        self.requests: list[list[LLMMessage]] = []

    async def create_message(self, messages: list[LLMMessage], **kwargs) -> LLMResponse:
        self.requests.append(list(messages))
        if not self.replies:
            raise AssertionError("ScriptedClient ran out of replies")
        return LLMResponse(
            content=self.replies.pop(0),
            stop_reason="stop",
            usage=LLMUsage(input_tokens=10, output_tokens=5, total_tokens=15),
            model="scripted-model",
            provider=self.provider,
        )


@pytest.fixture(autouse=True)
def no_tokenizer():
    """Use the character-based token estimate so tests never download encodings."""
    with patch("fsagent.models.conversation.get_tokenizer", return_value=None):
        yield


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test inside an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def registry(workdir):
    """Registry with the built-in tools, unrestricted, rooted at the temp working directory."""
    return ToolsRegistry()


@pytest.fixture
def scripted_client():
    """Factory for scripted completion clients."""
    return ScriptedClient
