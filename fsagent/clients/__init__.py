"""Completion clients for the supported LLM providers."""

from typing import Protocol

from fsagent.clients.anthropic import AnthropicClient, AnthropicConfig
from fsagent.clients.groq import GroqClient, GroqConfig
from fsagent.config import Settings
from fsagent.models.llm import LLMMessage, LLMResponse


class CompletionClient(Protocol):
    """Anything that can turn a transcript into a model reply."""

    provider: str

    async def create_message(self, messages: list[LLMMessage], **kwargs) -> LLMResponse: ...


def create_completion_client(settings: Settings) -> CompletionClient:
    """Build the client for the configured provider.

    Raises:
        ConfigurationError: If the provider's API key is not set
    """
    api_key = settings.api_key()

    if settings.provider == "anthropic":
        return AnthropicClient(
            api_key,
            AnthropicConfig(
                model=settings.model_name,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            ),
        )

    return GroqClient(
        api_key,
        GroqConfig(
            model=settings.model_name,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        ),
    )


__all__ = [
    "AnthropicClient",
    "AnthropicConfig",
    "CompletionClient",
    "GroqClient",
    "GroqConfig",
    "create_completion_client",
]
