"""Anthropic API client."""

from dataclasses import dataclass
from typing import Literal

from anthropic import Anthropic, APIError
from anthropic.types import Message
from pydantic import BaseModel

from fsagent.exceptions import CompletionError
from fsagent.models.llm import LLMMessage, LLMResponse, LLMUsage
from fsagent.utils.logging import get_logger

logger = get_logger(__name__)


class AnthropicMessage(BaseModel):
    """Message format for Anthropic API."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class AnthropicConfig:
    """Configuration for Anthropic API client."""

    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = 4096
    temperature: float = 0.7


class AnthropicClient:
    """Low-level Anthropic API client.

    The Messages API takes the system prompt as a separate parameter, so
    system messages in the transcript are lifted out of the message list.
    """

    provider = "anthropic"

    def __init__(self, api_key: str, config: AnthropicConfig | None = None):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            config: Client configuration
        """
        if not api_key:
            raise ValueError("Anthropic API key is required")

        self.client = Anthropic(api_key=api_key)
        self.config = config or AnthropicConfig()

    async def create_message(self, messages: list[LLMMessage], **kwargs) -> LLMResponse:
        """Create a message with the Claude API.

        Args:
            messages: Full conversation transcript, system messages included
            **kwargs: Overrides for model, max_tokens and temperature

        Returns:
            Provider-agnostic response

        Raises:
            CompletionError: If the API call fails
        """
        system_prompt = "\n\n".join(msg.content for msg in messages if msg.role == "system")
        message_dicts = [
            AnthropicMessage(role=msg.role, content=msg.content).model_dump()
            for msg in messages
            if msg.role != "system"
        ]

        request_params = {
            "model": kwargs.get("model", self.config.model),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
            "messages": message_dicts,
        }
        if system_prompt:
            request_params["system"] = system_prompt

        logger.debug(f"Making Anthropic API call with model: {request_params['model']}, {len(message_dicts)} messages")
        try:
            response: Message = self.client.messages.create(**request_params)
        except APIError as e:
            logger.error(f"Anthropic API call failed: {e}")
            raise CompletionError(self.provider, str(e)) from e

        usage = None
        if response.usage:
            usage = LLMUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        logger.debug(f"Response received - Stop reason: {response.stop_reason}, {len(text)} chars")

        return LLMResponse(
            content=text,
            stop_reason=response.stop_reason,
            usage=usage,
            model=response.model,
            provider=self.provider,
        )
