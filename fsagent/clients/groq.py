"""
Groq chat completion client (OpenAI-compatible API)
"""
from dataclasses import dataclass

from openai import OpenAI, OpenAIError

from fsagent.exceptions import CompletionError
from fsagent.models.llm import LLMMessage, LLMResponse, LLMUsage
from fsagent.utils.logging import get_logger

logger = get_logger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


@dataclass
class GroqConfig:
    """Configuration for the Groq client"""

    model: str = "llama-3.3-70b-versatile"
    max_tokens: int = 4096
    temperature: float = 0.7
    base_url: str = GROQ_BASE_URL


class GroqClient:
    """Groq API wrapper using the OpenAI SDK"""

    provider = "groq"

    def __init__(self, api_key: str, config: GroqConfig | None = None):
        if not api_key:
            raise ValueError("Groq API key is required")

        self.config = config or GroqConfig()
        self.client = OpenAI(api_key=api_key, base_url=self.config.base_url)

    async def create_message(self, messages: list[LLMMessage], **kwargs) -> LLMResponse:
        """
        Request a chat completion over the full transcript.

        Args:
            messages: Ordered conversation messages
            **kwargs: Overrides for model, max_tokens and temperature

        Returns:
            Response whose content is the first choice's text ("" when absent)
        """
        model = kwargs.get("model", self.config.model)
        logger.debug(f"Making Groq API call with model: {model}, {len(messages)} messages")

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[msg.model_dump() for msg in messages],
                temperature=kwargs.get("temperature", self.config.temperature),
                max_tokens=kwargs.get("max_tokens", self.config.max_tokens),
            )
        except OpenAIError as e:
            logger.error(f"Groq API call failed: {e}")
            raise CompletionError(self.provider, str(e)) from e

        choice = response.choices[0] if response.choices else None
        content = (choice.message.content if choice and choice.message else None) or ""

        usage = None
        if response.usage:
            usage = LLMUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return LLMResponse(
            content=content,
            stop_reason=choice.finish_reason if choice else None,
            usage=usage,
            model=response.model or model,
            provider=self.provider,
        )
