"""
Application configuration management using pydantic-settings
"""
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fsagent.exceptions import ConfigurationError

DEFAULT_MODELS = {
    "groq": "llama-3.3-70b-versatile",
    "anthropic": "claude-3-5-sonnet-20241022",
}

API_KEY_VARIABLES = {
    "groq": "GROQ_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env"""

    # LLM provider
    provider: Literal["groq", "anthropic"] = "groq"
    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 4096

    # Provider credentials (unprefixed, matching the providers' own conventions)
    groq_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GROQ_API_KEY"))
    anthropic_api_key: str | None = Field(default=None, validation_alias=AliasChoices("ANTHROPIC_API_KEY"))

    # Agent loop
    max_tool_steps: int = Field(default=25, ge=1)
    context_warning_tokens: int = 100_000

    # Filesystem tools; unset means paths are used as given
    workspace_root: str | None = None

    log_level: str = Field(default="WARNING", validation_alias=AliasChoices("LOG_LEVEL"))

    model_config = SettingsConfigDict(
        env_prefix="FSAGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def model_name(self) -> str:
        """Configured model, falling back to the provider default"""
        return self.model or DEFAULT_MODELS[self.provider]

    def api_key(self) -> str:
        """Return the active provider's API key or fail fast"""
        key = self.groq_api_key if self.provider == "groq" else self.anthropic_api_key
        if not key:
            raise ConfigurationError(
                f"{API_KEY_VARIABLES[self.provider]} is not set. "
                "Export it or add it to a .env file in the working directory."
            )
        return key


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance"""
    return Settings()
