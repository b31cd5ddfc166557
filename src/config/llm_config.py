from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

# Placeholder shipped in example environment files; never a usable key.
PLACEHOLDER_API_KEY = "gsk_your_free_key_here"


class LlmConfig(BaseSettings):
    """Connection settings for the upstream completion provider.

    Only the credentials, endpoint and request timeout are configurable.
    The model, sampling temperature and token limit are fixed on the
    payload itself (see :class:`~src.models.upstream.UpstreamPayload`).
    """

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GROQ_API_KEY", "LLM_API_KEY", "api_key"),
    )
    base_url: str = Field(
        "https://api.groq.com/openai/v1",
        validation_alias=AliasChoices("LLM_BASE_URL", "base_url"),
    )
    timeout: float = Field(
        30.0,
        validation_alias=AliasChoices("LLM_TIMEOUT", "timeout"),
    )

    @field_validator("api_key")
    def strip_api_key(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("base_url")
    def validate_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("LLM_BASE_URL must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("timeout")
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("LLM_TIMEOUT must be positive")
        return value

    @property
    def is_configured(self) -> bool:
        """True when a real API key is available."""
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache()
def get_llm_config() -> LlmConfig:
    """Return a cached language model configuration."""

    return LlmConfig()
