from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class LlmConfig(BaseSettings):
    """Configuration settings for the completion service.

    The API key is optional at load time: a missing key is reported per
    request as a server configuration error rather than failing startup.
    """

    api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    model: str = Field("gpt-3.5-turbo", alias="OPENAI_MODEL")
    temperature: float = Field(0.7, alias="OPENAI_TEMPERATURE")
    max_tokens: Optional[int] = Field(400, alias="OPENAI_MAX_TOKENS")
    timeout: int = Field(30, alias="OPENAI_TIMEOUT")

    @field_validator("api_key")
    def validate_api_key(cls, value: Optional[str]) -> Optional[str]:
        # Blank values in .env files count as unset
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("temperature")
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError("OPENAI_TEMPERATURE must be between 0.0 and 2.0")
        return value

    @field_validator("timeout")
    def validate_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("OPENAI_TIMEOUT must be positive")
        return value

    @field_validator("max_tokens")
    def validate_max_tokens(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("OPENAI_MAX_TOKENS must be positive")
        return value

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache()
def get_llm_config() -> LlmConfig:
    """Return a cached language model configuration."""

    return LlmConfig()
