"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS = ("anthropic", "openai")

DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-5",
    "openai": "gpt-5-nano",
}


class LLMConfiguration(BaseModel):
    """Primary and optional fallback LLM provider selection."""

    primary_provider: str
    primary_model: str
    fallback_provider: str | None = None
    fallback_model: str | None = None

    @field_validator("primary_provider", "primary_model")
    @classmethod
    def require_value(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("primary_provider", "fallback_provider")
    @classmethod
    def validate_provider_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if value != value.lower():
            raise ValueError(f"provider names must be lowercase, got '{value}'")
        if value not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"unknown provider '{value}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return value

    @model_validator(mode="after")
    def default_fallback_model(self) -> Self:
        """Pick the provider's default model when only a fallback provider is set."""
        if self.fallback_provider and not self.fallback_model:
            self.fallback_model = DEFAULT_MODELS[self.fallback_provider]
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # LLM Providers
    llm_provider: Literal["anthropic", "openai"] = "anthropic"
    llm_model: str | None = None  # provider default when unset
    llm_fallback_provider: Literal["anthropic", "openai"] | None = None
    llm_fallback_model: str | None = None
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None

    # Dry-run cache root, one sub-directory per project
    cache_dir: Path = Field(default_factory=lambda: Path.home() / ".docwright" / "cache")

    # Generation
    parallelism: int = Field(default=3, ge=1, le=10)
    max_call_site_examples: int = Field(default=5, ge=0)
    call_site_context_lines: int = Field(default=3, ge=0)

    def llm_configuration(self) -> LLMConfiguration:
        """Build the provider selection from environment settings alone."""
        return LLMConfiguration(
            primary_provider=self.llm_provider,
            primary_model=self.llm_model or DEFAULT_MODELS[self.llm_provider],
            fallback_provider=self.llm_fallback_provider,
            fallback_model=self.llm_fallback_model,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
