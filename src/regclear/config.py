"""
Configuration management for RegClear.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["anthropic", "openai", "ollama"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # LLM API Keys
    # ==========================================================================
    anthropic_api_key: str = Field(default="", description="Anthropic API key for Claude")
    openai_api_key: str = Field(default="", description="OpenAI API key for GPT-4o")

    # ==========================================================================
    # LLM Providers
    # ==========================================================================
    default_provider: ProviderName | None = Field(
        default=None, description="Provider used when none is requested explicitly"
    )
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4o"
    ollama_model: str = "llama3.2"
    ollama_base_url: str | None = Field(
        default=None, description="Ollama server URL; unset means Ollama is not configured"
    )

    # ==========================================================================
    # Generation
    # ==========================================================================
    llm_temperature: float = 0.2
    llm_max_tokens: int = 8000
    llm_timeout: int = 120
    llm_max_retries: int = 3

    # Groups are generated one at a time unless raised
    generation_concurrency: int = Field(default=1, ge=1)

    # ==========================================================================
    # Paths
    # ==========================================================================
    templates_dir: Path | None = None
    output_dir: Path = Path("./compliance-output")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def resolved_ollama_url(self) -> str:
        """Ollama base URL, falling back to the local default."""
        return self.ollama_base_url or "http://localhost:11434"

    @property
    def resolved_templates_dir(self) -> Path:
        """Template directory, defaulting to the templates shipped with the package."""
        if self.templates_dir is not None:
            return self.templates_dir
        return Path(__file__).parent / "templates"

    def public_dict(self) -> dict[str, object]:
        """Settings safe to print: API keys are reduced to a configured flag."""
        data = self.model_dump(exclude={"anthropic_api_key", "openai_api_key"})
        data["anthropic_api_key"] = bool(self.anthropic_api_key)
        data["openai_api_key"] = bool(self.openai_api_key)
        data["templates_dir"] = str(self.resolved_templates_dir)
        data["output_dir"] = str(self.output_dir)
        return data


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
