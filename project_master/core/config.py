"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ANTHROPIC_MODEL = "claude-3-haiku-20240307"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # Anthropic API
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key; without it generation uses the keyword fallback",
    )
    anthropic_model: str = Field(
        default=DEFAULT_ANTHROPIC_MODEL,
        description="Model identifier used for task generation",
    )
    anthropic_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("anthropic_base_url", "ai_model_endpoint"),
        description="Optional custom completion endpoint",
    )
    anthropic_max_tokens: int = Field(
        default=3000,
        ge=1,
        le=8192,
        description="Token budget for a single generation request",
    )

    # Project Master Configuration
    project_master_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    project_master_debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    project_master_log_dir: str | None = Field(
        default=None,
        description="Directory for rotated log files; console only when unset",
    )
    project_master_max_tasks: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default upper bound on generated tasks per request",
    )

    @property
    def has_api_key(self) -> bool:
        """Check whether a non-empty Anthropic API key is configured."""
        return bool(
            self.anthropic_api_key is not None
            and self.anthropic_api_key.get_secret_value().strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.anthropic_max_tokens
        3000
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
