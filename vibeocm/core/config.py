"""
Configuration management using Pydantic Settings.
Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    """OpenAI chat-completion endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL")
    default_model: str = Field(default="gpt-4", description="Model used when none is requested")
    timeout: int = Field(default=120, description="Request timeout in seconds")


class MistralSettings(BaseSettings):
    """Mistral chat-completion endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="MISTRAL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    base_url: str = Field(default="https://api.mistral.ai/v1", description="Mistral API base URL")
    default_model: str = Field(
        default="mistral-small-latest", description="Model used when none is requested"
    )
    timeout: int = Field(default=120, description="Request timeout in seconds")


class TrialSettings(BaseSettings):
    """Server-side key used for passphrase and trial authentication."""

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    default_mistral_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("DEFAULT_MISTRAL_API_KEY", "NEXT_PUBLIC_MISTRAL_API_KEY"),
        description="Mistral key shared by passphrase and trial users",
    )

    @property
    def available(self) -> bool:
        """Trial mode can reach the real API only when a default key is set."""
        return bool(self.default_mistral_api_key.strip())


class GenerationSettings(BaseSettings):
    """LLM generation defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATION_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    max_tokens: int = Field(default=2000, description="Max tokens per completion")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_retries: int = Field(default=3, ge=1, description="Attempts per chat-completion call")
    backoff_seconds: float = Field(
        default=1.0, ge=0.0, description="Base wait; doubled after every failed attempt"
    )


class AnalyticsSettings(BaseSettings):
    """PostHog analytics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POSTHOG_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    key: str = Field(default="", description="PostHog project API key")
    host: Optional[str] = Field(default=None, description="PostHog host")
    timeout: int = Field(default=5, description="Capture request timeout in seconds")

    @property
    def enabled(self) -> bool:
        return bool(self.key)


class SecuritySettings(BaseSettings):
    """Security configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    hashed_passphrase: str = Field(
        default="",
        validation_alias=AliasChoices("HASHED_PASSPHRASE", "SECURITY_HASHED_PASSPHRASE"),
        description="PBKDF2 hash of the shared passphrase",
    )
    passphrase_min_length: int = Field(default=10, description="Minimum passphrase length")
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"],
        description="CORS allowed origins",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="vibeocm", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Sessions
    session_ttl_hours: int = Field(default=24, description="Idle wizard sessions expire after this")

    # Sub-settings
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    mistral: MistralSettings = Field(default_factory=MistralSettings)
    trial: TrialSettings = Field(default_factory=TrialSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
