"""
Provider registry and per-request API configuration.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, SecretStr

from vibeocm.core.config import Settings, get_settings
from vibeocm.core.constants import (
    API_KEY_URLS,
    PROVIDER_DISPLAY_NAMES,
    ApiProvider,
    AuthMethod,
)
from vibeocm.core.exceptions import ConfigurationError
from vibeocm.core.logging import get_logger
from vibeocm.domain.project import Credentials

logger = get_logger(__name__)

PASSPHRASE_UNAVAILABLE_MESSAGE = (
    "Passphrase authentication is currently unavailable. "
    "Please go back to the authentication step and use your own API key instead."
)


@dataclass(frozen=True)
class ProviderConfig:
    """Static facts about a chat-completion provider."""

    provider: ApiProvider
    base_url: str
    default_model: str
    timeout: int

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES[self.provider]

    @property
    def api_key_url(self) -> str:
        return API_KEY_URLS[self.provider]


def get_provider_config(
    provider: ApiProvider,
    settings: Optional[Settings] = None,
) -> ProviderConfig:
    """Look up the endpoint settings for a provider."""
    settings = settings or get_settings()
    if provider is ApiProvider.OPENAI:
        group = settings.openai
    elif provider is ApiProvider.MISTRAL:
        group = settings.mistral
    else:
        raise ConfigurationError(f"Unsupported provider: {provider}")

    return ProviderConfig(
        provider=provider,
        base_url=group.base_url.rstrip("/"),
        default_model=group.default_model,
        timeout=group.timeout,
    )


def get_default_model_for_provider(
    provider: ApiProvider,
    settings: Optional[Settings] = None,
) -> str:
    return get_provider_config(provider, settings).default_model


class ApiConfig(BaseModel):
    """Everything a single chat-completion call needs."""

    provider: ApiProvider
    api_key: SecretStr = Field(default=SecretStr(""))
    model: str
    max_tokens: int = 2000
    temperature: float = 0.7
    auth_method: AuthMethod

    # Trial users without a server key only ever get canned responses
    mock_only: bool = False

    refinement_feedback: Optional[str] = None
    current_content: Optional[str] = None

    @property
    def is_trial(self) -> bool:
        return self.auth_method is AuthMethod.TRIAL

    @property
    def is_passphrase(self) -> bool:
        return self.auth_method is AuthMethod.PASSPHRASE

    @property
    def is_refinement(self) -> bool:
        return bool(self.refinement_feedback and self.current_content)

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES[self.provider]


def resolve_api_config(
    credentials: Credentials,
    model: Optional[str] = None,
    refinement_feedback: Optional[str] = None,
    current_content: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ApiConfig:
    """
    Build the API configuration for a user's credentials.

    Passphrase and trial users run on the server's default Mistral key.

    Raises:
        ConfigurationError: Passphrase auth with no default key configured
    """
    settings = settings or get_settings()
    method = credentials.auth_method
    provider = credentials.provider

    mock_only = False
    if method.uses_default_key:
        api_key = settings.trial.default_mistral_api_key.strip()
        if not api_key:
            if method is AuthMethod.PASSPHRASE:
                logger.error("Passphrase auth requested but no default Mistral key is set")
                raise ConfigurationError(PASSPHRASE_UNAVAILABLE_MESSAGE)
            mock_only = True
    else:
        api_key = credentials.api_key_value

    return ApiConfig(
        provider=provider,
        api_key=SecretStr(api_key),
        model=model or get_default_model_for_provider(provider, settings),
        max_tokens=settings.generation.max_tokens,
        temperature=settings.generation.temperature,
        auth_method=method,
        mock_only=mock_only,
        refinement_feedback=refinement_feedback,
        current_content=current_content,
    )
