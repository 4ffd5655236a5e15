"""
LLM provider access.
"""

from vibeocm.llm.client import ChatCompletionClient, ChatCompletionResult
from vibeocm.llm.providers import (
    ApiConfig,
    ProviderConfig,
    get_default_model_for_provider,
    get_provider_config,
    resolve_api_config,
)

__all__ = [
    "ApiConfig",
    "ChatCompletionClient",
    "ChatCompletionResult",
    "ProviderConfig",
    "get_default_model_for_provider",
    "get_provider_config",
    "resolve_api_config",
]
