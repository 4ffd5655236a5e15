"""
Chat-completion client for OpenAI-compatible REST endpoints.

Both OpenAI and Mistral expose POST {base_url}/chat/completions with the
same request and response shape, so one client serves both.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import BaseModel
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from vibeocm.core.config import Settings, get_settings
from vibeocm.core.constants import ApiErrorType
from vibeocm.core.exceptions import LLMProviderError
from vibeocm.core.logging import get_logger
from vibeocm.domain.artifact import TokenUsage
from vibeocm.llm.providers import ApiConfig, ProviderConfig, get_provider_config

logger = get_logger(__name__)


class ChatCompletionResult(BaseModel):
    """Text and token usage returned by a provider."""

    content: str
    model: str
    usage: Optional[TokenUsage] = None


def classify_status(status_code: int) -> ApiErrorType:
    """Map an HTTP status to an error type."""
    if status_code in (401, 403):
        return ApiErrorType.AUTH_ERROR
    if status_code == 429:
        return ApiErrorType.RATE_LIMIT
    if status_code >= 500:
        return ApiErrorType.SERVER_ERROR
    return ApiErrorType.UNKNOWN_ERROR


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull a readable message out of an error body, if it has one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    for key in ("message", "detail"):
        if body.get(key):
            return str(body[key])
    return None


class ChatCompletionClient:
    """
    Sends chat-completion requests with retry and exponential backoff.

    Every failure is retried until the attempt budget is spent. The wait
    before attempt n+1 is backoff_seconds * 2^(n-1).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings (defaults to the cached instance)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
            sleep: Coroutine used to wait between attempts
        """
        self.settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def max_retries(self) -> int:
        return self.settings.generation.max_retries

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def complete(
        self,
        messages: list[dict[str, str]],
        config: ApiConfig,
    ) -> ChatCompletionResult:
        """
        Run a chat completion.

        Args:
            messages: Chat messages, system first
            config: Provider, key, model and sampling parameters

        Returns:
            The generated content and token usage

        Raises:
            LLMProviderError: After the final failed attempt
        """
        provider = get_provider_config(config.provider, self.settings)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.settings.generation.backoff_seconds),
            retry=retry_if_exception_type(LLMProviderError),
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    try:
                        return await self._send(messages, config, provider)
                    except LLMProviderError as e:
                        logger.warning(
                            "Chat completion attempt failed",
                            provider=provider.display_name,
                            model=config.model,
                            attempt=attempt.retry_state.attempt_number,
                            max_attempts=self.max_retries,
                            error_type=e.error_type.value,
                            error=e.message,
                        )
                        raise
        except LLMProviderError as e:
            raise LLMProviderError(
                provider=provider.display_name,
                message=(
                    f"Failed to call {provider.display_name} API after "
                    f"{self.max_retries} attempts: {e.message}"
                ),
                error_type=e.error_type,
                status=e.status,
            ) from e

        # AsyncRetrying with reraise=True either returns or raises above
        raise LLMProviderError(provider=provider.display_name, message="No attempts were made")

    async def _send(
        self,
        messages: list[dict[str, str]],
        config: ApiConfig,
        provider: ProviderConfig,
    ) -> ChatCompletionResult:
        """Make a single chat-completion request."""
        client = await self._get_client()
        name = provider.display_name
        payload: dict[str, Any] = {
            "model": config.model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }

        try:
            response = await client.post(
                f"{provider.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {config.api_key.get_secret_value()}"},
                timeout=httpx.Timeout(provider.timeout),
            )
        except httpx.RequestError as e:
            raise LLMProviderError(
                provider=name,
                message=str(e) or type(e).__name__,
                error_type=ApiErrorType.NETWORK_ERROR,
            ) from e

        if response.is_error:
            status = response.status_code
            message = extract_error_message(response) or f"{name} API request failed with status {status}"
            raise LLMProviderError(
                provider=name,
                message=message,
                error_type=classify_status(status),
                status=status,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMProviderError(provider=name, message=f"Invalid response format from {name} API") from e
        if not isinstance(content, str):
            raise LLMProviderError(provider=name, message=f"Invalid response format from {name} API")

        usage = None
        if isinstance(data.get("usage"), dict):
            usage = TokenUsage.model_validate(data["usage"])

        logger.debug(
            "Chat completion succeeded",
            provider=name,
            model=data.get("model", config.model),
            total_tokens=usage.total_tokens if usage else None,
        )
        return ChatCompletionResult(
            content=content,
            model=data.get("model") or config.model,
            usage=usage,
        )

    async def __aenter__(self) -> "ChatCompletionClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
