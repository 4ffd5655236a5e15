"""
Product analytics via the PostHog capture API.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from vibeocm.core.config import Settings, get_settings
from vibeocm.core.exceptions import AnalyticsError
from vibeocm.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_POSTHOG_HOST = "https://app.posthog.com"


class AnalyticsEvent:
    """Event names sent to PostHog."""

    SESSION_CREATED = "session_created"
    NAVIGATE_STEP = "navigate_step"
    PASSPHRASE_SUBMITTED = "passphrase_submitted"
    TRIAL_SUBMITTED = "trial_submitted"
    AUTHENTICATION_ERROR = "authentication_error"
    LAZY_GENERATION = "lazy_generation"
    GENERATE_ANOTHER = "generate_another"
    LLM_REQUEST = "llm_request"


class AnalyticsClient:
    """
    Fire-and-forget event capture.

    Disabled when no POSTHOG_KEY is configured. Capture failures are
    logged and never propagated to the caller.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        return self.settings.analytics.enabled

    @property
    def host(self) -> str:
        return (self.settings.analytics.host or DEFAULT_POSTHOG_HOST).rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.host,
                timeout=httpx.Timeout(self.settings.analytics.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def capture_event(
        self,
        event: str,
        properties: Optional[dict[str, Any]] = None,
        distinct_id: str = "anonymous",
    ) -> bool:
        """
        Capture an analytics event.

        Args:
            event: Event name
            properties: Event properties
            distinct_id: Identifier of the user or session

        Returns:
            Whether the event was delivered to PostHog
        """
        properties = properties or {}
        logger.debug("Analytics event", analytics_event=event, distinct_id=distinct_id, **properties)

        if not self.enabled:
            return False

        try:
            await self._post(event, properties, distinct_id)
        except AnalyticsError as e:
            logger.warning("Failed to capture analytics event", analytics_event=event, error=e.message)
            return False
        return True

    async def _post(self, event: str, properties: dict[str, Any], distinct_id: str) -> None:
        client = await self._get_client()
        payload = {
            "api_key": self.settings.analytics.key,
            "event": event,
            "distinct_id": distinct_id,
            "properties": properties,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await client.post("/capture/", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AnalyticsError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise AnalyticsError(f"Request failed: {e}") from e

    async def capture_llm_metrics(
        self,
        *,
        provider: str,
        auth_method: str,
        model: str,
        latency_ms: int,
        success: bool,
        distinct_id: str = "anonymous",
        error_type: Optional[str] = None,
        artifact_type: Optional[str] = None,
        is_refinement: bool = False,
        is_passphrase: bool = False,
        is_trial: bool = False,
        prompt_tokens: Optional[int] = None,
        completion_tokens: Optional[int] = None,
        total_tokens: Optional[int] = None,
    ) -> bool:
        """Capture the llm_request event for one generation or refinement."""
        properties: dict[str, Any] = {
            "provider": provider,
            "auth_method": auth_method,
            "model": model,
            "latency_ms": latency_ms,
            "success": success,
            "error_type": error_type,
            "artifact_type": artifact_type,
            "is_refinement": is_refinement,
            "is_passphrase": is_passphrase,
            "is_trial": is_trial,
        }
        if total_tokens is not None:
            properties.update(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=total_tokens,
            )
        return await self.capture_event(AnalyticsEvent.LLM_REQUEST, properties, distinct_id)
