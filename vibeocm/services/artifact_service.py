"""
Artifact generation and refinement.
"""

import time
from typing import Optional

from vibeocm.core.config import Settings, get_settings
from vibeocm.core.constants import API_KEY_URLS, ApiErrorType, AuthMethod
from vibeocm.core.exceptions import ArtifactGenerationError, LLMProviderError
from vibeocm.core.logging import get_logger
from vibeocm.domain.artifact import Artifact, TokenUsage
from vibeocm.domain.project import ProjectData
from vibeocm.llm.client import ChatCompletionClient, ChatCompletionResult
from vibeocm.llm.providers import ApiConfig
from vibeocm.prompts.formatter import build_messages, build_user_prompt
from vibeocm.prompts.mock_responses import generate_mock_response
from vibeocm.services.analytics import AnalyticsClient

logger = get_logger(__name__)


def format_generation_error(
    artifact_type: str,
    cause: str,
    auth_method: AuthMethod,
    refinement: bool = False,
) -> str:
    """User-facing failure message, with a key tip for users who brought their own key."""
    verb = "refine" if refinement else "generate"
    message = f"Failed to {verb} {artifact_type}. {cause}"
    if auth_method is AuthMethod.OPENAI:
        message += f"\n\nMake sure you're using a valid OpenAI API key from {API_KEY_URLS[auth_method.provider]}"
    elif auth_method is AuthMethod.MISTRAL:
        message += f"\n\nMake sure you're using a valid Mistral API key from {API_KEY_URLS[auth_method.provider]}"
    return message


class ArtifactGenerator:
    """
    Turns project data into OCM artifacts through a chat-completion provider.
    """

    def __init__(
        self,
        llm_client: ChatCompletionClient,
        analytics: AnalyticsClient,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            llm_client: Chat-completion client
            analytics: Analytics client for llm_request events
            settings: Application settings
        """
        self.llm_client = llm_client
        self.analytics = analytics
        self.settings = settings or get_settings()

    async def generate_artifact(
        self,
        artifact_type: str,
        project: ProjectData,
        api_config: ApiConfig,
        distinct_id: str = "anonymous",
    ) -> Artifact:
        """
        Generate an artifact, or refine one when api_config carries feedback.

        Trial users fall back to canned content when there is no server key
        or the provider call fails.

        Raises:
            ArtifactGenerationError: The provider call failed outside trial mode
        """
        refinement = api_config.is_refinement

        if api_config.mock_only:
            logger.warning("No default key for trial mode, returning mock response", artifact_type=artifact_type)
            started = time.perf_counter()
            artifact = self._mock_artifact(artifact_type, project, api_config)
            artifact.latency_ms = int((time.perf_counter() - started) * 1000)
            await self._capture_metrics(
                api_config, artifact_type, artifact.latency_ms, distinct_id, success=True
            )
            return artifact

        messages = build_messages(
            build_user_prompt(artifact_type, project),
            current_content=api_config.current_content,
            refinement_feedback=api_config.refinement_feedback,
        )

        logger.info(
            "Generating artifact",
            artifact_type=artifact_type,
            provider=api_config.provider.value,
            model=api_config.model,
            auth_method=api_config.auth_method.value,
            refinement=refinement,
        )

        started = time.perf_counter()
        try:
            result = await self.llm_client.complete(messages, api_config)
        except LLMProviderError as e:
            latency_ms = int((time.perf_counter() - started) * 1000)
            await self._capture_metrics(
                api_config, artifact_type, latency_ms, distinct_id, success=False, error_type=e.error_type
            )

            if api_config.is_trial:
                logger.warning(
                    "Trial generation failed, returning mock response",
                    artifact_type=artifact_type,
                    error=e.message,
                )
                return self._mock_artifact(artifact_type, project, api_config)

            logger.error(
                "Artifact generation failed",
                artifact_type=artifact_type,
                error_type=e.error_type.value,
                error=e.message,
            )
            raise ArtifactGenerationError(
                artifact_type=artifact_type,
                message=format_generation_error(
                    artifact_type, e.message, api_config.auth_method, refinement=refinement
                ),
                error_type=e.error_type,
            ) from e

        latency_ms = int((time.perf_counter() - started) * 1000)
        await self._capture_metrics(
            api_config, artifact_type, latency_ms, distinct_id, success=True, usage=result.usage
        )
        return self._to_artifact(artifact_type, api_config, result, latency_ms)

    async def refine(
        self,
        artifact: Artifact,
        feedback: str,
        project: ProjectData,
        api_config: ApiConfig,
        distinct_id: str = "anonymous",
    ) -> Artifact:
        """Refine an artifact in place and return it."""
        config = api_config.model_copy(
            update={"refinement_feedback": feedback, "current_content": artifact.content}
        )
        revised = await self.generate_artifact(artifact.artifact_type, project, config, distinct_id)
        artifact.refine(feedback, revised.content)
        artifact.usage = revised.usage
        artifact.latency_ms = revised.latency_ms
        artifact.mock = revised.mock
        return artifact

    def _mock_artifact(self, artifact_type: str, project: ProjectData, api_config: ApiConfig) -> Artifact:
        return Artifact(
            artifact_type=artifact_type,
            content=generate_mock_response(artifact_type, project),
            provider=api_config.provider.value,
            model=api_config.model,
            mock=True,
        )

    @staticmethod
    def _to_artifact(
        artifact_type: str,
        api_config: ApiConfig,
        result: ChatCompletionResult,
        latency_ms: int,
    ) -> Artifact:
        return Artifact(
            artifact_type=artifact_type,
            content=result.content,
            provider=api_config.provider.value,
            model=result.model,
            usage=result.usage,
            latency_ms=latency_ms,
        )

    async def _capture_metrics(
        self,
        api_config: ApiConfig,
        artifact_type: str,
        latency_ms: int,
        distinct_id: str,
        success: bool,
        error_type: Optional[ApiErrorType] = None,
        usage: Optional[TokenUsage] = None,
    ) -> None:
        await self.analytics.capture_llm_metrics(
            provider=api_config.provider.value,
            auth_method=api_config.auth_method.value,
            model=api_config.model,
            latency_ms=latency_ms,
            success=success,
            distinct_id=distinct_id,
            error_type=error_type.value if error_type else None,
            artifact_type=artifact_type,
            is_refinement=api_config.is_refinement,
            is_passphrase=api_config.is_passphrase,
            is_trial=api_config.is_trial,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            total_tokens=usage.total_tokens if usage else None,
        )
