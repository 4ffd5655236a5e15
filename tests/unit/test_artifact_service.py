"""
Unit tests for artifact generation, refinement and trial fallback.
"""

import json
from typing import Any

import httpx
import pytest

from vibeocm.core.config import Settings
from vibeocm.core.constants import ApiErrorType, ArtifactType, AuthMethod
from vibeocm.core.exceptions import ArtifactGenerationError
from vibeocm.domain.project import Credentials, ProjectData
from vibeocm.llm import ChatCompletionClient, resolve_api_config
from vibeocm.services.analytics import AnalyticsClient
from vibeocm.services.artifact_service import ArtifactGenerator, format_generation_error

CHANGE_PLAN = ArtifactType.CHANGE_PLAN.value


class RecordingAnalytics(AnalyticsClient):
    """Analytics client that keeps events in memory."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def capture_event(self, event: str, properties: Any = None, distinct_id: str = "anonymous") -> bool:
        self.events.append((event, dict(properties or {})))
        return True


def _generator(settings: Settings, stub: Any) -> tuple[ArtifactGenerator, RecordingAnalytics]:
    analytics = RecordingAnalytics(settings)
    client = ChatCompletionClient(settings, transport=httpx.MockTransport(stub))
    return ArtifactGenerator(client, analytics, settings), analytics


@pytest.mark.asyncio
async def test_generate_records_usage_and_metrics(settings: Settings, stub_llm: Any, project: ProjectData) -> None:
    generator, analytics = _generator(settings, stub_llm)
    config = resolve_api_config(
        Credentials(auth_method="openai", api_key="sk-test-0123456789abcdefghij"), settings=settings
    )

    artifact = await generator.generate_artifact(CHANGE_PLAN, project, config)

    assert artifact.artifact_type == CHANGE_PLAN
    assert artifact.content.startswith("# Generated Artifact")
    assert artifact.provider == "openai"
    assert artifact.model == "stub-model"
    assert not artifact.mock
    assert artifact.usage is not None and artifact.usage.total_tokens == 200

    sent = stub_llm.payloads[0]["messages"]
    assert "CRM Migration" in sent[1]["content"]

    event, properties = analytics.events[-1]
    assert event == "llm_request"
    assert properties["success"] is True
    assert properties["artifact_type"] == CHANGE_PLAN
    assert properties["total_tokens"] == 200
    assert properties["is_refinement"] is False


@pytest.mark.asyncio
async def test_failure_message_includes_key_tip(
    settings: Settings, stub_llm_factory: Any, project: ProjectData
) -> None:
    stub = stub_llm_factory(failures=10, fail_status=401, fail_body={"error": {"message": "Incorrect API key"}})
    generator, analytics = _generator(settings, stub)
    config = resolve_api_config(
        Credentials(auth_method="openai", api_key="sk-test-0123456789abcdefghij"), settings=settings
    )

    with pytest.raises(ArtifactGenerationError) as exc_info:
        await generator.generate_artifact(CHANGE_PLAN, project, config)

    error = exc_info.value
    assert error.message.startswith(
        "Failed to generate Organizational Change Plan. "
        "Failed to call OpenAI API after 3 attempts: Incorrect API key"
    )
    assert error.message.endswith(
        "Make sure you're using a valid OpenAI API key from https://platform.openai.com/api-keys"
    )
    assert error.error_type is ApiErrorType.AUTH_ERROR

    event, properties = analytics.events[-1]
    assert properties["success"] is False
    assert properties["error_type"] == "auth_error"


def test_tips_only_for_own_keys() -> None:
    mistral = format_generation_error("Communication Plan", "boom", AuthMethod.MISTRAL)
    assert mistral.endswith("https://console.mistral.ai/api-keys/")
    passphrase = format_generation_error("Communication Plan", "boom", AuthMethod.PASSPHRASE, refinement=True)
    assert passphrase == "Failed to refine Communication Plan. boom"


@pytest.mark.asyncio
async def test_trial_without_key_returns_mock(settings: Settings, stub_llm: Any, project: ProjectData) -> None:
    generator, analytics = _generator(settings, stub_llm)
    config = resolve_api_config(Credentials(auth_method="trial"), settings=settings)

    artifact = await generator.generate_artifact(ArtifactType.COMMUNICATION_PLAN.value, project, config)

    assert artifact.mock
    assert artifact.content.startswith("# Communication Plan for CRM Migration")
    assert stub_llm.requests == []

    assert len(analytics.events) == 1
    event, properties = analytics.events[0]
    assert event == "llm_request"
    assert properties["success"] is True
    assert properties["is_trial"] is True
    assert properties["provider"] == "mistral"
    assert properties["artifact_type"] == "Communication Plan"
    assert properties["latency_ms"] >= 0


@pytest.mark.asyncio
async def test_trial_failure_falls_back_to_mock(
    settings_factory: Any, stub_llm_factory: Any, project: ProjectData
) -> None:
    settings = settings_factory(trial_key="server-mistral-key")
    stub = stub_llm_factory(failures=10, fail_status=500)
    generator, analytics = _generator(settings, stub)
    config = resolve_api_config(Credentials(auth_method="trial"), settings=settings)

    artifact = await generator.generate_artifact(ArtifactType.COMMUNICATION_PLAN.value, project, config)

    assert artifact.mock
    assert artifact.content.startswith("# Communication Plan for CRM Migration")
    assert len(stub.requests) == 3
    assert analytics.events[-1][1]["is_trial"] is True


@pytest.mark.asyncio
async def test_refine_appends_revision(settings: Settings, stub_llm_factory: Any, project: ProjectData) -> None:
    stub = stub_llm_factory(content="# Revised plan")
    generator, analytics = _generator(settings, stub)
    config = resolve_api_config(
        Credentials(auth_method="openai", api_key="sk-test-0123456789abcdefghij"), settings=settings
    )
    artifact = await generator.generate_artifact(CHANGE_PLAN, project, config)
    original = artifact.content

    await generator.refine(artifact, "Add a budget section", project, config)

    assert artifact.content == "# Revised plan"
    assert artifact.revision_count == 1
    assert artifact.revisions[0].feedback == "Add a budget section"
    assert artifact.revisions[0].previous_content == original

    messages = json.loads(stub.requests[-1].content)["messages"]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"].endswith("feedback: Add a budget section")
    assert analytics.events[-1][1]["is_refinement"] is True
