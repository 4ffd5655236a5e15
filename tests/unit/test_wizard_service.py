"""
Unit tests for WizardService session lifetime and start-over.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator

import httpx
import pytest

from vibeocm.core.config import Settings
from vibeocm.core.constants import WizardStep
from vibeocm.core.exceptions import SessionNotFoundError, WizardStepError
from vibeocm.llm import ChatCompletionClient
from vibeocm.services.analytics import AnalyticsClient, AnalyticsEvent
from vibeocm.services.artifact_service import ArtifactGenerator
from vibeocm.services.wizard_service import WizardService


class EventLog(AnalyticsClient):
    """Keeps (event, properties) pairs instead of sending them."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def capture_event(self, event: str, properties: Any = None, distinct_id: str = "anonymous") -> bool:
        self.events.append((event, dict(properties or {})))
        return True

    def named(self, event: str) -> list[dict[str, Any]]:
        return [properties for name, properties in self.events if name == event]


@pytest.fixture
def events(settings: Settings) -> EventLog:
    return EventLog(settings)


@pytest.fixture
async def wizard(settings: Settings, stub_llm: Any, events: EventLog) -> AsyncGenerator[WizardService, None]:
    client = ChatCompletionClient(settings, transport=httpx.MockTransport(stub_llm))
    yield WizardService(ArtifactGenerator(client, events, settings), events, settings=settings)
    await client.close()


class TestSessionLifetime:
    @pytest.mark.asyncio
    async def test_idle_session_past_ttl_is_not_found(self, wizard: WizardService) -> None:
        session = await wizard.create_session()
        session.updated_at = datetime.now(timezone.utc) - timedelta(hours=48)

        with pytest.raises(SessionNotFoundError):
            await wizard.get_session(session.session_id)

    @pytest.mark.asyncio
    async def test_active_session_is_returned(self, wizard: WizardService) -> None:
        session = await wizard.create_session()
        session.updated_at = datetime.now(timezone.utc) - timedelta(hours=23)

        assert await wizard.get_session(session.session_id) is session

    @pytest.mark.asyncio
    async def test_creating_a_session_drops_expired_ones(self, wizard: WizardService) -> None:
        stale = await wizard.create_session()
        stale.updated_at = datetime.now(timezone.utc) - timedelta(hours=25)

        await wizard.create_session()

        assert await wizard.session_repository.delete(stale.session_id) is False


class TestStartOver:
    @pytest.mark.asyncio
    async def test_from_results_clears_selection(self, wizard: WizardService, events: EventLog) -> None:
        session = await wizard.create_session()
        session.move_to(WizardStep.RESULTS)
        session.selected_artifact = "Communication Plan"

        session = await wizard.start_over(session.session_id)

        assert session.current_step is WizardStep.ARTIFACT_SELECTION
        assert session.selected_artifact is None
        assert events.named(AnalyticsEvent.GENERATE_ANOTHER) == [
            {"previous_artifact": "Communication Plan"}
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("step", [WizardStep.PROJECT_BASICS, WizardStep.REFINEMENT])
    async def test_rejected_steps_are_not_counted(
        self, wizard: WizardService, events: EventLog, step: WizardStep
    ) -> None:
        session = await wizard.create_session()
        session.move_to(step)

        with pytest.raises(WizardStepError) as exc_info:
            await wizard.start_over(session.session_id)

        assert exc_info.value.details["current_step"] == step.value
        assert session.current_step is step
        assert events.named(AnalyticsEvent.GENERATE_ANOTHER) == []
