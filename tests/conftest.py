"""
Pytest configuration and fixtures.
"""

import json
from datetime import date
from typing import Any, AsyncGenerator, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from vibeocm.api.deps import container
from vibeocm.core.config import (
    AnalyticsSettings,
    GenerationSettings,
    SecuritySettings,
    Settings,
    TrialSettings,
)
from vibeocm.core.constants import AuthMethod
from vibeocm.domain.project import ProjectData, Stakeholder
from vibeocm.main import app

OPENAI_TEST_KEY = "sk-test-0123456789abcdefghij"


def build_settings(
    trial_key: str = "",
    hashed_passphrase: str = "",
    analytics_key: str = "",
    analytics_host: Optional[str] = None,
    max_retries: int = 3,
    backoff_seconds: float = 0.0,
) -> Settings:
    """Settings with explicit trial/passphrase/analytics config; no backoff unless asked."""
    return Settings().model_copy(
        update={
            "trial": TrialSettings.model_construct(default_mistral_api_key=trial_key),
            "generation": GenerationSettings.model_construct(
                max_retries=max_retries, backoff_seconds=backoff_seconds
            ),
            "security": SecuritySettings.model_construct(hashed_passphrase=hashed_passphrase),
            "analytics": AnalyticsSettings.model_construct(key=analytics_key, host=analytics_host),
        }
    )


class StubLLM:
    """
    httpx.MockTransport handler that imitates a chat-completion endpoint.

    The first `failures` requests get `fail_status`; later ones succeed.
    """

    def __init__(
        self,
        content: str = "# Generated Artifact\n\nContent from the stub model.",
        failures: int = 0,
        fail_status: int = 500,
        fail_body: Optional[dict[str, Any]] = None,
    ) -> None:
        self.content = content
        self.failures = failures
        self.fail_status = fail_status
        self.fail_body = fail_body if fail_body is not None else {"error": {"message": "Upstream exploded"}}
        self.requests: list[httpx.Request] = []

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.requests) <= self.failures:
            return httpx.Response(self.fail_status, json=self.fail_body)
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-test",
                "model": "stub-model",
                "choices": [
                    {"index": 0, "message": {"role": "assistant", "content": self.content}}
                ],
                "usage": {"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
            },
        )


@pytest.fixture
def settings() -> Settings:
    return build_settings()


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def project() -> ProjectData:
    """A fully filled-in project."""
    return ProjectData(
        name="CRM Migration",
        goal="Move the sales team from spreadsheets to a shared CRM",
        start_date=date(2025, 1, 6),
        end_date=date(2025, 6, 30),
        stakeholders=[
            Stakeholder(role="Sales Representatives", impact="High - daily workflow changes"),
            Stakeholder(role="Sales Managers", impact="Medium - new reporting"),
        ],
        impacted_users=250,
        org_benefits="Single source of truth for customer data",
        user_benefits="Less manual data entry",
        challenges="Resistance to change from long-tenured staff",
    )


@pytest.fixture
async def async_client(settings: Settings, stub_llm: StubLLM) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    container.reset()
    container.initialize(settings=settings, llm_transport=httpx.MockTransport(stub_llm))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    await container.shutdown()
    container.reset()


@pytest.fixture
def openai_credentials() -> dict[str, str]:
    return {"auth_method": AuthMethod.OPENAI.value, "api_key": OPENAI_TEST_KEY}


@pytest.fixture
def project_basics_payload() -> dict[str, str]:
    return {
        "name": "CRM Migration",
        "goal": "Move the sales team from spreadsheets to a shared CRM",
        "start_date": "2025-01-06",
        "end_date": "2025-06-30",
    }


@pytest.fixture
def stakeholders_payload() -> dict[str, Any]:
    return {
        "stakeholders": [
            {"role": "Sales Representatives", "impact": "High - daily workflow changes"},
        ],
        "impacted_users": 250,
    }


@pytest.fixture
def benefits_payload() -> dict[str, str]:
    return {
        "org_benefits": "Single source of truth for customer data",
        "user_benefits": "Less manual data entry",
        "challenges": "Resistance to change from long-tenured staff",
    }


@pytest.fixture
def settings_factory() -> Any:
    """build_settings, for tests that need trial, passphrase or analytics config."""
    return build_settings


@pytest.fixture
def stub_llm_factory() -> Any:
    """StubLLM class, for tests that need scripted failures."""
    return StubLLM
