"""
API dependencies for dependency injection.
"""

from typing import Optional

import httpx

from vibeocm.core.config import Settings, get_settings
from vibeocm.llm.client import ChatCompletionClient
from vibeocm.repositories.session_repo import InMemorySessionRepository
from vibeocm.services.analytics import AnalyticsClient
from vibeocm.services.artifact_service import ArtifactGenerator
from vibeocm.services.wizard_service import WizardService


class ServiceContainer:
    """
    Container for all application services.
    Provides singleton instances of services.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(
        self,
        settings: Optional[Settings] = None,
        llm_transport: Optional[httpx.AsyncBaseTransport] = None,
        analytics_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize all services.

        Transports replace the outbound HTTP layer, e.g. with
        httpx.MockTransport in tests.
        """
        if self._initialized:
            return

        self._settings = settings or get_settings()

        # Outbound clients
        self._llm_client = ChatCompletionClient(self._settings, transport=llm_transport)
        self._analytics = AnalyticsClient(self._settings, transport=analytics_transport)

        # Repositories
        self._session_repository = InMemorySessionRepository(ttl_hours=self._settings.session_ttl_hours)

        # Services
        self._artifact_generator = ArtifactGenerator(
            llm_client=self._llm_client,
            analytics=self._analytics,
            settings=self._settings,
        )
        self._wizard_service = WizardService(
            generator=self._artifact_generator,
            analytics=self._analytics,
            session_repository=self._session_repository,
            settings=self._settings,
        )

        self._initialized = True

    async def shutdown(self) -> None:
        """Close outbound clients and drop expired sessions."""
        if not self._initialized:
            return
        await self._wizard_service.cleanup_expired_sessions()
        await self._llm_client.close()
        await self._analytics.close()

    def reset(self) -> None:
        """Forget all services so the next access rebuilds them."""
        self._initialized = False

    @property
    def settings(self) -> Settings:
        self.initialize()
        return self._settings

    @property
    def wizard_service(self) -> WizardService:
        """Get the wizard service."""
        self.initialize()
        return self._wizard_service

    @property
    def artifact_generator(self) -> ArtifactGenerator:
        """Get the artifact generator."""
        self.initialize()
        return self._artifact_generator

    @property
    def analytics(self) -> AnalyticsClient:
        """Get the analytics client."""
        self.initialize()
        return self._analytics

    @property
    def session_repository(self) -> InMemorySessionRepository:
        self.initialize()
        return self._session_repository


# Singleton container instance
container = ServiceContainer.get_instance()


# Dependency functions for FastAPI
def get_wizard_service() -> WizardService:
    """Get the wizard service instance."""
    return container.wizard_service


def get_analytics() -> AnalyticsClient:
    """Get the analytics client instance."""
    return container.analytics


def get_app_settings() -> Settings:
    """Get the settings the services were built with."""
    return container.settings
