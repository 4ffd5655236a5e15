"""
Service layer implementations.
"""

from vibeocm.services.analytics import AnalyticsClient, AnalyticsEvent
from vibeocm.services.artifact_service import ArtifactGenerator
from vibeocm.services.error_logger import log_error
from vibeocm.services.wizard_service import WizardService

__all__ = [
    "AnalyticsClient",
    "AnalyticsEvent",
    "ArtifactGenerator",
    "WizardService",
    "log_error",
]
