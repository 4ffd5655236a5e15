"""
System-wide constants for VibeOCM.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class ApiProvider(str, Enum):
    """LLM providers that can generate artifacts."""

    OPENAI = "openai"
    MISTRAL = "mistral"


class AuthMethod(str, Enum):
    """How the user authenticated in the api-key step."""

    OPENAI = "openai"
    MISTRAL = "mistral"
    PASSPHRASE = "passphrase"
    TRIAL = "trial"

    @property
    def uses_default_key(self) -> bool:
        """Passphrase and trial users run on the server's Mistral key."""
        return self in (AuthMethod.PASSPHRASE, AuthMethod.TRIAL)

    @property
    def provider(self) -> ApiProvider:
        if self is AuthMethod.OPENAI:
            return ApiProvider.OPENAI
        return ApiProvider.MISTRAL


class WizardStep(str, Enum):
    """Sections of the wizard, in display order."""

    HERO = "hero"
    API_KEY = "api-key"
    PROJECT_BASICS = "project-basics"
    STAKEHOLDERS = "stakeholders"
    BENEFITS = "benefits"
    ARTIFACT_SELECTION = "artifact-selection"
    RESULTS = "results"
    REFINEMENT = "refinement"


class ApiErrorType(str, Enum):
    """Classification of chat-completion failures."""

    AUTH_ERROR = "auth_error"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN_ERROR = "unknown_error"


class ArtifactType(str, Enum):
    """Built-in OCM deliverables."""

    CHANGE_PLAN = "Organizational Change Plan"
    COMMUNICATION_PLAN = "Communication Plan"
    COMMUNICATION_TEMPLATES = "Communication Message Templates"
    STAKEHOLDER_STRATEGY = "Stakeholder Engagement Strategy"
    FEEDBACK_SURVEY = "Feedback Survey Templates"


class MessageRole(str, Enum):
    """Chat message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# API Constants
# =============================================================================

API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"
CONFIG_PREFIX = "/api"

# =============================================================================
# Generation Constants
# =============================================================================

# Generation order for "generate all"
ALL_ARTIFACTS = [artifact.value for artifact in ArtifactType]

REFINEMENT_INSTRUCTION = "Please refine the above content based on this feedback: {feedback}"

PROVIDER_DISPLAY_NAMES = {
    ApiProvider.OPENAI: "OpenAI",
    ApiProvider.MISTRAL: "Mistral",
}

API_KEY_URLS = {
    ApiProvider.OPENAI: "https://platform.openai.com/api-keys",
    ApiProvider.MISTRAL: "https://console.mistral.ai/api-keys/",
}

# =============================================================================
# Validation Constants
# =============================================================================

OPENAI_KEY_PREFIX = "sk-"
OPENAI_KEY_MIN_LENGTH = 20
MISTRAL_KEY_MIN_LENGTH = 8

# =============================================================================
# Packaging
# =============================================================================

ARTIFACT_FILE_SUFFIX = ".md"
ERROR_FILE_SUFFIX = "-ERROR.md"
ZIP_FILE_SUFFIX = "-ocm-artifacts.zip"
