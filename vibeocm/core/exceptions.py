"""
Custom exception hierarchy for VibeOCM.
Provides structured error handling with proper HTTP status codes.
"""

from typing import Any, Optional

from vibeocm.core.constants import ApiErrorType


class VibeOCMError(Exception):
    """Base exception for all VibeOCM errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors (500)
# =============================================================================


class ConfigurationError(VibeOCMError):
    """Error in application configuration."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(VibeOCMError):
    """Request validation failed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
            status_code=400,
        )


class InvalidRequestError(ValidationError):
    """Invalid request parameters."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message=message, details=details)
        self.code = "INVALID_REQUEST"


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class AuthenticationError(VibeOCMError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
        )


class InvalidPassphraseError(AuthenticationError):
    """Passphrase did not match the configured hash."""

    def __init__(self) -> None:
        super().__init__("Invalid passphrase. Please try again.")
        self.code = "INVALID_PASSPHRASE"


# =============================================================================
# Not Found Errors (404)
# =============================================================================


class NotFoundError(VibeOCMError):
    """Requested resource not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        msg = message or f"{resource_type} not found"
        if resource_id and not message:
            msg = f"{resource_type} with ID '{resource_id}' not found"

        super().__init__(
            message=msg,
            code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
            status_code=404,
        )


class SessionNotFoundError(NotFoundError):
    """Wizard session not found or expired."""

    def __init__(self, session_id: str) -> None:
        super().__init__(resource_type="Session", resource_id=session_id)
        self.code = "SESSION_NOT_FOUND"


class ArtifactNotFoundError(NotFoundError):
    """No generated artifact of the requested type."""

    def __init__(self, artifact_type: str) -> None:
        super().__init__(
            resource_type="Artifact",
            resource_id=artifact_type,
            message=f"No generated artifact named '{artifact_type}'",
        )
        self.code = "ARTIFACT_NOT_FOUND"


# =============================================================================
# Workflow Errors (409)
# =============================================================================


class WizardStepError(VibeOCMError):
    """Action not allowed at the session's current wizard step."""

    def __init__(
        self,
        current_step: str,
        requested: str,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=message or f"Cannot go to '{requested}' from step '{current_step}'",
            code="INVALID_STEP",
            details={"current_step": current_step, "requested": requested},
            status_code=409,
        )


# =============================================================================
# External Service Errors (502)
# =============================================================================


class ExternalServiceError(VibeOCMError):
    """Error communicating with external service."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="EXTERNAL_SERVICE_ERROR",
            details={"service": service_name, **(details or {})},
            status_code=502,
        )


class LLMProviderError(ExternalServiceError):
    """A chat-completion call failed."""

    def __init__(
        self,
        provider: str,
        message: str,
        error_type: ApiErrorType = ApiErrorType.UNKNOWN_ERROR,
        status: Optional[int] = None,
    ) -> None:
        details: dict[str, Any] = {"error_type": error_type.value}
        if status is not None:
            details["status"] = status
        super().__init__(service_name=provider, message=message, details=details)
        # Surfaced to users as-is, without the service prefix
        self.message = message
        self.args = (message,)
        self.provider = provider
        self.error_type = error_type
        self.status = status
        self.code = "LLM_PROVIDER_ERROR"


class ArtifactGenerationError(VibeOCMError):
    """Generating or refining an artifact failed; message is user-facing."""

    def __init__(
        self,
        artifact_type: str,
        message: str,
        error_type: ApiErrorType = ApiErrorType.UNKNOWN_ERROR,
    ) -> None:
        super().__init__(
            message=message,
            code="ARTIFACT_GENERATION_FAILED",
            details={"artifact_type": artifact_type, "error_type": error_type.value},
            status_code=502,
        )
        self.artifact_type = artifact_type
        self.error_type = error_type


class AnalyticsError(ExternalServiceError):
    """Analytics capture failed. Logged, never returned to clients."""

    def __init__(self, message: str) -> None:
        super().__init__(service_name="PostHog", message=message)
        self.code = "ANALYTICS_ERROR"
