"""
Browser-facing configuration endpoints.

Response keys are camelCase to match what the web client reads.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from vibeocm.api.deps import get_app_settings
from vibeocm.core.config import Settings
from vibeocm.core.logging import get_logger
from vibeocm.services.error_logger import log_error

logger = get_logger(__name__)

router = APIRouter()


class EnvResponse(BaseModel):
    """Public environment flags."""

    trialAvailable: bool


class TrialStatusResponse(BaseModel):
    available: bool
    message: str


class AnalyticsConfigResponse(BaseModel):
    """Analytics settings safe to expose. The key is never returned."""

    enabled: bool
    host: Optional[str] = None


class ClientErrorReport(BaseModel):
    """Error reported by the browser."""

    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(default="client", max_length=200)
    error: str = Field(..., min_length=1, max_length=10_000)
    stack_trace: Optional[str] = Field(default=None, alias="stackTrace", max_length=50_000)
    metadata: dict[str, Any] = Field(default_factory=dict)


@router.get("/env", response_model=EnvResponse)
async def get_env(settings: Settings = Depends(get_app_settings)) -> EnvResponse:
    """Whether trial mode has a server key to run on."""
    return EnvResponse(trialAvailable=settings.trial.available)


@router.get("/check-trial", response_model=TrialStatusResponse)
async def check_trial(settings: Settings = Depends(get_app_settings)) -> TrialStatusResponse:
    available = settings.trial.available
    return TrialStatusResponse(
        available=available,
        message="Trial mode is available" if available else "Trial mode is not available",
    )


@router.get("/analytics/config", response_model=AnalyticsConfigResponse)
async def analytics_config(settings: Settings = Depends(get_app_settings)) -> AnalyticsConfigResponse:
    return AnalyticsConfigResponse(
        enabled=settings.analytics.enabled,
        host=settings.analytics.host,
    )


@router.post("/log-error")
async def report_client_error(report: ClientErrorReport) -> dict[str, Any]:
    """Write a browser error report to the structured log."""
    entry = log_error(
        report.error,
        report.context,
        stack_trace=report.stack_trace,
        source="client",
        metadata=report.metadata,
    )
    return {"logged": True, "timestamp": entry["timestamp"]}
