"""
Health check endpoints.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from vibeocm.api.deps import get_app_settings
from vibeocm.core.config import Settings
from vibeocm.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """
    Basic health check endpoint.
    Returns application status.
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """
    Readiness check endpoint.

    Reports which generation paths are configured. Only the app itself is
    required; users can always bring their own key.
    """
    checks = {
        "app": True,
        "trial_key": settings.trial.available,
        "passphrase": bool(settings.security.hashed_passphrase),
        "analytics": settings.analytics.enabled,
    }

    return {
        "status": "ready" if checks["app"] else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness check endpoint.
    Simple check that the application is running.
    """
    return {"status": "alive"}
