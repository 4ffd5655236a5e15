"""
Wizard session endpoints.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from vibeocm.api.deps import get_wizard_service
from vibeocm.core.logging import get_logger
from vibeocm.domain.project import (
    BenefitsForm,
    Credentials,
    ProjectBasicsForm,
    StakeholdersForm,
)
from vibeocm.services.wizard_service import WizardService

logger = get_logger(__name__)

router = APIRouter()


class CreateSessionRequest(BaseModel):
    """Optional client metadata, e.g. referrer or UI version."""

    metadata: Optional[dict[str, Any]] = None


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """
    Start a wizard session. The session begins on the api-key step.
    """
    session = await wizard.create_session(metadata=request.metadata if request else None)
    return session.to_view()


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """Current state of a session. API keys are masked."""
    session = await wizard.get_session(session_id)
    return session.to_view()


@router.post("/sessions/{session_id}/auth")
async def submit_auth(
    session_id: str,
    credentials: Credentials,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """
    Submit an API key, the shared passphrase, or choose trial mode.
    """
    logger.info("Credentials submitted", session_id=session_id, auth_method=credentials.auth_method.value)
    session = await wizard.submit_auth(session_id, credentials)
    return session.to_view()


@router.post("/sessions/{session_id}/project-basics")
async def submit_project_basics(
    session_id: str,
    form: ProjectBasicsForm,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    session = await wizard.submit_project_basics(session_id, form)
    return session.to_view()


@router.post("/sessions/{session_id}/stakeholders")
async def submit_stakeholders(
    session_id: str,
    form: StakeholdersForm,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    session = await wizard.submit_stakeholders(session_id, form)
    return session.to_view()


@router.post("/sessions/{session_id}/benefits")
async def submit_benefits(
    session_id: str,
    form: BenefitsForm,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    session = await wizard.submit_benefits(session_id, form)
    return session.to_view()


@router.post("/sessions/{session_id}/back")
async def go_back(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """Return to the previous step. Does nothing on the first step."""
    session = await wizard.go_back(session_id)
    return session.to_view()


@router.post("/sessions/{session_id}/start-over")
async def start_over(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """Pick another artifact to generate. Project details are kept."""
    session = await wizard.start_over(session_id)
    return session.to_view()
