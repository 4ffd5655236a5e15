"""
Artifact generation, refinement and download endpoints.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from vibeocm.api.deps import get_wizard_service
from vibeocm.core.constants import ALL_ARTIFACTS
from vibeocm.core.logging import get_logger
from vibeocm.services.wizard_service import WizardService

logger = get_logger(__name__)

router = APIRouter()


class GenerateArtifactRequest(BaseModel):
    """Request to generate one artifact."""

    artifact_type: str = Field(..., description="One of /artifact-types, or any custom name")


class RefineArtifactRequest(BaseModel):
    """Request to refine the selected artifact."""

    feedback: str


class ArtifactSummary(BaseModel):
    """List item for generated artifacts."""

    artifact_type: str
    provider: str
    model: str
    mock: bool
    revisions: int
    latency_ms: int
    total_tokens: Optional[int] = None
    updated_at: str


class ArtifactListResponse(BaseModel):
    artifacts: list[ArtifactSummary]
    selected_artifact: Optional[str] = None
    total: int


def _attachment(file_name: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{file_name}"'}


@router.get("/artifact-types")
async def list_artifact_types() -> dict[str, list[str]]:
    """Built-in artifact types, in generation order."""
    return {"artifact_types": ALL_ARTIFACTS}


@router.post("/sessions/{session_id}/artifacts")
async def generate_artifact(
    session_id: str,
    request: GenerateArtifactRequest,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """
    Generate an artifact and move to the results step.
    """
    logger.info("Artifact requested", session_id=session_id, artifact_type=request.artifact_type)
    session = await wizard.select_artifact(session_id, request.artifact_type)
    return session.to_view()


@router.post("/sessions/{session_id}/artifacts/refine")
async def refine_artifact(
    session_id: str,
    request: RefineArtifactRequest,
    wizard: WizardService = Depends(get_wizard_service),
) -> dict[str, Any]:
    """Revise the selected artifact with free-text feedback."""
    session = await wizard.refine(session_id, request.feedback)
    return session.to_view()


@router.post("/sessions/{session_id}/artifacts/generate-all")
async def generate_all_artifacts(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> Response:
    """
    Generate every built-in artifact and download them as one ZIP.
    """
    logger.info("Generating all artifacts", session_id=session_id)
    archive, file_name = await wizard.generate_all(session_id)
    return Response(content=archive, media_type="application/zip", headers=_attachment(file_name))


@router.get("/sessions/{session_id}/artifacts", response_model=ArtifactListResponse)
async def list_artifacts(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> ArtifactListResponse:
    session = await wizard.get_session(session_id)
    items = [
        ArtifactSummary(
            artifact_type=artifact.artifact_type,
            provider=artifact.provider,
            model=artifact.model,
            mock=artifact.mock,
            revisions=artifact.revision_count,
            latency_ms=artifact.latency_ms,
            total_tokens=artifact.usage.total_tokens if artifact.usage else None,
            updated_at=artifact.updated_at.isoformat(),
        )
        for artifact in session.artifacts.values()
    ]
    return ArtifactListResponse(
        artifacts=items,
        selected_artifact=session.selected_artifact,
        total=len(items),
    )


@router.get("/sessions/{session_id}/artifacts/download")
async def download_all_artifacts(
    session_id: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> Response:
    """ZIP of the artifacts generated so far."""
    archive, file_name = await wizard.download_all(session_id)
    return Response(content=archive, media_type="application/zip", headers=_attachment(file_name))


@router.get("/sessions/{session_id}/artifacts/{artifact_type}/download")
async def download_artifact(
    session_id: str,
    artifact_type: str,
    wizard: WizardService = Depends(get_wizard_service),
) -> Response:
    """One artifact as a Markdown file."""
    content, file_name = await wizard.download_artifact(session_id, artifact_type)
    return Response(
        content=content,
        media_type="text/markdown; charset=utf-8",
        headers=_attachment(file_name),
    )
