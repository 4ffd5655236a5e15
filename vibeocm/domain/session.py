"""
Wizard session domain model.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from vibeocm.core.constants import WizardStep
from vibeocm.core.security import mask_api_key
from vibeocm.domain.artifact import Artifact
from vibeocm.domain.project import Credentials, ProjectData


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StepVisit(BaseModel):
    """An entry in the step history."""

    step: WizardStep
    entered_at: datetime = Field(default_factory=_utcnow)


class BulkProgress(BaseModel):
    """Progress of a generate-all run."""

    running: bool = False
    percent: float = 0.0
    current_artifact: Optional[str] = None
    completed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)


class WizardSession(BaseModel):
    """Server-side state of one user's pass through the wizard."""

    session_id: str = Field(..., description="Unique session identifier")
    current_step: WizardStep = Field(default=WizardStep.HERO)
    history: list[StepVisit] = Field(default_factory=list)

    credentials: Optional[Credentials] = None
    project: ProjectData = Field(default_factory=ProjectData)

    artifacts: dict[str, Artifact] = Field(default_factory=dict)
    selected_artifact: Optional[str] = None
    bulk: BulkProgress = Field(default_factory=BulkProgress)

    last_error: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def move_to(self, step: WizardStep) -> None:
        """Record entering a step. Transition rules live in the state machine."""
        self.current_step = step
        self.history.append(StepVisit(step=step))
        self.touch()

    def touch(self) -> None:
        self.updated_at = _utcnow()

    def set_error(self, message: Optional[str]) -> None:
        self.last_error = message
        self.touch()

    def store_artifact(self, artifact: Artifact) -> None:
        self.artifacts[artifact.artifact_type] = artifact
        self.selected_artifact = artifact.artifact_type
        self.touch()

    @property
    def selected(self) -> Optional[Artifact]:
        if self.selected_artifact is None:
            return None
        return self.artifacts.get(self.selected_artifact)

    @property
    def furthest_step(self) -> WizardStep:
        """Latest step in wizard order that the session has entered."""
        order = list(WizardStep)
        visited = [visit.step for visit in self.history] or [self.current_step]
        return max(visited, key=order.index)

    @property
    def distinct_id(self) -> str:
        """Identifier used for analytics events."""
        return self.session_id

    def to_view(self) -> dict[str, Any]:
        """Public representation; secrets are masked or omitted."""
        credentials = None
        if self.credentials:
            credentials = {
                "auth_method": self.credentials.auth_method.value,
                "provider": self.credentials.provider.value,
                "api_key": mask_api_key(self.credentials.api_key_value),
            }
        selected = self.selected
        return {
            "session_id": self.session_id,
            "current_step": self.current_step.value,
            "furthest_step": self.furthest_step.value,
            "credentials": credentials,
            "project": self.project.model_dump(mode="json"),
            "artifacts": sorted(self.artifacts),
            "selected_artifact": self.selected_artifact,
            "content": selected.content if selected else None,
            "progress": self.bulk.model_dump(),
            "error": self.last_error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
