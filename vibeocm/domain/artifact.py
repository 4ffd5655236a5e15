"""
Generated artifact domain model.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenUsage(BaseModel):
    """Token counts reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Revision(BaseModel):
    """A refinement applied to an artifact."""

    feedback: str
    previous_content: str
    created_at: datetime = Field(default_factory=_utcnow)


class Artifact(BaseModel):
    """An OCM deliverable generated for a session."""

    artifact_type: str = Field(..., description="e.g. Communication Plan")
    content: str = Field(..., description="Markdown content")

    provider: str = Field(..., description="Provider that produced the content")
    model: str = Field(..., description="Model that produced the content")
    mock: bool = Field(default=False, description="Canned trial content, not from an LLM")

    usage: Optional[TokenUsage] = None
    latency_ms: int = 0

    revisions: list[Revision] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def refine(self, feedback: str, content: str) -> None:
        """Replace the content and remember what it replaced."""
        self.revisions.append(Revision(feedback=feedback, previous_content=self.content))
        self.content = content
        self.updated_at = _utcnow()

    @property
    def revision_count(self) -> int:
        return len(self.revisions)
