"""
Wizard session storage.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from vibeocm.core.logging import get_logger
from vibeocm.domain.session import WizardSession
from vibeocm.repositories.base import BaseRepository

logger = get_logger(__name__)


class InMemorySessionRepository(BaseRepository[WizardSession]):
    """
    Sessions kept in process memory. They do not survive a restart.

    A session idle for longer than ttl_hours is treated as gone.
    """

    def __init__(self, ttl_hours: int = 24) -> None:
        self.ttl = timedelta(hours=ttl_hours)
        self._sessions: dict[str, WizardSession] = {}

    def _is_expired(self, session: WizardSession) -> bool:
        return session.updated_at < datetime.now(timezone.utc) - self.ttl

    async def get(self, id: str) -> Optional[WizardSession]:
        """Get a session by ID; expired sessions are dropped."""
        session = self._sessions.get(id)
        if session is not None and self._is_expired(session):
            del self._sessions[id]
            logger.info("Session expired", session_id=id)
            return None
        return session

    async def save(self, entity: WizardSession) -> WizardSession:
        """Save a session."""
        entity.touch()
        self._sessions[entity.session_id] = entity
        logger.debug("Session saved", session_id=entity.session_id, step=entity.current_step.value)
        return entity

    async def delete(self, id: str) -> bool:
        """Delete a session by ID."""
        if id in self._sessions:
            del self._sessions[id]
            logger.debug("Session deleted", session_id=id)
            return True
        return False

    async def cleanup_expired(self) -> int:
        """Remove every session idle for longer than the TTL."""
        expired_ids = [
            session_id
            for session_id, session in self._sessions.items()
            if self._is_expired(session)
        ]

        for session_id in expired_ids:
            del self._sessions[session_id]

        if expired_ids:
            logger.info("Cleaned up expired sessions", count=len(expired_ids))

        return len(expired_ids)
