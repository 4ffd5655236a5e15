"""
Repository implementations for data access.
"""

from vibeocm.repositories.base import BaseRepository
from vibeocm.repositories.session_repo import InMemorySessionRepository

__all__ = [
    "BaseRepository",
    "InMemorySessionRepository",
]
