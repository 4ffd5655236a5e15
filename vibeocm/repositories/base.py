"""
Repository interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Keyed storage for entities that expire when left idle.
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[T]:
        """Get an entity by ID, or None if it is missing or expired."""
        ...

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Insert or replace an entity and mark it as recently used."""
        ...

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete an entity by ID. Returns whether it existed."""
        ...

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Drop expired entities; return how many."""
        ...
