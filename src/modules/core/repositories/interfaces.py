"""Persistence contract shared by the order and pricing stores.

Services receive an implementation through their constructor, so unit tests
can swap the ORM store for an in-memory one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

EntityT = TypeVar("EntityT")


class IRepository(ABC, Generic[EntityT]):
    @abstractmethod
    def get_by_id(self, id: str) -> Optional[EntityT]:
        """Return the entity, or ``None`` for unknown or malformed ids."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[EntityT]: ...

    @abstractmethod
    def save(self, entity: EntityT) -> EntityT: ...

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove the entity; ``False`` when nothing matched."""
