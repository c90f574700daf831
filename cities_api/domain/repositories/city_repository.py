"""City repository interface - abstraction for data access."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from cities_api.domain.entities.city import City
from cities_api.domain.value_objects.city_query import Predicate, SortSpec


class CityRepository(ABC):
    """Repository interface for City entity.

    Implementations raise ``ValidationError`` for malformed ids,
    ``ConflictError`` when a write would duplicate a name and
    ``StorageError`` for backend failures. Not-found is reported as
    ``None``, never raised.
    """

    async def ensure_indexes(self) -> None:
        """Create whatever the store needs to enforce its invariants."""

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Count cities matching the predicate, ignoring pagination."""
        pass

    @abstractmethod
    async def find(
        self,
        predicate: Predicate,
        projection: Sequence[str] = (),
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """Return one window of matching cities as projected documents.

        Each document carries ``id`` plus the projected fields (all fields
        when the projection is empty).
        """
        pass

    @abstractmethod
    async def get_by_id(self, city_id: str) -> Optional[City]:
        """Get city by ID."""
        pass

    @abstractmethod
    async def insert(self, city: City) -> City:
        """Persist a new city and return it with its assigned id."""
        pass

    @abstractmethod
    async def update_by_id(self, city_id: str, fields: Mapping[str, Any]) -> Optional[City]:
        """Apply a partial update; return the updated city or None."""
        pass

    @abstractmethod
    async def delete_by_id(self, city_id: str) -> Optional[City]:
        """Delete a city; return the removed city or None."""
        pass
