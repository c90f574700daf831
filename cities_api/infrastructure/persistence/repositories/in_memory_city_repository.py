"""In-memory implementation of CityRepository for testing and local runs.
Follows Liskov Substitution Principle - can replace any CityRepository."""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from bson import ObjectId

from cities_api.core.exceptions import ConflictError
from cities_api.domain.entities.city import City
from cities_api.domain.repositories.city_repository import CityRepository
from cities_api.domain.value_objects.city_query import (
    Predicate,
    SortDirection,
    SortSpec,
    predicate_matches,
)
from cities_api.infrastructure.persistence.mongo import to_object_id


class InMemoryCityRepository(CityRepository):
    """In-memory implementation.

    Insertion order is the natural order, like an unsorted collection scan.
    Ids are ObjectId strings so both backends accept and reject the same ids.
    """

    def __init__(self):
        self._cities: Dict[str, City] = {}
        self._by_name: Dict[str, str] = {}

    def _matching(self, predicate: Predicate) -> List[City]:
        return [city for city in self._cities.values() if predicate_matches(predicate, city.to_dict())]

    async def count(self, predicate: Predicate) -> int:
        """Count matching cities."""
        return len(self._matching(predicate))

    async def find(
        self,
        predicate: Predicate,
        projection: Sequence[str] = (),
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        """Return one window of matching cities."""
        cities = self._matching(predicate)
        if sort is not None:
            cities.sort(
                key=lambda city: city.to_dict()[sort.field],
                reverse=sort.direction is SortDirection.DESC,
            )
        return [city.to_dict(projection) for city in cities[skip:skip + limit]]

    async def get_by_id(self, city_id: str) -> Optional[City]:
        """Get city by ID."""
        return self._cities.get(str(to_object_id(city_id)))

    async def insert(self, city: City) -> City:
        """Create new city."""
        if city.name in self._by_name:
            raise ConflictError(f"City with name '{city.name}' already exists")

        city.id = str(ObjectId())
        self._cities[city.id] = city
        self._by_name[city.name] = city.id
        return city

    async def update_by_id(self, city_id: str, fields: Mapping[str, Any]) -> Optional[City]:
        """Apply a partial update."""
        current = await self.get_by_id(city_id)
        if current is None:
            return None

        updated = current.apply_changes(fields)
        owner = self._by_name.get(updated.name)
        if owner is not None and owner != current.id:
            raise ConflictError(f"City with name '{updated.name}' already exists")

        del self._by_name[current.name]
        self._by_name[updated.name] = updated.id
        self._cities[updated.id] = updated
        return updated

    async def delete_by_id(self, city_id: str) -> Optional[City]:
        """Delete a city."""
        city = await self.get_by_id(city_id)
        if city is None:
            return None
        del self._cities[city.id]
        del self._by_name[city.name]
        return city
