"""Use case: Delete a city."""
from typing import Optional

from cities_api.domain.entities.city import City
from cities_api.domain.repositories.city_repository import CityRepository


class DeleteCityUseCase:
    """Hard-delete a city by id."""

    def __init__(self, city_repository: CityRepository):
        self._city_repo = city_repository

    async def execute(self, city_id: str) -> Optional[City]:
        """Return the deleted city, or None if no city has this id."""
        return await self._city_repo.delete_by_id(city_id)
