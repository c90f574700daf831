"""Use case: Create a city."""
import logging
from typing import Any, Mapping

from cities_api.domain.entities.city import City
from cities_api.domain.repositories.city_repository import CityRepository

logger = logging.getLogger(__name__)


class CreateCityUseCase:
    """Validate a payload and persist it as a new city."""

    def __init__(self, city_repository: CityRepository):
        self._city_repo = city_repository

    async def execute(self, payload: Mapping[str, Any]) -> City:
        """Execute use case to create a city.

        Args:
            payload: Untyped city fields from the request body

        Returns:
            The stored city, with its assigned id

        Raises:
            ValidationError: if a field is missing or invalid (nothing is written)
            ConflictError: if the name is already taken
        """
        city = City.from_payload(payload)
        created = await self._city_repo.insert(city)
        logger.info(f"Created city {created.id} ({created.name})")
        return created
