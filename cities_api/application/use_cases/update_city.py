"""Use case: Update a city in place."""
import logging
from typing import Any, Mapping, Optional

from cities_api.domain.entities.city import City
from cities_api.domain.repositories.city_repository import CityRepository

logger = logging.getLogger(__name__)


class UpdateCityUseCase:
    """Apply a partial field replacement to an existing city."""

    def __init__(self, city_repository: CityRepository):
        self._city_repo = city_repository

    async def execute(self, city_id: str, fields: Mapping[str, Any]) -> Optional[City]:
        """Execute use case to update a city.

        Args:
            city_id: Target city id
            fields: Partial city fields; unknown keys are ignored

        Returns:
            Updated city, or None if no city has this id
        """
        # Validate before the store is touched so a bad payload never half-applies
        changes = City.validate_partial(fields)
        updated = await self._city_repo.update_by_id(city_id, changes)
        if updated is None:
            logger.info(f"Update skipped, city {city_id} not found")
        return updated
