"""Repository interfaces."""
from cities_api.domain.repositories.city_repository import CityRepository

__all__ = [
    "CityRepository",
]
