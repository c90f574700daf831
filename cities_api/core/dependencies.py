"""Dependency injection for FastAPI routes.
Follows Dependency Inversion Principle - routes depend on abstractions."""
from functools import lru_cache

from fastapi import Depends
from pymongo import AsyncMongoClient

from cities_api.application.services.city_query_builder import CityQueryBuilder
from cities_api.application.use_cases.create_city import CreateCityUseCase
from cities_api.application.use_cases.delete_city import DeleteCityUseCase
from cities_api.application.use_cases.list_cities import ListCitiesUseCase
from cities_api.application.use_cases.update_city import UpdateCityUseCase
from cities_api.config import get_settings
from cities_api.domain.repositories.city_repository import CityRepository
from cities_api.infrastructure.persistence.mongo import get_cities_collection, mongo_client
from cities_api.infrastructure.persistence.repositories.in_memory_city_repository import (
    InMemoryCityRepository,
)
from cities_api.infrastructure.persistence.repositories.mongo_city_repository import (
    MongoCityRepository,
)


@lru_cache()
def get_mongo_client() -> AsyncMongoClient:
    """Shared, pooled client for the whole process."""
    return mongo_client(get_settings())


@lru_cache()
def get_city_repository() -> CityRepository:
    """Get city repository instance.

    - Default: MongoDB collection from settings
    - If CITY_REPOSITORY_BACKEND=memory: process-local in-memory store
    """
    settings = get_settings()
    if settings.use_in_memory_repository:
        return InMemoryCityRepository()
    return MongoCityRepository(get_cities_collection(get_mongo_client(), settings))


@lru_cache()
def get_city_query_builder() -> CityQueryBuilder:
    settings = get_settings()
    return CityQueryBuilder(
        default_page=settings.DEFAULT_PAGE,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )


# Use case factories resolve the repository through Depends so a test can
# swap storage with a single dependency override.
def get_create_city_use_case(
    city_repository: CityRepository = Depends(get_city_repository),
) -> CreateCityUseCase:
    return CreateCityUseCase(city_repository=city_repository)


def get_update_city_use_case(
    city_repository: CityRepository = Depends(get_city_repository),
) -> UpdateCityUseCase:
    return UpdateCityUseCase(city_repository=city_repository)


def get_delete_city_use_case(
    city_repository: CityRepository = Depends(get_city_repository),
) -> DeleteCityUseCase:
    return DeleteCityUseCase(city_repository=city_repository)


def get_list_cities_use_case(
    city_repository: CityRepository = Depends(get_city_repository),
    query_builder: CityQueryBuilder = Depends(get_city_query_builder),
) -> ListCitiesUseCase:
    return ListCitiesUseCase(city_repository=city_repository, query_builder=query_builder)
