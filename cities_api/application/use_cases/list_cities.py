"""Use case: List cities with filtering, search, sorting and pagination.
Follows Single Responsibility Principle - orchestration only, no parsing."""
from typing import Optional, Union

from cities_api.application.dto.city_dto import CityPageDTO
from cities_api.application.services.city_query_builder import CityQueryBuilder
from cities_api.domain.repositories.city_repository import CityRepository


class ListCitiesUseCase:
    """Use case to get one page of cities.

    Follows Dependency Inversion Principle - depends on repository abstractions.
    """

    def __init__(self, city_repository: CityRepository, query_builder: CityQueryBuilder):
        self._city_repo = city_repository
        self._query_builder = query_builder

    async def execute(
        self,
        page: Optional[Union[str, int]] = None,
        limit: Optional[Union[str, int]] = None,
        filter: Optional[str] = None,
        sort: Optional[str] = None,
        search: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> CityPageDTO:
        """Execute use case to list cities.

        The query is fully built before the store is touched, so a bad
        parameter fails without any store call. ``total`` and the page are
        read separately and may disagree under concurrent writes.

        Returns:
            CityPageDTO with the total match count and the requested window
        """
        query = self._query_builder.build(
            filter=filter,
            search=search,
            sort=sort,
            fields=fields,
            page=page,
            limit=limit,
        )

        total = await self._city_repo.count(query.predicate)
        cities = await self._city_repo.find(
            query.predicate,
            projection=query.projection,
            sort=query.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return CityPageDTO(total=total, page=query.page, limit=query.limit, cities=cities)
