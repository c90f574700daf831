"""City API routes - thin layer delegating to use cases.
Follows Single Responsibility Principle - only handles HTTP concerns.

Errors are not caught here: every CityServiceError propagates to the
handlers registered in ``cities_api.main`` and is rendered as ``{"error": ...}``.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from cities_api.api.v1.schemas.city_schemas import (
    CityCreateSchema,
    CityListResponseSchema,
    CityMutationResponseSchema,
    CityUpdateSchema,
    ErrorResponseSchema,
    MessageResponseSchema,
)
from cities_api.application.use_cases.create_city import CreateCityUseCase
from cities_api.application.use_cases.delete_city import DeleteCityUseCase
from cities_api.application.use_cases.list_cities import ListCitiesUseCase
from cities_api.application.use_cases.update_city import UpdateCityUseCase
from cities_api.constants import (
    MSG_CITY_ADDED,
    MSG_CITY_DELETED,
    MSG_CITY_NOT_FOUND,
    MSG_CITY_UPDATED,
)
from cities_api.core.dependencies import (
    get_create_city_use_case,
    get_delete_city_use_case,
    get_list_cities_use_case,
    get_update_city_use_case,
)
from cities_api.core.exceptions import NotFoundError

router = APIRouter(
    prefix="/cities",
    tags=["cities"],
    responses={400: {"model": ErrorResponseSchema}},
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CityMutationResponseSchema)
async def create_city(
    payload: CityCreateSchema,
    use_case: CreateCityUseCase = Depends(get_create_city_use_case),
):
    """Add a city. Duplicate names are rejected with 400."""
    city = await use_case.execute(payload.model_dump())
    return {"message": MSG_CITY_ADDED, "city": city.to_dict()}


@router.put(
    "/{city_id}",
    response_model=CityMutationResponseSchema,
    responses={404: {"model": ErrorResponseSchema}},
)
async def update_city(
    city_id: str,
    payload: CityUpdateSchema,
    use_case: UpdateCityUseCase = Depends(get_update_city_use_case),
):
    """Replace the given fields of a city."""
    city = await use_case.execute(city_id, payload.model_dump(exclude_unset=True))
    if city is None:
        raise NotFoundError(MSG_CITY_NOT_FOUND)
    return {"message": MSG_CITY_UPDATED, "city": city.to_dict()}


@router.delete(
    "/{city_id}",
    response_model=MessageResponseSchema,
    responses={404: {"model": ErrorResponseSchema}},
)
async def delete_city(
    city_id: str,
    use_case: DeleteCityUseCase = Depends(get_delete_city_use_case),
):
    """Delete a city."""
    city = await use_case.execute(city_id)
    if city is None:
        raise NotFoundError(MSG_CITY_NOT_FOUND)
    return {"message": MSG_CITY_DELETED}


@router.get("", response_model=CityListResponseSchema)
async def list_cities(
    page: Optional[str] = Query(None, description="1-based page number (default 1)"),
    limit: Optional[str] = Query(None, description="Page size (default 10)"),
    filter: Optional[str] = Query(None, description='JSON object of equality matches, e.g. {"country":"US"}'),
    sort: Optional[str] = Query(None, description="field:asc or field:desc"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the name"),
    fields: Optional[str] = Query(None, description="Comma-separated fields to return"),
    use_case: ListCitiesUseCase = Depends(get_list_cities_use_case),
):
    """
    List cities.

    Supports pagination, filtering, name search, single-field sorting and
    field projection. An empty result is a 200 with ``total`` 0.
    """
    page_dto = await use_case.execute(
        page=page,
        limit=limit,
        filter=filter,
        sort=sort,
        search=search,
        fields=fields,
    )
    return page_dto.to_dict()
