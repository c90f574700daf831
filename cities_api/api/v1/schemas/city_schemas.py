"""Pydantic schemas for City API requests and responses."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr


# Request Schemas
# Strict types: booleans and numeric strings are rejected, not coerced.
# StrictFloat still accepts JSON integers for coordinates.
class CityCreateSchema(BaseModel):
    """Body of POST /cities. Every field is required."""
    name: StrictStr = Field(..., min_length=1)
    population: StrictInt = Field(..., ge=0)
    country: StrictStr = Field(..., min_length=1)
    latitude: StrictFloat = Field(..., ge=-90, le=90)
    longitude: StrictFloat = Field(..., ge=-180, le=180)


class CityUpdateSchema(BaseModel):
    """Body of PUT /cities/{id}. Only the fields sent are replaced."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = Field(None, min_length=1)
    population: Optional[StrictInt] = Field(None, ge=0)
    country: Optional[StrictStr] = Field(None, min_length=1)
    latitude: Optional[StrictFloat] = Field(None, ge=-90, le=90)
    longitude: Optional[StrictFloat] = Field(None, ge=-180, le=180)


# Response Schemas
class CitySchema(BaseModel):
    """Full city record."""
    id: str
    name: str
    population: int
    country: str
    latitude: float
    longitude: float


class CityMutationResponseSchema(BaseModel):
    """Response of create and update."""
    message: str
    city: CitySchema


class MessageResponseSchema(BaseModel):
    """Response of delete."""
    message: str


class CityListResponseSchema(BaseModel):
    """Response of list.

    Cities are plain objects because a projection may drop any field but id.
    """
    total: int
    page: int
    limit: int
    cities: List[Dict[str, Any]]


class ErrorResponseSchema(BaseModel):
    """Body of every 4xx response."""
    error: str
