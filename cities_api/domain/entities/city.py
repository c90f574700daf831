"""City domain entity - pure business logic."""
from dataclasses import dataclass, replace
from numbers import Integral, Real
from typing import Any, Dict, Iterable, Mapping, Optional

from cities_api.constants import (
    CITY_FIELDS,
    FIELD_COUNTRY,
    FIELD_LATITUDE,
    FIELD_LONGITUDE,
    FIELD_NAME,
    FIELD_POPULATION,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from cities_api.core.exceptions import ValidationError
from cities_api.domain.value_objects.coordinates import Coordinates


def _clean_text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"City validation failed: {field} must be a string")
    if not value.strip():
        raise ValidationError(f"City validation failed: {field} must not be empty")
    return value.strip()


def _clean_population(value: Any) -> int:
    # bool is an Integral subclass; a JSON true is not a population
    if isinstance(value, bool):
        raise ValidationError("City validation failed: population must be an integer")
    if isinstance(value, Real) and not isinstance(value, Integral):
        if not float(value).is_integer():
            raise ValidationError("City validation failed: population must be an integer")
        value = int(value)
    if not isinstance(value, Integral):
        raise ValidationError("City validation failed: population must be an integer")
    if value < 0:
        raise ValidationError("City validation failed: population must not be negative")
    return int(value)


def _clean_degrees(field: str, value: Any, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"City validation failed: {field} must be a number")
    if not low <= value <= high:
        raise ValidationError(
            f"City validation failed: {field} must be between {low:g} and {high:g}, got {value}"
        )
    return float(value)


_CLEANERS = {
    FIELD_NAME: lambda value: _clean_text(FIELD_NAME, value),
    FIELD_COUNTRY: lambda value: _clean_text(FIELD_COUNTRY, value),
    FIELD_POPULATION: _clean_population,
    FIELD_LATITUDE: lambda value: _clean_degrees(FIELD_LATITUDE, value, MIN_LATITUDE, MAX_LATITUDE),
    FIELD_LONGITUDE: lambda value: _clean_degrees(FIELD_LONGITUDE, value, MIN_LONGITUDE, MAX_LONGITUDE),
}


@dataclass
class City:
    """City domain entity.

    ``id`` is assigned by the store on insert and never changes afterwards.
    Name uniqueness is a store invariant, not something the entity can check.
    """
    id: Optional[str]
    name: str
    population: int
    country: str
    coordinates: Coordinates

    @property
    def latitude(self) -> float:
        return self.coordinates.latitude

    @property
    def longitude(self) -> float:
        return self.coordinates.longitude

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], city_id: Optional[str] = None) -> "City":
        """Build a validated city from an untyped mapping.

        Args:
            payload: Request body or stored document
            city_id: Identifier to attach, if the city is already persisted

        Raises:
            ValidationError: if a required field is missing or invalid
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("City validation failed: body must be an object")

        missing = [field for field in CITY_FIELDS if payload.get(field) is None]
        if missing:
            raise ValidationError(
                f"City validation failed: {', '.join(missing)} "
                f"{'is' if len(missing) == 1 else 'are'} required"
            )

        cleaned = {field: _CLEANERS[field](payload[field]) for field in CITY_FIELDS}
        return cls(
            id=city_id,
            name=cleaned[FIELD_NAME],
            population=cleaned[FIELD_POPULATION],
            country=cleaned[FIELD_COUNTRY],
            coordinates=Coordinates(
                latitude=cleaned[FIELD_LATITUDE],
                longitude=cleaned[FIELD_LONGITUDE],
            ),
        )

    @staticmethod
    def validate_partial(fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate a partial update and return the cleaned changes.

        Unknown keys are dropped, ``id`` is never writable and every
        present field is checked with the same rules as construction.
        """
        if not isinstance(fields, Mapping):
            raise ValidationError("City validation failed: body must be an object")

        changes: Dict[str, Any] = {}
        for field in CITY_FIELDS:
            if field not in fields:
                continue
            if fields[field] is None:
                raise ValidationError(f"City validation failed: {field} is required")
            changes[field] = _CLEANERS[field](fields[field])
        return changes

    def apply_changes(self, fields: Mapping[str, Any]) -> "City":
        """Return a copy with the validated partial update applied."""
        changes = self.validate_partial(fields)
        coordinates = Coordinates(
            latitude=changes.pop(FIELD_LATITUDE, self.latitude),
            longitude=changes.pop(FIELD_LONGITUDE, self.longitude),
        )
        return replace(self, coordinates=coordinates, **changes)

    def to_document(self) -> Dict[str, Any]:
        """Flat field mapping without the id, as stored."""
        return {
            FIELD_NAME: self.name,
            FIELD_POPULATION: self.population,
            FIELD_COUNTRY: self.country,
            FIELD_LATITUDE: self.latitude,
            FIELD_LONGITUDE: self.longitude,
        }

    def to_dict(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Convert to dictionary, optionally restricted to a projection.

        The id is always included.
        """
        document = self.to_document()
        wanted = tuple(fields) if fields else CITY_FIELDS
        result: Dict[str, Any] = {"id": self.id}
        result.update({field: document[field] for field in wanted if field in document})
        return result
