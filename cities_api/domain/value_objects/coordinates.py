"""Coordinate value object - immutable and validated."""
from dataclasses import dataclass

from cities_api.constants import MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from cities_api.core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinates:
    """Immutable coordinate value object."""
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinates."""
        if not MIN_LATITUDE <= self.latitude <= MAX_LATITUDE:
            raise ValidationError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not MIN_LONGITUDE <= self.longitude <= MAX_LONGITUDE:
            raise ValidationError(f"Longitude must be between -180 and 180, got {self.longitude}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"latitude": self.latitude, "longitude": self.longitude}
