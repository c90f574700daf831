"""Error taxonomy for the city service.

Every error carries the HTTP status it maps to, so the API layer can render
any of them as ``{"error": message}`` without knowing the concrete type.
"""


class CityServiceError(Exception):
    """Base class for all expected service errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CityServiceError):
    """Missing, mistyped or out-of-range city fields (or a malformed id)."""


class MalformedFilterError(CityServiceError):
    """The ``filter`` parameter is not an acceptable JSON object."""


class InvalidSortError(CityServiceError):
    """The ``sort`` parameter does not match ``field:asc|desc``."""


class InvalidPaginationError(CityServiceError):
    """``page`` or ``limit`` is not a positive integer within bounds."""


class NotFoundError(CityServiceError):
    """The targeted city does not exist."""

    status_code = 404


class ConflictError(CityServiceError):
    """A city with the same name already exists."""


class StorageError(CityServiceError):
    """The backing store failed (connectivity, timeout, server error)."""
