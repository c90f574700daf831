"""Turns raw list-request parameters into a validated CityQuery.

Everything arriving here is untrusted text straight from the query string.
The builder either returns a complete ``CityQuery`` or raises one of the
query errors; it never falls back to a partial or default query, and it
never touches the store.
"""
import json
import logging
from numbers import Real
from typing import Any, List, Optional, Tuple, Union

from cities_api.constants import (
    CITY_FIELDS,
    FIELD_NAME,
    FIELDS_SEPARATOR,
    MAX_SKIP,
    MSG_INVALID_SORT,
    SORT_ASC,
    SORT_DESC,
    SORT_SEPARATOR,
)
from cities_api.core.exceptions import (
    InvalidPaginationError,
    InvalidSortError,
    MalformedFilterError,
)
from cities_api.domain.value_objects.city_query import (
    CityQuery,
    FieldCondition,
    MatchOperator,
    SortDirection,
    SortSpec,
)

logger = logging.getLogger(__name__)

_DIRECTIONS = {SORT_ASC: SortDirection.ASC, SORT_DESC: SortDirection.DESC}

RawParam = Optional[Union[str, int]]


class CityQueryBuilder:
    """Builds ``CityQuery`` descriptors from request parameters.

    Args:
        default_page: Page used when ``page`` is absent
        default_limit: Page size used when ``limit`` is absent
        max_limit: Largest accepted page size
    """

    def __init__(self, default_page: int = 1, default_limit: int = 10, max_limit: int = 100):
        self.default_page = default_page
        self.default_limit = default_limit
        self.max_limit = max_limit

    def build(
        self,
        filter: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        fields: Optional[str] = None,
        page: RawParam = None,
        limit: RawParam = None,
    ) -> CityQuery:
        """Build a query descriptor.

        Raises:
            MalformedFilterError: filter is not a JSON object of allowed fields
            InvalidSortError: sort is not ``field:asc`` or ``field:desc``
            InvalidPaginationError: page or limit is not a positive integer
        """
        predicate = self.parse_filter(filter) + self.parse_search(search)
        limit = self.parse_limit(limit)
        return CityQuery(
            predicate=predicate,
            projection=self.parse_fields(fields),
            sort=self.parse_sort(sort),
            page=self.parse_page(page, limit),
            limit=limit,
        )

    def parse_filter(self, raw: Optional[str]) -> Tuple[FieldCondition, ...]:
        """Parse a JSON object into equality conditions on known fields."""
        if not raw:
            return ()

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.info(f"Rejected filter {raw!r}: {e}")
            raise MalformedFilterError(f"Invalid filter parameter: {e}")

        if not isinstance(parsed, dict):
            raise MalformedFilterError("Invalid filter parameter: expected a JSON object")

        conditions: List[FieldCondition] = []
        for field, value in parsed.items():
            if field.startswith("$"):
                raise MalformedFilterError(f"Invalid filter parameter: operator '{field}' is not allowed")
            if field not in CITY_FIELDS:
                raise MalformedFilterError(
                    f"Invalid filter parameter: unknown field '{field}'. "
                    f"Allowed fields: {', '.join(CITY_FIELDS)}"
                )
            if not _is_scalar(value):
                raise MalformedFilterError(
                    f"Invalid filter parameter: value for '{field}' must be a string or a number"
                )
            conditions.append(FieldCondition(field, MatchOperator.EQ, value))
        return tuple(conditions)

    def parse_search(self, raw: Optional[str]) -> Tuple[FieldCondition, ...]:
        """Case-insensitive substring match on the city name."""
        if raw is None or not raw.strip():
            return ()
        return (FieldCondition(FIELD_NAME, MatchOperator.CONTAINS_CI, raw.strip()),)

    def parse_sort(self, raw: Optional[str]) -> Optional[SortSpec]:
        """Parse ``field:direction``; None when no ordering is requested."""
        if not raw:
            return None

        parts = raw.split(SORT_SEPARATOR)
        if len(parts) != 2:
            raise InvalidSortError(MSG_INVALID_SORT)
        field, direction = parts
        if field not in CITY_FIELDS or direction not in _DIRECTIONS:
            raise InvalidSortError(MSG_INVALID_SORT)
        return SortSpec(field=field, direction=_DIRECTIONS[direction])

    def parse_fields(self, raw: Optional[str]) -> Tuple[str, ...]:
        """Comma-separated projection; unknown names are ignored."""
        if not raw:
            return ()

        projection: List[str] = []
        for name in raw.split(FIELDS_SEPARATOR):
            name = name.strip()
            if name in CITY_FIELDS and name not in projection:
                projection.append(name)
        return tuple(projection)

    def parse_limit(self, raw: RawParam) -> int:
        limit = self.parse_positive_int("limit", raw, self.default_limit)
        if limit > self.max_limit:
            raise InvalidPaginationError(
                f"Invalid limit parameter. Use a positive integer no greater than {self.max_limit}."
            )
        return limit

    def parse_page(self, raw: RawParam, limit: int) -> int:
        """Parse the page number; the resulting skip must fit in a BSON int64."""
        page = self.parse_positive_int("page", raw, self.default_page)
        if (page - 1) * limit > MAX_SKIP:
            raise InvalidPaginationError(
                f"Invalid page parameter. Use a positive integer no greater than {MAX_SKIP // limit + 1}."
            )
        return page

    @staticmethod
    def parse_positive_int(name: str, raw: RawParam, default: int) -> int:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return default
        text = str(raw).strip()
        # Plain ASCII digits only: no sign, underscores or other numerals.
        if not (text.isascii() and text.isdigit()):
            raise InvalidPaginationError(f"Invalid {name} parameter. Use a positive integer.")
        try:
            value = int(text)
        except ValueError:
            # Beyond the interpreter's int string conversion limit.
            raise InvalidPaginationError(f"Invalid {name} parameter. Use a positive integer.")
        if value < 1:
            raise InvalidPaginationError(f"Invalid {name} parameter. Use a positive integer.")
        return value


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str) or (isinstance(value, Real) and not isinstance(value, bool))
