"""Query descriptor value objects - immutable, request scoped, never persisted."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class MatchOperator(str, Enum):
    """Closed set of match conditions a predicate may use."""
    EQ = "eq"
    CONTAINS_CI = "contains_ci"


class SortDirection(int, Enum):
    """Sort direction, valued the way document stores expect it."""
    ASC = 1
    DESC = -1


Scalar = Union[str, int, float]


@dataclass(frozen=True)
class FieldCondition:
    """A single ``field <operator> value`` condition."""
    field: str
    operator: MatchOperator
    value: Scalar

    def matches(self, candidate: Any) -> bool:
        """Evaluate the condition against a field value."""
        if self.operator is MatchOperator.CONTAINS_CI:
            return isinstance(candidate, str) and str(self.value).casefold() in candidate.casefold()
        return candidate == self.value


# Conditions are ANDed together; an empty predicate matches everything.
Predicate = Tuple[FieldCondition, ...]


@dataclass(frozen=True)
class SortSpec:
    """Single-key ordering."""
    field: str
    direction: SortDirection


@dataclass(frozen=True)
class CityQuery:
    """Validated description of a list request.

    Attributes:
        predicate: Conditions every returned city satisfies
        projection: Field names to return; empty means all fields
        sort: Optional ordering; None leaves the store's natural order
        page: 1-based page number
        limit: Page size
    """
    predicate: Predicate = ()
    projection: Tuple[str, ...] = ()
    sort: Optional[SortSpec] = None
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        """Zero-based offset of the first record on the page."""
        return (self.page - 1) * self.limit


def predicate_matches(predicate: Predicate, document: dict) -> bool:
    """True when the document satisfies every condition."""
    return all(condition.matches(document.get(condition.field)) for condition in predicate)
