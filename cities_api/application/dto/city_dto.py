"""Data Transfer Objects for City API responses."""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class CityPageDTO:
    """One page of a city listing.

    ``page`` and ``limit`` echo the request, ``total`` counts every match.
    """
    total: int
    page: int
    limit: int
    cities: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "cities": self.cities,
        }
