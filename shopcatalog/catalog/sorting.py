"""Sort criteria for product listings.

Only a closed set of fields may be sorted on; anything else is rejected
before it reaches the repository.
"""

from dataclasses import dataclass
from enum import Enum

from shopcatalog.domain.exceptions import InvalidQueryInputError


class SortField(str, Enum):
    """Sortable product fields."""

    ID = "id"
    NAME = "name"
    PRICE = "price"


class SortDirection(str, Enum):
    """Sort directions."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortCriteria:
    """A (field, direction) pair, hashable so it can be part of a cache key."""

    field: SortField = SortField.ID
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, field: str, direction: str = "asc") -> "SortCriteria":
        """Build criteria from raw strings.

        Args:
            field: Field name (id, name, price), case-insensitive.
            direction: asc or desc, case-insensitive.

        Returns:
            Validated sort criteria.

        Raises:
            InvalidQueryInputError: If either value is not recognised.
        """
        try:
            sort_field = SortField(str(field).strip().lower())
        except ValueError as e:
            raise InvalidQueryInputError(
                "sort field",
                field,
                f"expected one of {[f.value for f in SortField]}",
            ) from e

        try:
            sort_direction = SortDirection(str(direction).strip().lower())
        except ValueError as e:
            raise InvalidQueryInputError(
                "sort direction",
                direction,
                f"expected one of {[d.value for d in SortDirection]}",
            ) from e

        return cls(field=sort_field, direction=sort_direction)

    @property
    def descending(self) -> bool:
        """Check if the order is descending."""
        return self.direction is SortDirection.DESC

    def __str__(self) -> str:
        """String representation."""
        return f"{self.field.value},{self.direction.value}"
