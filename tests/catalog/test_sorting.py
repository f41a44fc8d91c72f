"""Tests for sort criteria."""

import pytest

from shopcatalog.catalog.sorting import SortCriteria, SortDirection, SortField
from shopcatalog.domain.exceptions import InvalidQueryInputError


class TestSortCriteria:
    """Tests for SortCriteria."""

    def test_parse(self) -> None:
        """Field and direction are parsed case-insensitively."""
        sort = SortCriteria.parse("Price", "DESC")
        assert sort.field is SortField.PRICE
        assert sort.direction is SortDirection.DESC
        assert sort.descending

    def test_default_direction_is_ascending(self) -> None:
        """Direction defaults to ascending."""
        assert SortCriteria.parse("name").direction is SortDirection.ASC

    def test_unknown_field_rejected(self) -> None:
        """Fields outside the closed set are invalid input."""
        with pytest.raises(InvalidQueryInputError) as exc_info:
            SortCriteria.parse("password")
        assert exc_info.value.details["parameter"] == "sort field"

    def test_unknown_direction_rejected(self) -> None:
        """Directions other than asc/desc are invalid input."""
        with pytest.raises(InvalidQueryInputError):
            SortCriteria.parse("name", "sideways")

    def test_equal_criteria_share_hash(self) -> None:
        """Equal criteria can address the same cache entry."""
        a = SortCriteria.parse("price", "asc")
        b = SortCriteria(SortField.PRICE, SortDirection.ASC)
        assert a == b
        assert hash(a) == hash(b)
        assert a != SortCriteria.parse("price", "desc")

    def test_str(self) -> None:
        """String form is field,direction."""
        assert str(SortCriteria.parse("name", "desc")) == "name,desc"
