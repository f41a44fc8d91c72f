"""Pagination arithmetic and result container.

Page indexes arrive zero-based from callers and are reported one-based
for display. Requests past the last page yield an empty page.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

PAGE_SIZE = 12


def compute_total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed to hold total_count items.

    Args:
        total_count: Non-negative item count.
        page_size: Positive page size.

    Returns:
        ceil(total_count / page_size); 0 only for an empty result.
    """
    return total_count // page_size + (0 if total_count % page_size == 0 else 1)


def to_display_page(zero_based_index: int) -> int:
    """Convert a zero-based page index to a one-based display number."""
    return zero_based_index + 1


def page_offset(zero_based_index: int, page_size: int) -> int:
    """Get the row offset of a zero-based page."""
    return zero_based_index * page_size


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Items on the current page.
        total: Total count across all pages.
        total_pages: Total number of pages.
        page: Current page (1-indexed, for display).
        page_size: Items per page.
    """

    items: tuple[T, ...]
    total: int
    total_pages: int
    page: int
    page_size: int

    @classmethod
    def build(
        cls,
        items: list[T] | tuple[T, ...],
        total: int,
        page_index: int,
        page_size: int,
    ) -> "PaginatedResult[T]":
        """Assemble a result for a zero-based page index.

        Args:
            items: Items on the requested page.
            total: Total matching items.
            page_index: Zero-based requested page.
            page_size: Items per page.

        Returns:
            Paginated result with derived page counts.
        """
        return cls(
            items=tuple(items),
            total=total,
            total_pages=compute_total_pages(total, page_size),
            page=to_display_page(page_index),
            page_size=page_size,
        )

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1
