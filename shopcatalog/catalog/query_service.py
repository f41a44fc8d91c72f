"""Catalog query service.

Answers product and category listing queries, serving repeated
parameter combinations from the shared catalog cache.
"""

import unicodedata
from typing import Any

import structlog

from shopcatalog.catalog.cache import CacheRegionName, CatalogCache
from shopcatalog.catalog.pagination import PAGE_SIZE, PaginatedResult
from shopcatalog.catalog.repository import CatalogStore, ProductFilter
from shopcatalog.catalog.schemas import CategoryDTO, ProductDTO
from shopcatalog.catalog.sorting import SortCriteria
from shopcatalog.domain.exceptions import (
    CategoryNotFoundError,
    InvalidQueryInputError,
    ProductNotFoundError,
)

logger = structlog.get_logger()

ALL_CATEGORIES_KEY = "all"


# ============================================================================
# Input Validation
# ============================================================================


def validate_page_index(page_index: Any) -> int:
    """Reject page indexes that are not non-negative integers."""
    if isinstance(page_index, bool) or not isinstance(page_index, int):
        raise InvalidQueryInputError("page index", page_index, "must be an integer")
    if page_index < 0:
        raise InvalidQueryInputError("page index", page_index, "must not be negative")
    return page_index


def validate_sort(sort: Any) -> SortCriteria:
    """Accept SortCriteria, or a "field" / "field,direction" string."""
    if isinstance(sort, SortCriteria):
        return sort
    if isinstance(sort, str):
        field, _, direction = sort.partition(",")
        return SortCriteria.parse(field, direction or "asc")
    raise InvalidQueryInputError("sort", sort, "must be a SortCriteria or 'field,direction'")


def validate_filter_text(parameter: str, value: Any) -> str:
    """Reject filter strings that are not text or carry control characters."""
    if not isinstance(value, str):
        raise InvalidQueryInputError(parameter, value, "must be a string")
    if any(unicodedata.category(ch) == "Cc" for ch in value):
        raise InvalidQueryInputError(parameter, value, "must not contain control characters")
    return value


# ============================================================================
# Query Service
# ============================================================================


class CatalogQueryService:
    """Service for catalog read operations.

    Example usage:
        service = CatalogQueryService(CatalogRepository(session), cache)
        page = await service.list_products_by_name(
            "rose", 0, SortCriteria.parse("price", "desc")
        )
        print(page.total, page.total_pages, [p.name for p in page.items])
    """

    def __init__(
        self,
        store: CatalogStore,
        cache: CatalogCache,
        page_size: int = PAGE_SIZE,
    ) -> None:
        """Initialize service.

        Args:
            store: Persistence collaborator.
            cache: Process-wide catalog cache.
            page_size: Items per page.
        """
        self.store = store
        self.cache = cache
        self.page_size = page_size

    async def list_all_products(
        self,
        page_index: int,
        sort: SortCriteria | str,
    ) -> PaginatedResult[ProductDTO]:
        """List one page of all products.

        Args:
            page_index: Zero-based page index.
            sort: Sort criteria.

        Returns:
            Paginated products.
        """
        page_index = validate_page_index(page_index)
        sort = validate_sort(sort)

        return await self.cache.region(CacheRegionName.ALL_PRODUCTS).get_or_compute(
            (page_index, sort),
            lambda: self._load_page(ProductFilter(), page_index, sort),
        )

    async def list_products_by_name(
        self,
        substring: str,
        page_index: int,
        sort: SortCriteria | str,
    ) -> PaginatedResult[ProductDTO]:
        """List products whose name contains a substring, ignoring case.

        Args:
            substring: Text to look for anywhere in the name.
            page_index: Zero-based page index.
            sort: Sort criteria.

        Returns:
            Paginated products; an empty page when nothing matches.
        """
        substring = validate_filter_text("name filter", substring)
        page_index = validate_page_index(page_index)
        sort = validate_sort(sort)

        return await self.cache.region(CacheRegionName.PRODUCTS_BY_NAME).get_or_compute(
            (substring, page_index, sort),
            lambda: self._load_page(ProductFilter(name=substring), page_index, sort),
        )

    async def list_products_by_category(
        self,
        category_name: str,
        page_index: int,
        sort: SortCriteria | str,
    ) -> PaginatedResult[ProductDTO]:
        """List products of a category looked up by name, ignoring case.

        The category lookup always hits the store; only the page is cached.

        Args:
            category_name: Category name.
            page_index: Zero-based page index.
            sort: Sort criteria.

        Returns:
            Paginated products.

        Raises:
            CategoryNotFoundError: If no category has that name.
        """
        category_name = validate_filter_text("category name", category_name)
        page_index = validate_page_index(page_index)
        sort = validate_sort(sort)

        region = self.cache.region(CacheRegionName.PRODUCTS_BY_CATEGORY)
        # Taken before the lookup: a rename evicting mid-lookup must discard the page.
        generation = region.generation()

        category = await self.store.find_category_by_name(category_name, case_insensitive=True)
        if category is None:
            raise CategoryNotFoundError(name=category_name)
        category_id = category.id

        return await region.get_or_compute(
            (category_name, page_index, sort),
            lambda: self._load_page(ProductFilter(category_id=category_id), page_index, sort),
            generation=generation,
        )

    async def get_product_by_id(self, product_id: int) -> ProductDTO:
        """Get a single product.

        Args:
            product_id: Product ID.

        Returns:
            The product.

        Raises:
            ProductNotFoundError: If the product does not exist. Not cached.
        """

        async def load() -> ProductDTO:
            product = await self.store.find_product_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            return ProductDTO.from_model(product)

        return await self.cache.region(CacheRegionName.PRODUCT_BY_ID).get_or_compute(
            product_id, load
        )

    async def list_all_categories(self) -> tuple[CategoryDTO, ...]:
        """List every category ordered by name."""

        async def load() -> tuple[CategoryDTO, ...]:
            categories = await self.store.find_all_categories()
            return tuple(CategoryDTO.from_model(c) for c in categories)

        return await self.cache.region(CacheRegionName.ALL_CATEGORIES).get_or_compute(
            ALL_CATEGORIES_KEY, load
        )

    async def _load_page(
        self,
        product_filter: ProductFilter,
        page_index: int,
        sort: SortCriteria,
    ) -> PaginatedResult[ProductDTO]:
        """Read one page and the total count from the store."""
        products = await self.store.find_products_page(
            product_filter, sort, page_index, self.page_size
        )
        total = await self.store.count_products(product_filter)

        logger.debug(
            "Loaded product page",
            name=product_filter.name,
            category_id=product_filter.category_id,
            page_index=page_index,
            sort=str(sort),
            total=total,
        )

        return PaginatedResult.build(
            [ProductDTO.from_model(p) for p in products],
            total=total,
            page_index=page_index,
            page_size=self.page_size,
        )
