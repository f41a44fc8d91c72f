"""Product Catalog Service.

Provides cached product and category listings, pagination and sorting,
and cache-invalidating catalog mutations.
"""

from shopcatalog.catalog.cache import CacheRegion, CacheRegionName, CatalogCache
from shopcatalog.catalog.models import Category, Product
from shopcatalog.catalog.mutation_service import CatalogMutationService
from shopcatalog.catalog.pagination import PAGE_SIZE, PaginatedResult
from shopcatalog.catalog.query_service import CatalogQueryService
from shopcatalog.catalog.repository import CatalogRepository, CatalogStore, ProductFilter
from shopcatalog.catalog.schemas import CategoryDTO, ProductData, ProductDTO
from shopcatalog.catalog.sorting import SortCriteria, SortDirection, SortField

__all__ = [
    # Models
    "Category",
    "Product",
    # Schemas
    "CategoryDTO",
    "ProductDTO",
    "ProductData",
    # Pagination & sorting
    "PAGE_SIZE",
    "PaginatedResult",
    "SortCriteria",
    "SortDirection",
    "SortField",
    # Cache
    "CacheRegion",
    "CacheRegionName",
    "CatalogCache",
    # Repository
    "CatalogRepository",
    "CatalogStore",
    "ProductFilter",
    # Services
    "CatalogQueryService",
    "CatalogMutationService",
]
