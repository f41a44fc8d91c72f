"""Shared fixtures for catalog tests."""

from collections import Counter
from collections.abc import Sequence
from decimal import Decimal
from operator import attrgetter
from pathlib import Path

import pytest

from shopcatalog.catalog.cache import CatalogCache
from shopcatalog.catalog.models import Category, Product
from shopcatalog.catalog.mutation_service import CatalogMutationService
from shopcatalog.catalog.query_service import CatalogQueryService
from shopcatalog.catalog.repository import ProductFilter
from shopcatalog.catalog.sorting import SortCriteria
from shopcatalog.infrastructure.file_store import LocalImageStore


# ============================================================================
# In-memory Store
# ============================================================================


class InMemoryCatalogStore:
    """CatalogStore backed by dicts, counting every call by method name."""

    def __init__(self) -> None:
        self.products: dict[int, Product] = {}
        self.categories: dict[int, Category] = {}
        self.calls: Counter[str] = Counter()
        self.commits = 0
        self.rollbacks = 0
        self._next_product_id = 1
        self._next_category_id = 1

    def _matching(self, product_filter: ProductFilter) -> list[Product]:
        matches = list(self.products.values())
        if product_filter.name is not None:
            needle = product_filter.name.lower()
            matches = [p for p in matches if needle in p.name.lower()]
        if product_filter.category_id is not None:
            matches = [
                p
                for p in matches
                if p.category is not None and p.category.id == product_filter.category_id
            ]
        return matches

    async def find_products_page(
        self,
        product_filter: ProductFilter,
        sort: SortCriteria,
        page_index: int,
        page_size: int,
    ) -> Sequence[Product]:
        self.calls["find_products_page"] += 1
        matches = sorted(self._matching(product_filter), key=attrgetter("id"))
        matches.sort(key=attrgetter(sort.field.value), reverse=sort.descending)
        start = page_index * page_size
        return matches[start : start + page_size]

    async def count_products(self, product_filter: ProductFilter) -> int:
        self.calls["count_products"] += 1
        return len(self._matching(product_filter))

    async def find_product_by_id(self, product_id: int) -> Product | None:
        self.calls["find_product_by_id"] += 1
        return self.products.get(product_id)

    async def save_product(self, product: Product) -> Product:
        self.calls["save_product"] += 1
        if product.id is None:
            product.id = self._next_product_id
        self._next_product_id = max(self._next_product_id, product.id + 1)
        self.products[product.id] = product
        return product

    async def delete_product_by_id(self, product_id: int) -> None:
        self.calls["delete_product_by_id"] += 1
        self.products.pop(product_id, None)

    async def find_category_by_name(
        self, name: str, case_insensitive: bool = True
    ) -> Category | None:
        self.calls["find_category_by_name"] += 1
        for category in sorted(self.categories.values(), key=attrgetter("id")):
            if case_insensitive and category.name.lower() == name.lower():
                return category
            if not case_insensitive and category.name == name:
                return category
        return None

    async def find_category_by_id(self, category_id: int) -> Category | None:
        self.calls["find_category_by_id"] += 1
        return self.categories.get(category_id)

    async def find_all_categories(self) -> Sequence[Category]:
        self.calls["find_all_categories"] += 1
        return sorted(self.categories.values(), key=lambda c: (c.name.lower(), c.id))

    async def save_category(self, category: Category) -> Category:
        self.calls["save_category"] += 1
        if category.id is None:
            category.id = self._next_category_id
            self._next_category_id += 1
        self.categories[category.id] = category
        return category

    async def delete_category_by_id(self, category_id: int) -> None:
        self.calls["delete_category_by_id"] += 1
        self.categories.pop(category_id, None)

    async def count_products_referencing_category(self, category_id: int) -> int:
        self.calls["count_products_referencing_category"] += 1
        return sum(
            1
            for p in self.products.values()
            if p.category is not None and p.category.id == category_id
        )

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    # Test helpers that bypass the call counters

    def add_category(self, name: str) -> Category:
        category = Category(id=self._next_category_id, name=name)
        self._next_category_id += 1
        self.categories[category.id] = category
        return category

    def add_product(
        self,
        name: str,
        price: str = "10.00",
        category: Category | None = None,
        description: str | None = None,
    ) -> Product:
        product = Product(
            id=self._next_product_id,
            name=name,
            description=description,
            price=Decimal(price),
            main_image_name=f"{name.lower()}.png",
            category=category,
        )
        self._next_product_id += 1
        self.products[product.id] = product
        return product


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Create an empty in-memory store."""
    return InMemoryCatalogStore()


@pytest.fixture
def cache() -> CatalogCache:
    """Create an empty catalog cache."""
    return CatalogCache()


@pytest.fixture
def image_store(tmp_path: Path) -> LocalImageStore:
    """Create an image store rooted in a temporary directory."""
    return LocalImageStore(tmp_path / "static")


@pytest.fixture
def queries(store: InMemoryCatalogStore, cache: CatalogCache) -> CatalogQueryService:
    """Create a query service over the in-memory store."""
    return CatalogQueryService(store, cache)


@pytest.fixture
def mutations(
    store: InMemoryCatalogStore,
    cache: CatalogCache,
    image_store: LocalImageStore,
) -> CatalogMutationService:
    """Create a mutation service sharing the query service's cache."""
    return CatalogMutationService(store, cache, image_store)


@pytest.fixture
def by_id() -> SortCriteria:
    """Ascending id order."""
    return SortCriteria.parse("id", "asc")


@pytest.fixture
def floral(store: InMemoryCatalogStore) -> Category:
    """A "Floral" category."""
    return store.add_category("Floral")
