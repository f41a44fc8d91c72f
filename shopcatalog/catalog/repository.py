"""Catalog repository for database operations.

Provides the persistence primitives the catalog services rely on:
filtered, sorted and paginated product reads, counts, and CRUD for
products and categories.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.catalog.models import Category, Product
from shopcatalog.catalog.pagination import page_offset
from shopcatalog.catalog.sorting import SortCriteria, SortField


@dataclass(frozen=True)
class ProductFilter:
    """Filter parameters for product listings.

    Attributes:
        name: Case-insensitive substring of the product name.
        category_id: Owning category.
    """

    name: str | None = None
    category_id: int | None = None


class CatalogStore(Protocol):
    """Persistence contract consumed by the catalog services."""

    async def find_products_page(
        self,
        product_filter: ProductFilter,
        sort: SortCriteria,
        page_index: int,
        page_size: int,
    ) -> Sequence[Product]: ...

    async def count_products(self, product_filter: ProductFilter) -> int: ...

    async def find_product_by_id(self, product_id: int) -> Product | None: ...

    async def save_product(self, product: Product) -> Product: ...

    async def delete_product_by_id(self, product_id: int) -> None: ...

    async def find_category_by_name(
        self, name: str, case_insensitive: bool = True
    ) -> Category | None: ...

    async def find_category_by_id(self, category_id: int) -> Category | None: ...

    async def find_all_categories(self) -> Sequence[Category]: ...

    async def save_category(self, category: Category) -> Category: ...

    async def delete_category_by_id(self, category_id: int) -> None: ...

    async def count_products_referencing_category(self, category_id: int) -> int: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


class CatalogRepository:
    """Repository for Product and Category database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogRepository(session)
            products = await repo.find_products_page(
                ProductFilter(name="rose"),
                SortCriteria.parse("price", "desc"),
                page_index=0,
                page_size=12,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def find_products_page(
        self,
        product_filter: ProductFilter,
        sort: SortCriteria,
        page_index: int,
        page_size: int,
    ) -> Sequence[Product]:
        """Find one page of products.

        Args:
            product_filter: Filter parameters.
            sort: Sort criteria; ties are broken by id.
            page_index: Zero-based page index.
            page_size: Items per page.

        Returns:
            Products on the requested page (empty past the last page).
        """
        query = select(Product)

        conditions = self._filter_conditions(product_filter)
        if conditions:
            query = query.where(*conditions)

        sort_column = self._get_sort_column(sort.field)
        if sort.descending:
            query = query.order_by(sort_column.desc(), Product.id.asc())
        else:
            query = query.order_by(sort_column.asc(), Product.id.asc())

        query = query.limit(page_size).offset(page_offset(page_index, page_size))

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_products(self, product_filter: ProductFilter) -> int:
        """Count products matching a filter.

        Args:
            product_filter: Filter parameters.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.id))

        conditions = self._filter_conditions(product_filter)
        if conditions:
            query = query.where(*conditions)

        result = await self.session.execute(query)
        return result.scalar_one()

    async def find_product_by_id(self, product_id: int) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def save_product(self, product: Product) -> Product:
        """Save a product, assigning its id on first save.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def delete_product_by_id(self, product_id: int) -> None:
        """Delete a product; missing ids are ignored.

        Args:
            product_id: Product ID.
        """
        await self.session.execute(delete(Product).where(Product.id == product_id))

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def find_category_by_name(
        self,
        name: str,
        case_insensitive: bool = True,
    ) -> Category | None:
        """Get category by name.

        Args:
            name: Category name.
            case_insensitive: Compare names ignoring case.

        Returns:
            Category if found, None otherwise.
        """
        if case_insensitive:
            condition = func.lower(Category.name) == name.lower()
        else:
            condition = Category.name == name

        result = await self.session.execute(
            select(Category).where(condition).order_by(Category.id)
        )
        return result.scalars().first()

    async def find_category_by_id(self, category_id: int) -> Category | None:
        """Get category by ID."""
        return await self.session.get(Category, category_id)

    async def find_all_categories(self) -> Sequence[Category]:
        """Get all categories ordered by name."""
        result = await self.session.execute(
            select(Category).order_by(func.lower(Category.name), Category.id)
        )
        return result.scalars().all()

    async def save_category(self, category: Category) -> Category:
        """Save a category, assigning its id on first save."""
        self.session.add(category)
        await self.session.flush()
        return category

    async def delete_category_by_id(self, category_id: int) -> None:
        """Delete a category; missing ids are ignored."""
        await self.session.execute(delete(Category).where(Category.id == category_id))

    async def count_products_referencing_category(self, category_id: int) -> int:
        """Count products that belong to a category."""
        result = await self.session.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
        return result.scalar_one()

    # ------------------------------------------------------------------
    # Transaction
    # ------------------------------------------------------------------

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self.session.rollback()

    def _filter_conditions(self, product_filter: ProductFilter) -> list[Any]:
        """Translate a filter into SQLAlchemy conditions."""
        conditions = []

        if product_filter.name is not None:
            pattern = f"%{escape_like(product_filter.name.lower())}%"
            conditions.append(Product.name.ilike(pattern, escape="\\"))

        if product_filter.category_id is not None:
            conditions.append(Product.category_id == product_filter.category_id)

        return conditions

    def _get_sort_column(self, sort_field: SortField) -> Any:
        """Get SQLAlchemy column for sorting.

        Args:
            sort_field: Sort field.

        Returns:
            SQLAlchemy column.
        """
        columns = {
            SortField.ID: Product.id,
            SortField.NAME: Product.name,
            SortField.PRICE: Product.price,
        }
        return columns[sort_field]
