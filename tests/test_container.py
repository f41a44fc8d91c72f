"""End-to-end tests through CatalogContainer on an in-memory database."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from shopcatalog.catalog.models import Category
from shopcatalog.catalog.schemas import ProductData
from shopcatalog.catalog.sorting import SortCriteria
from shopcatalog.container import CatalogContainer, get_container, shutdown_container
from shopcatalog.domain.exceptions import CategoryInUseError, ProductNotFoundError
from shopcatalog.infrastructure.config import Settings


@pytest_asyncio.fixture
async def container(tmp_path: Path) -> AsyncGenerator[CatalogContainer, None]:
    """Create a container on a fresh in-memory database."""
    config = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        static_resources_path=str(tmp_path / "static"),
        page_size=2,
    )
    container = CatalogContainer(config)
    await container.init_schema()
    yield container
    await container.shutdown()


class TestCatalogContainer:
    """Tests for CatalogContainer."""

    @pytest.mark.asyncio
    async def test_cache_is_shared_across_sessions(self, container: CatalogContainer) -> None:
        """A page cached in one session is a hit in the next."""
        sort = SortCriteria.parse("name")
        async with container.session() as services:
            await services.mutations.create_category("Floral")
            for name in ["Rosebud", "Peony", "Poppy"]:
                await services.mutations.create_product(
                    ProductData(name=name, price=Decimal("9.99")),
                    "floral",
                    b"img",
                    f"{name}.png",
                )
            first = await services.queries.list_products_by_category("FLORAL", 1, sort)

        async with container.session() as services:
            second = await services.queries.list_products_by_category("FLORAL", 1, sort)

        assert first == second
        assert first.total == 3
        assert first.total_pages == 2
        assert [p.name for p in first.items] == ["Rosebud"]
        assert container.cache.stats()["ProductsWithCategory"].hits == 1

    @pytest.mark.asyncio
    async def test_mutations_invalidate_across_sessions(
        self, container: CatalogContainer, tmp_path: Path
    ) -> None:
        """Writes in one session are visible to cached reads in another."""
        sort = SortCriteria.parse("id")
        async with container.session() as services:
            await services.mutations.create_category("Floral")
            assert (await services.queries.list_products_by_name("rose", 0, sort)).total == 0

        async with container.session() as services:
            created = await services.mutations.create_product(
                ProductData(name="rosebud", price=Decimal("1.50")),
                "Floral",
                b"img",
                "rosebud.png",
            )

        async with container.session() as services:
            page = await services.queries.list_products_by_name("ROSE", 0, sort)
            assert [p.id for p in page.items] == [created.id]

            with pytest.raises(CategoryInUseError):
                await services.mutations.delete_category(created.category.id)

            await services.mutations.delete_product(created.id)
            with pytest.raises(ProductNotFoundError):
                await services.queries.get_product_by_id(created.id)

        image = tmp_path / "static" / "mainImages" / str(created.id) / "rosebud.png"
        assert image.read_bytes() == b"img"

    @pytest.mark.asyncio
    async def test_failed_block_rolls_back(self, container: CatalogContainer) -> None:
        """Uncommitted work is discarded when the session block raises."""
        with pytest.raises(RuntimeError):
            async with container.session() as services:
                await services.mutations.store.save_category(Category(name="Draft"))
                raise RuntimeError("abort")

        async with container.session() as services:
            assert await services.queries.list_all_categories() == ()


class TestContainerSingleton:
    """Tests for the process-wide container."""

    @pytest.mark.asyncio
    async def test_get_container_returns_one_instance(self) -> None:
        """The singleton is reused until it is shut down."""
        first = get_container()
        assert get_container() is first

        await shutdown_container()

        second = get_container()
        assert second is not first
        assert second.cache is not first.cache
        await shutdown_container()
