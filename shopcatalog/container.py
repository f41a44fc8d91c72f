"""Composition root for the catalog services.

The catalog cache lives here: it is created together with the
container, shared by every session's services, and cleared on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from shopcatalog.catalog.cache import CatalogCache
from shopcatalog.catalog.mutation_service import CatalogMutationService
from shopcatalog.catalog.query_service import CatalogQueryService
from shopcatalog.catalog.repository import CatalogRepository
from shopcatalog.infrastructure.config import Settings, settings
from shopcatalog.infrastructure.database import (
    build_engine,
    build_session_factory,
    create_tables,
)
from shopcatalog.infrastructure.file_store import ImageStore, LocalImageStore

logger = structlog.get_logger()


@dataclass
class CatalogServices:
    """Services bound to one database session."""

    queries: CatalogQueryService
    mutations: CatalogMutationService


class CatalogContainer:
    """Owns the engine, session factory, image store and catalog cache.

    Example usage:
        container = get_container()
        async with container.session() as services:
            page = await services.queries.list_all_products(0, "name,asc")
    """

    def __init__(
        self,
        config: Settings | None = None,
        engine: AsyncEngine | None = None,
        image_store: ImageStore | None = None,
    ) -> None:
        """Initialize container.

        Args:
            config: Settings (defaults to the environment settings).
            engine: Async engine (defaults to one built from config).
            image_store: Image storage (defaults to the local static directory).
        """
        self.config = config or settings
        self.engine = engine or build_engine(self.config.database_url, echo=self.config.debug)
        self.session_factory: async_sessionmaker[AsyncSession] = build_session_factory(
            self.engine
        )
        self.image_store = image_store or LocalImageStore(self.config.static_resources_path)
        self.cache = CatalogCache()

        logger.info(
            "Catalog container created",
            page_size=self.config.page_size,
            static_resources_path=self.config.static_resources_path,
        )

    async def init_schema(self) -> None:
        """Create catalog tables if they don't exist."""
        await create_tables(self.engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[CatalogServices]:
        """Open a session and yield services bound to it.

        The session is rolled back if the block raises.

        Yields:
            Query and mutation services sharing the container cache.
        """
        async with self.session_factory() as session:
            repository = CatalogRepository(session)
            try:
                yield CatalogServices(
                    queries=CatalogQueryService(
                        repository, self.cache, page_size=self.config.page_size
                    ),
                    mutations=CatalogMutationService(repository, self.cache, self.image_store),
                )
            except Exception:
                await session.rollback()
                raise

    async def shutdown(self) -> None:
        """Drop cached results and dispose the engine."""
        self.cache.clear()
        await self.engine.dispose()
        logger.info("Catalog container shut down")


_container: CatalogContainer | None = None


def get_container() -> CatalogContainer:
    """Get the catalog container singleton.

    Returns:
        CatalogContainer instance.
    """
    global _container
    if _container is None:
        _container = CatalogContainer()
    return _container


async def shutdown_container() -> None:
    """Shut down and forget the container singleton."""
    global _container
    if _container is not None:
        await _container.shutdown()
        _container = None
