"""Named in-process caches for catalog query results.

Each region is an independent key -> value map guarded by its own lock.
The lock covers only the map itself; values are computed outside it, so
two callers missing the same key at the same time may both compute.
The last write wins, which is harmless because a value is fully
determined by its key.

Eviction is region-wide. Every eviction bumps the region generation, and
a value whose computation started under an older generation is returned
to its caller but never stored. This keeps a reader that raced a
mutation from re-populating the region with pre-mutation data.
"""

import threading
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

logger = structlog.get_logger()

V = TypeVar("V")

_MISSING = object()


class CacheRegionName(str, Enum):
    """Cache regions used by the catalog services."""

    ALL_PRODUCTS = "AllProducts"
    PRODUCTS_BY_NAME = "ProductsWithName"
    PRODUCTS_BY_CATEGORY = "ProductsWithCategory"
    PRODUCT_BY_ID = "ProductById"
    ALL_CATEGORIES = "AllCategories"


# Regions whose entries embed product data
PRODUCT_REGIONS: tuple[CacheRegionName, ...] = (
    CacheRegionName.ALL_PRODUCTS,
    CacheRegionName.PRODUCTS_BY_NAME,
    CacheRegionName.PRODUCTS_BY_CATEGORY,
    CacheRegionName.PRODUCT_BY_ID,
)


@dataclass(frozen=True)
class RegionStats:
    """Point-in-time counters for one region."""

    name: str
    entries: int
    hits: int
    misses: int
    evictions: int


class CacheRegion(Generic[V]):
    """A named, thread-safe key -> value store.

    Example usage:
        region = CacheRegion("ProductById")
        product = await region.get_or_compute(42, lambda: load_product(42))
        region.evict_all()
    """

    def __init__(self, name: str) -> None:
        """Initialize an empty region.

        Args:
            name: Region name, used in logs and stats.
        """
        self.name = name
        self._entries: dict[Hashable, V] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def generation(self) -> int:
        """Current eviction generation; bumped by every evict_all."""
        with self._lock:
            return self._generation

    async def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Awaitable[V]],
        generation: int | None = None,
    ) -> V:
        """Return the cached value for key, computing and storing it on a miss.

        Exceptions raised by compute propagate and leave the region
        unchanged. A computed value is stored only if no eviction happened
        since the generation was taken.

        Args:
            key: Hashable cache key.
            compute: Zero-argument coroutine function producing the value.
            generation: Generation taken before any reads the value depends
                on. Defaults to the generation at lookup time.

        Returns:
            Cached or freshly computed value.
        """
        with self._lock:
            value: Any = self._entries.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
                if generation is None:
                    generation = self._generation
            else:
                self._hits += 1

        if value is not _MISSING:
            logger.debug("Cache hit", region=self.name, key=key)
            return value

        logger.debug("Cache miss", region=self.name, key=key)
        value = await compute()

        with self._lock:
            stored = generation == self._generation
            if stored:
                self._entries[key] = value

        if not stored:
            logger.debug(
                "Discarded value computed across an eviction",
                region=self.name,
                key=key,
            )
        return value

    def evict_all(self) -> int:
        """Remove every entry in this region.

        Readers observe either the previous map or the empty one.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            removed = len(self._entries)
            self._entries = {}
            self._generation += 1
            self._evictions += 1

        logger.debug("Cache region evicted", region=self.name, removed=removed)
        return removed

    def stats(self) -> RegionStats:
        """Snapshot the region counters."""
        with self._lock:
            return RegionStats(
                name=self.name,
                entries=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )


class CatalogCache:
    """The set of catalog cache regions.

    Created once per process and shared by the query and mutation
    services. Dropping it at any time only costs recomputation.
    """

    def __init__(self) -> None:
        """Create one empty region per CacheRegionName."""
        self._regions: dict[CacheRegionName, CacheRegion[Any]] = {
            name: CacheRegion(name.value) for name in CacheRegionName
        }

    def region(self, name: CacheRegionName) -> CacheRegion[Any]:
        """Get a region by name."""
        return self._regions[name]

    def evict(self, *names: CacheRegionName) -> None:
        """Evict every entry of the given regions.

        Args:
            names: Regions to clear; other regions are untouched.
        """
        removed = {name.value: self._regions[name].evict_all() for name in names}
        logger.info("Cache regions evicted", removed=removed)

    def clear(self) -> None:
        """Evict all regions."""
        self.evict(*self._regions)

    def stats(self) -> dict[str, RegionStats]:
        """Snapshot counters of all regions, keyed by region name."""
        return {name.value: region.stats() for name, region in self._regions.items()}
