"""Shop catalog: cached product and category queries with coherent invalidation."""

__version__ = "0.1.0"
