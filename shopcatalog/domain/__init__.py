"""Domain layer - catalog errors.

Example usage:
    from shopcatalog.domain import ProductNotFoundError

    try:
        product = await queries.get_product_by_id(42)
    except ProductNotFoundError as exc:
        print(exc.details["product_id"])
"""

from shopcatalog.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryError,
    CategoryInUseError,
    CategoryNotFoundError,
    DomainError,
    ImageStorageError,
    InvalidProductPayloadError,
    InvalidQueryInputError,
    ProductError,
    ProductNotFoundError,
)

__all__ = [
    "DomainError",
    # Products
    "ProductError",
    "ProductNotFoundError",
    "InvalidProductPayloadError",
    "ImageStorageError",
    # Categories
    "CategoryError",
    "CategoryNotFoundError",
    "CategoryAlreadyExistsError",
    "CategoryInUseError",
    # Queries
    "InvalidQueryInputError",
]
