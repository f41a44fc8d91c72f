"""Domain exceptions.

All catalog-level errors that represent business rule violations or
rejected query input. Every condition surfaces as its own exception type
so callers can tell them apart without inspecting messages.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class ProductNotFoundError(ProductError):
    """Raised when a product id has no matching record."""

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )


class InvalidProductPayloadError(ProductError):
    """Raised when a product payload cannot be parsed or validated."""

    def __init__(self, reason: str, errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize invalid product payload error.

        Args:
            reason: Explanation of why the payload was rejected.
            errors: Field-level validation errors, if any.
        """
        super().__init__(
            f"Invalid product payload: {reason}",
            details={"reason": reason, "errors": errors or []},
        )


class ImageStorageError(ProductError):
    """Raised when a product image cannot be written to the file store."""

    def __init__(self, file_name: str, reason: str) -> None:
        """Initialize image storage error.

        Args:
            file_name: Name of the file that could not be stored.
            reason: Underlying failure description.
        """
        super().__init__(
            f"Could not store image {file_name}: {reason}",
            details={"file_name": file_name, "reason": reason},
        )


# ============================================================================
# Category Errors
# ============================================================================


class CategoryError(DomainError):
    """Base class for category-related errors."""

    pass


class CategoryNotFoundError(CategoryError):
    """Raised when a category cannot be resolved by name or id."""

    def __init__(self, name: str | None = None, category_id: int | None = None) -> None:
        """Initialize category not found error.

        Args:
            name: Category name that was looked up.
            category_id: Category id that was looked up.
        """
        target = f"'{name}'" if name is not None else str(category_id)
        super().__init__(
            f"Category {target} not found",
            details={"name": name, "category_id": category_id},
        )


class CategoryAlreadyExistsError(CategoryError):
    """Raised when a category name collides case-insensitively with another."""

    def __init__(self, name: str) -> None:
        """Initialize category already exists error.

        Args:
            name: The colliding category name.
        """
        super().__init__(
            f"Category '{name}' already exists",
            details={"name": name},
        )


class CategoryInUseError(CategoryError):
    """Raised when deleting a category that products still reference."""

    def __init__(self, category_id: int, product_count: int) -> None:
        """Initialize category in use error.

        Args:
            category_id: ID of the category.
            product_count: Number of products referencing it.
        """
        super().__init__(
            f"Category {category_id} is used by {product_count} product(s)",
            details={"category_id": category_id, "product_count": product_count},
        )


# ============================================================================
# Query Errors
# ============================================================================


class InvalidQueryInputError(DomainError):
    """Raised for a malformed sort field, negative page index or bad filter."""

    def __init__(self, parameter: str, value: Any, reason: str) -> None:
        """Initialize invalid query input error.

        Args:
            parameter: Name of the rejected parameter.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
        """
        super().__init__(
            f"Invalid {parameter} {value!r}: {reason}",
            details={"parameter": parameter, "value": repr(value), "reason": reason},
        )
