"""Catalog data transfer objects and input schemas.

Views handed to callers (and stored in the cache) are frozen
dataclasses detached from the ORM session. Product input is validated
with Pydantic.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from shopcatalog.catalog.models import Category, Product
from shopcatalog.domain.exceptions import InvalidProductPayloadError


# ============================================================================
# Views
# ============================================================================


@dataclass(frozen=True)
class CategoryDTO:
    """Category view."""

    id: int
    name: str

    @classmethod
    def from_model(cls, category: Category) -> "CategoryDTO":
        """Build a view from a Category row."""
        return cls(id=category.id, name=category.name)


@dataclass(frozen=True)
class ProductDTO:
    """Product view.

    Attributes:
        id: Product identifier.
        name: Product name.
        description: Product description.
        price: Price in major currency units.
        main_image_name: Stored main image file name.
        category: Owning category, if any.
    """

    id: int
    name: str
    description: str | None
    price: Decimal
    main_image_name: str | None
    category: CategoryDTO | None

    @classmethod
    def from_model(cls, product: Product) -> "ProductDTO":
        """Build a view from a Product row."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=Decimal(product.price),
            main_image_name=product.main_image_name,
            category=CategoryDTO.from_model(product.category) if product.category else None,
        )

    @property
    def category_name(self) -> str | None:
        """Get the owning category name."""
        return self.category.name if self.category else None


# ============================================================================
# Input Schemas
# ============================================================================


class ProductData(BaseModel):
    """Product fields supplied by a caller on create or edit."""

    name: str = Field(..., min_length=1, max_length=500, description="Product name")
    description: str | None = Field(default=None, description="Product description")
    price: Decimal = Field(..., ge=0, description="Price, non-negative")
    main_image_name: str | None = Field(
        default=None, max_length=500, description="Main image file name"
    )
    category_name: str | None = Field(
        default=None, description="Category name, resolved case-insensitively"
    )

    @model_validator(mode="before")
    @classmethod
    def nested_category(cls, data: Any) -> Any:
        """Accept {"category": {"name": ...}} or {"category": "..."} for category_name."""
        if not isinstance(data, dict) or "category" not in data:
            return data
        data = dict(data)
        category = data.pop("category")
        if "category_name" not in data:
            if isinstance(category, dict):
                data["category_name"] = category.get("name")
            elif isinstance(category, str):
                data["category_name"] = category
        return data

    @classmethod
    def from_json(cls, raw: str | bytes) -> "ProductData":
        """Parse a JSON product document.

        Args:
            raw: JSON text.

        Returns:
            Validated product data.

        Raises:
            InvalidProductPayloadError: If the JSON is malformed or invalid.
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            errors = e.errors()
            if errors[0]["type"] == "json_invalid":
                raise InvalidProductPayloadError(f"malformed JSON ({errors[0]['msg']})") from e
            if errors[0]["type"] == "model_type":
                raise InvalidProductPayloadError("expected a JSON object") from e
            raise InvalidProductPayloadError(
                "validation failed",
                errors=[
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in errors
                ],
            ) from e
