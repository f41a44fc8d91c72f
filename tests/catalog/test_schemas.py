"""Tests for catalog schemas."""

from decimal import Decimal

import pytest

from shopcatalog.catalog.models import Category, Product
from shopcatalog.catalog.schemas import CategoryDTO, ProductData, ProductDTO
from shopcatalog.domain.exceptions import InvalidProductPayloadError


class TestProductData:
    """Tests for ProductData parsing."""

    def test_from_json(self) -> None:
        """A flat JSON document is parsed."""
        data = ProductData.from_json(
            '{"name": "Rosebud", "price": "19.99", "category_name": "Floral"}'
        )
        assert data.name == "Rosebud"
        assert data.price == Decimal("19.99")
        assert data.category_name == "Floral"
        assert data.description is None

    def test_nested_category(self) -> None:
        """A nested category object supplies the category name."""
        data = ProductData.from_json(
            '{"name": "Fox", "price": 5, "category": {"name": "Animals"}}'
        )
        assert data.category_name == "Animals"

    def test_category_string_and_flat_name_precedence(self) -> None:
        """A string category is accepted; an explicit category_name wins."""
        data = ProductData.model_validate({"name": "Fox", "price": 5, "category": "Animals"})
        assert data.category_name == "Animals"

        data = ProductData.from_json(
            '{"name": "Fox", "price": 5, "category": "Animals", "category_name": "Wild"}'
        )
        assert data.category_name == "Wild"

    def test_malformed_json(self) -> None:
        """Broken JSON is an invalid payload."""
        with pytest.raises(InvalidProductPayloadError) as exc_info:
            ProductData.from_json('{"name": ')
        assert "malformed JSON" in exc_info.value.message

    def test_not_an_object(self) -> None:
        """A JSON array is an invalid payload."""
        with pytest.raises(InvalidProductPayloadError) as exc_info:
            ProductData.from_json("[1, 2]")
        assert exc_info.value.details["reason"] == "expected a JSON object"

    def test_negative_price(self) -> None:
        """Negative prices fail validation with field details."""
        with pytest.raises(InvalidProductPayloadError) as exc_info:
            ProductData.from_json('{"name": "Rosebud", "price": -1}')
        fields = [e["field"] for e in exc_info.value.details["errors"]]
        assert fields == ["price"]

    def test_missing_name(self) -> None:
        """Name is required."""
        with pytest.raises(InvalidProductPayloadError):
            ProductData.from_json('{"price": 1}')


class TestViews:
    """Tests for DTO conversion."""

    def test_product_view(self) -> None:
        """Product rows convert to frozen views carrying their category."""
        category = Category(id=3, name="Floral")
        product = Product(
            id=7,
            name="Rosebud",
            description=None,
            price=Decimal("19.99"),
            main_image_name="rosebud.png",
            category=category,
        )

        view = ProductDTO.from_model(product)

        assert view.id == 7
        assert view.category == CategoryDTO(id=3, name="Floral")
        assert view.category_name == "Floral"
        with pytest.raises(AttributeError):
            view.name = "changed"  # type: ignore[misc]

    def test_product_without_category(self) -> None:
        """Products without a category have no category view."""
        product = Product(id=1, name="Loose", price=Decimal("1"))
        view = ProductDTO.from_model(product)
        assert view.category is None
        assert view.category_name is None
