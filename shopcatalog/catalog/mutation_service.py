"""Catalog mutation service.

Creates, edits and deletes products and categories. Every successful
mutation commits first and only then evicts the cache regions whose
entries it could have changed. A mutation that fails evicts nothing.
"""

import structlog

from shopcatalog.catalog.cache import PRODUCT_REGIONS, CacheRegionName, CatalogCache
from shopcatalog.catalog.models import Category, Product
from shopcatalog.catalog.query_service import validate_filter_text
from shopcatalog.catalog.repository import CatalogStore
from shopcatalog.catalog.schemas import CategoryDTO, ProductData, ProductDTO
from shopcatalog.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryInUseError,
    CategoryNotFoundError,
    ImageStorageError,
    InvalidProductPayloadError,
    InvalidQueryInputError,
    ProductNotFoundError,
)
from shopcatalog.infrastructure.file_store import ImageStore

logger = structlog.get_logger()


def clean_category_name(name: str) -> str:
    """Strip quoting that form-encoded clients wrap around category names."""
    return validate_filter_text("category name", name).replace('"', "").strip()


class CatalogMutationService:
    """Service for catalog write operations.

    Example usage:
        service = CatalogMutationService(CatalogRepository(session), cache, image_store)
        category = await service.create_category("Floral")
        product = await service.create_product(
            ProductData(name="Rosebud", price=Decimal("19.99")),
            category_name="Floral",
            image_bytes=png_bytes,
            image_name="rosebud.png",
        )
    """

    def __init__(
        self,
        store: CatalogStore,
        cache: CatalogCache,
        image_store: ImageStore,
    ) -> None:
        """Initialize service.

        Args:
            store: Persistence collaborator.
            cache: Process-wide catalog cache.
            image_store: Product image storage.
        """
        self.store = store
        self.cache = cache
        self.image_store = image_store

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def create_product(
        self,
        data: ProductData,
        category_name: str,
        image_bytes: bytes,
        image_name: str | None = None,
    ) -> ProductDTO:
        """Create a product with its main image.

        A failure after the category lookup rolls the store back and
        removes an image already written for the product.

        Args:
            data: Validated product fields.
            category_name: Category name, resolved ignoring case.
            image_bytes: Main image content.
            image_name: Uploaded file name (defaults to data.main_image_name).

        Returns:
            The created product.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            InvalidProductPayloadError: If no image file name is given.
            ImageStorageError: If the image cannot be written.
        """
        suggested_name = image_name or data.main_image_name
        if not suggested_name:
            raise InvalidProductPayloadError("image file name is required")

        category = await self._resolve_category(category_name)

        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            category=category,
        )
        stored_name: str | None = None
        try:
            product = await self.store.save_product(product)
            stored_name = await self.image_store.store(image_bytes, suggested_name, product.id)
            product.main_image_name = stored_name
            product = await self.store.save_product(product)
            await self.store.commit()
        except Exception:
            await self.store.rollback()
            if stored_name is not None:
                await self._discard_image(stored_name, product.id)
            raise

        self.cache.evict(*PRODUCT_REGIONS)

        logger.info(
            "Product created",
            product_id=product.id,
            category_id=category.id,
            image=product.main_image_name,
        )
        return ProductDTO.from_model(product)

    async def edit_product(self, product_id: int, data: ProductData) -> ProductDTO:
        """Overwrite a product's fields.

        Name, description, price and image reference are replaced. The
        category is re-resolved from data.category_name; when that is
        None the product keeps its current category.

        Args:
            product_id: Product ID.
            data: New product fields.

        Returns:
            The edited product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            CategoryNotFoundError: If the new category does not exist.
        """
        product = await self.store.find_product_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        category = product.category
        if data.category_name is not None:
            category = await self._resolve_category(data.category_name)

        product.name = data.name
        product.price = data.price
        product.main_image_name = data.main_image_name
        product.description = data.description
        product.category = category

        product = await self.store.save_product(product)
        await self.store.commit()

        self.cache.evict(*PRODUCT_REGIONS)

        logger.info("Product edited", product_id=product_id)
        return ProductDTO.from_model(product)

    async def delete_product(self, product_id: int) -> None:
        """Delete a product; deleting a missing id is not an error.

        Args:
            product_id: Product ID.
        """
        await self.store.delete_product_by_id(product_id)
        await self.store.commit()

        self.cache.evict(*PRODUCT_REGIONS)

        logger.info("Product deleted", product_id=product_id)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def create_category(self, name: str) -> CategoryDTO:
        """Create a category.

        Args:
            name: Category name.

        Returns:
            The created category.

        Raises:
            CategoryAlreadyExistsError: If the name is taken, ignoring case.
        """
        name = self._validate_new_name(name)
        await self._ensure_name_available(name)

        category = await self.store.save_category(Category(name=name))
        await self.store.commit()

        self.cache.evict(CacheRegionName.ALL_CATEGORIES)

        logger.info("Category created", category_id=category.id, name=name)
        return CategoryDTO.from_model(category)

    async def edit_category(self, category_id: int, new_name: str) -> CategoryDTO:
        """Rename a category.

        The duplicate check does not skip the category being renamed, so
        changing only the letter case of a name ("Floral" -> "floral")
        is rejected as a duplicate.

        Args:
            category_id: Category ID.
            new_name: New category name.

        Returns:
            The renamed category.

        Raises:
            CategoryAlreadyExistsError: If the new name is taken, ignoring case.
            CategoryNotFoundError: If the category does not exist.
        """
        new_name = self._validate_new_name(new_name)

        existing = await self.store.find_category_by_name(new_name, case_insensitive=True)
        if existing is not None:
            if existing.id == category_id:
                logger.warning(
                    "Rejected rename of category onto its own name",
                    category_id=category_id,
                    current_name=existing.name,
                    new_name=new_name,
                )
            raise CategoryAlreadyExistsError(new_name)

        category = await self.store.find_category_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id=category_id)

        category.name = new_name
        category = await self.store.save_category(category)
        await self.store.commit()

        # Product views embed the category name
        self.cache.evict(CacheRegionName.ALL_CATEGORIES, *PRODUCT_REGIONS)

        logger.info("Category renamed", category_id=category_id, name=new_name)
        return CategoryDTO.from_model(category)

    async def delete_category(self, category_id: int) -> None:
        """Delete a category that no product references.

        Args:
            category_id: Category ID.

        Raises:
            CategoryInUseError: If products still reference the category.
        """
        product_count = await self.store.count_products_referencing_category(category_id)
        if product_count > 0:
            raise CategoryInUseError(category_id, product_count)

        await self.store.delete_category_by_id(category_id)
        await self.store.commit()

        self.cache.evict(CacheRegionName.ALL_CATEGORIES)

        logger.info("Category deleted", category_id=category_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _resolve_category(self, category_name: str) -> Category:
        """Find a category by name, ignoring case."""
        name = clean_category_name(category_name)
        category = await self.store.find_category_by_name(name, case_insensitive=True)
        if category is None:
            raise CategoryNotFoundError(name=name)
        return category

    async def _ensure_name_available(self, name: str) -> None:
        existing = await self.store.find_category_by_name(name, case_insensitive=True)
        if existing is not None:
            raise CategoryAlreadyExistsError(name)

    @staticmethod
    def _validate_new_name(name: str) -> str:
        name = validate_filter_text("category name", name).strip()
        if not name:
            raise InvalidQueryInputError("category name", name, "must not be empty")
        return name

    async def _discard_image(self, file_name: str, product_id: int) -> None:
        try:
            await self.image_store.discard(file_name, product_id)
        except ImageStorageError as e:
            logger.warning(
                "Failed to discard image of abandoned product",
                product_id=product_id,
                file_name=file_name,
                error=e.message,
            )
