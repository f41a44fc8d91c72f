"""SQLAlchemy models for the product catalog.

Defines Category and Product tables for persistent storage.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcatalog.infrastructure.database import Base


class Category(Base):
    """Product category.

    Names are unique under case-insensitive comparison; the rule is
    enforced by the mutation service, not by the table.

    Attributes:
        id: Unique category identifier.
        name: Display name.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name})>"


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier, assigned on first save.
        name: Product name.
        description: Product description.
        price: Non-negative price in major currency units.
        main_image_name: File name of the main image in the image store.
        category_id: Owning category.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    main_image_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )

    # Joined eagerly so detached instances can still be converted to views
    category: Mapped[Category | None] = relationship("Category", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]})>"
