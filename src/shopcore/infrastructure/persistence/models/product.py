"""SQLAlchemy model for the products table.

Products mirror the Shopify products created through the API and carry a
local sales counter fed by order webhooks and manual sale entries.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from shopcore.infrastructure.persistence.database import Base


class ProductModel(Base):
    """SQLAlchemy model for the products table.

    Attributes:
        id: Auto-incrementing primary key.
        shopify_id: Product ID on Shopify (or a mock ID).
        name: Product title.
        price: Unit price.
        image_url: Optional image URL.
        sales_count: Units sold.
        created_by: Foreign key to the creating user.
        created_at: Creation timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shopify_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    sales_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )
    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, shopify_id={self.shopify_id}, name={self.name})>"
