"""Product repository for database operations."""

from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.infrastructure.persistence.models import ProductModel


class ProductRepository:
    """Repository for product database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, product: ProductModel) -> ProductModel:
        """Create a new product."""
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: int) -> ProductModel | None:
        """Get a product by its local ID."""
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id == product_id)
        )
        return result.scalar_one_or_none()

    async def get_by_shopify_id(self, shopify_id: str) -> ProductModel | None:
        """Get a product by its Shopify ID."""
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.shopify_id == shopify_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[ProductModel]:
        """List all products, newest first."""
        result = await self.session.execute(
            select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        )
        return result.scalars().all()

    async def list_by_creator(self, user_id: str) -> Sequence[ProductModel]:
        """List one user's products, newest first."""
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.created_by == user_id)
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        )
        return result.scalars().all()

    async def list_bestsellers(self, user_id: str) -> Sequence[ProductModel]:
        """List one user's products by units sold, then newest first."""
        result = await self.session.execute(
            select(ProductModel)
            .where(ProductModel.created_by == user_id)
            .order_by(
                ProductModel.sales_count.desc(),
                ProductModel.created_at.desc(),
                ProductModel.id.desc(),
            )
        )
        return result.scalars().all()

    async def increment_sales(self, product_id: int, quantity: int) -> ProductModel | None:
        """Add units to a product's sales counter.

        The addition runs inside the UPDATE, so concurrent webhook deliveries
        and manual sales do not overwrite each other.

        Args:
            product_id: Local product ID.
            quantity: Units to add.

        Returns:
            The refreshed product, or None if it does not exist.
        """
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(sales_count=ProductModel.sales_count + quantity)
        )
        if result.rowcount == 0:
            return None
        await self.session.flush()
        product = await self.get_by_id(product_id)
        if product is not None:
            await self.session.refresh(product)
        return product
