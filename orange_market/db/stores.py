"""Narrow row-level access to users, products and product images.

Stores never commit: the caller owns the session and its transaction.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from orange_market.db.models import Product, ProductImage, User


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_idx(self, idx: int) -> User | None:
        return await self.session.get(User, idx)


class ProductStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all_by_city(self, city: str) -> list[Product]:
        res = await self.session.execute(
            select(Product).where(Product.city == city).order_by(Product.idx)
        )
        return list(res.scalars().all())

    async def find_by_idx(self, idx: int) -> Product | None:
        res = await self.session.execute(select(Product).where(Product.idx == idx))
        return res.scalar_one_or_none()

    async def save(self, product: Product) -> Product:
        """Insert a new row, or overwrite the row with the same idx."""
        if product.idx is None:
            self.session.add(product)
        else:
            product = await self.session.merge(product)
        await self.session.flush()
        return product

    async def delete_by_idx(self, idx: int) -> int:
        res = await self.session.execute(delete(Product).where(Product.idx == idx))
        return res.rowcount


class ImageStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all_by_product_idx(self, product_idx: int) -> list[ProductImage]:
        res = await self.session.execute(
            select(ProductImage)
            .where(ProductImage.product_idx == product_idx)
            .order_by(ProductImage.idx)
        )
        return list(res.scalars().all())

    async def save(self, image: ProductImage) -> ProductImage:
        self.session.add(image)
        await self.session.flush()
        return image

    async def delete_all_by_product_idx(self, product_idx: int) -> int:
        res = await self.session.execute(
            delete(ProductImage).where(ProductImage.product_idx == product_idx)
        )
        return res.rowcount
