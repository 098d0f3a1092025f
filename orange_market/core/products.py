# orange_market/core/products.py
"""
Listing lifecycle: read, create, update, mark-as-sold and delete products
together with their image rows.

Every operation is a fixed sequence of store calls run inside a single
transaction. The first failing step raises, the remaining steps are skipped
and the transaction is rolled back, so a product is never left half-written
(e.g. saved without its images).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, NamedTuple

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orange_market.core.errors import NotFound, UnprocessableEntity
from orange_market.db.models import Product, ProductImage
from orange_market.db.stores import ImageStore, ProductStore

LOGGER = logging.getLogger(__name__)


class ProductRequest(BaseModel):
    title: str = Field(min_length=1, max_length=128)
    content: str = ""
    price: int = Field(ge=0)
    city: str = Field(min_length=1, max_length=64)
    image_list: list[str] | None = None

    def to_row(self, owner_idx: int | None, idx: int | None = None) -> Product:
        return Product(
            idx=idx,
            title=self.title,
            content=self.content,
            price=self.price,
            city=self.city,
            user_idx=owner_idx,
        )


class ProductView(BaseModel):
    idx: int
    title: str
    content: str
    price: int
    city: str
    sold: bool
    user_idx: int | None
    created_at: datetime
    image_list: list[str]


class _Stores(NamedTuple):
    products: ProductStore
    images: ImageStore


class ProductPipeline:
    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[_Stores]:
        async with self._sessions() as s:
            async with s.begin():
                yield _Stores(ProductStore(s), ImageStore(s))

    # Reads -------------------------------------------------------------
    async def list_by_city(self, city: str) -> list[ProductView]:
        async with self._transaction() as stores:
            rows = await stores.products.find_all_by_city(city)
            if not rows:
                raise NotFound(f"no products in {city!r}")
            return [await self._to_view(stores, row) for row in rows]

    async def get_one(self, idx: int) -> ProductView:
        async with self._transaction() as stores:
            row = await stores.products.find_by_idx(idx)
            if row is None:
                raise NotFound(f"product {idx} not found")
            return await self._to_view(stores, row)

    # Writes ------------------------------------------------------------
    async def create(self, request: ProductRequest, owner_idx: int | None = None) -> int:
        """Save a new product and its images; return the new product idx."""
        async with self._transaction() as stores:
            row = await self._save_product(stores, request.to_row(owner_idx))
            await self._save_images(stores, row.idx, request.image_list)
            idx = row.idx
        LOGGER.info("created product %s with %d image(s)", idx, len(request.image_list))
        return idx

    async def update(self, idx: int, request: ProductRequest, owner_idx: int | None = None) -> None:
        """Overwrite product ``idx`` and replace its whole image set."""
        async with self._transaction() as stores:
            await self._delete_images(stores, idx)
            await self._save_product(stores, request.to_row(owner_idx, idx=idx))
            await self._save_images(stores, idx, request.image_list)
        LOGGER.info("updated product %s with %d image(s)", idx, len(request.image_list))

    async def toggle_sold(self, idx: int) -> bool:
        """Flip the sold flag of product ``idx`` and return the new value."""
        async with self._transaction() as stores:
            row = await stores.products.find_by_idx(idx)
            if row is None:
                LOGGER.warning("toggle_sold: product %s not found", idx)
                raise UnprocessableEntity(f"product {idx} could not be updated")
            row.is_sold = 0 if row.is_sold else 1
            row = await self._save_product(stores, row)
            sold = bool(row.is_sold)
        LOGGER.info("product %s sold=%s", idx, sold)
        return sold

    async def delete(self, idx: int) -> None:
        async with self._transaction() as stores:
            await self._delete_images(stores, idx)
            try:
                removed = await stores.products.delete_by_idx(idx)
            except SQLAlchemyError as e:
                LOGGER.warning("deleting product %s failed: %s", idx, e)
                raise UnprocessableEntity(f"product {idx} could not be deleted") from e
            if removed == 0:
                LOGGER.warning("delete: product %s not found", idx)
                raise UnprocessableEntity(f"product {idx} could not be deleted")
        LOGGER.info("deleted product %s", idx)

    # Steps -------------------------------------------------------------
    async def _save_product(self, stores: _Stores, row: Product) -> Product:
        try:
            return await stores.products.save(row)
        except SQLAlchemyError as e:
            LOGGER.warning("saving product %s failed: %s", row.idx, e)
            raise UnprocessableEntity("product could not be saved") from e

    async def _delete_images(self, stores: _Stores, product_idx: int) -> None:
        try:
            await stores.images.delete_all_by_product_idx(product_idx)
        except SQLAlchemyError as e:
            LOGGER.warning("deleting images of product %s failed: %s", product_idx, e)
            raise UnprocessableEntity("product images could not be removed") from e

    async def _save_images(self, stores: _Stores, product_idx: int, urls: list[str] | None) -> None:
        # A listing must carry at least one image, on create and on update.
        if not urls:
            LOGGER.warning("product %s: empty image list", product_idx)
            raise UnprocessableEntity("at least one image is required")
        try:
            for url in urls:
                await stores.images.save(ProductImage(product_idx=product_idx, url=url))
        except SQLAlchemyError as e:
            LOGGER.warning("saving images of product %s failed: %s", product_idx, e)
            raise UnprocessableEntity("product images could not be saved") from e

    async def _to_view(self, stores: _Stores, row: Product) -> ProductView:
        images = await stores.images.find_all_by_product_idx(row.idx)
        return ProductView(
            idx=row.idx,
            title=row.title,
            content=row.content,
            price=row.price,
            city=row.city,
            sold=bool(row.is_sold),
            user_idx=row.user_idx,
            created_at=row.created_at,
            image_list=[img.url for img in images],
        )
