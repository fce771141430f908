"""Product catalog operations over the local store and the external catalog."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from starlette.concurrency import run_in_threadpool

from fakeshop.core.errors import (
    CatalogError,
    InputValidationError,
    NotFoundError,
)
from fakeshop.db.models.product import ProductRow
from fakeshop.db.product_store import LocalProductStore
from fakeshop.external.fakestore import FakestoreClient
from fakeshop.services.catalog_product import CatalogProduct, from_external, from_row
from fakeshop.services.id_allocator import IdAllocator, unix_millis
from fakeshop.services.reconciliation import merge_catalog
from fakeshop.services.stock import StockSynthesizer
from fakeshop.utils.concurrency import gather_settled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewProduct:
    """Validated fields for a product created locally."""

    title: str
    price: Decimal
    description: str
    category: str
    image: str


class ProductService:
    """The five catalog operations exposed to the HTTP layer.

    Local rows always take precedence over external items with the same id.
    External-only products get synthesized stock on every read and are only
    persisted once promoted through a stock update.
    """

    def __init__(
        self,
        store: LocalProductStore,
        catalog: FakestoreClient,
        rng: random.Random | None = None,
        clock: Callable[[], int] = unix_millis,
        strict_id_allocation: bool = False,
    ) -> None:
        self.store = store
        self.catalog = catalog
        rng = rng or random.Random()
        self.stock = StockSynthesizer(rng)
        self.allocator = IdAllocator(
            store, catalog, rng=rng, clock=clock, strict=strict_id_allocation
        )

    async def list_all(self) -> list[CatalogProduct]:
        """Merge the external snapshot with every local row.

        An external failure fails the whole read; there is no stale fallback.
        """
        external_items, local_rows = await gather_settled(
            self.catalog.fetch_all(),
            run_in_threadpool(self.store.find_all),
        )
        products = merge_catalog(external_items, local_rows, self.stock.synthesize)
        logger.debug(
            f"Merged {len(external_items)} external items with "
            f"{len(local_rows)} local rows into {len(products)} products"
        )
        return products

    async def get_one(self, product_id: int) -> CatalogProduct:
        row = await run_in_threadpool(self.store.find_by_id, product_id)
        if row is not None:
            return from_row(row)

        try:
            item = await self.catalog.fetch_by_id(product_id)
        except CatalogError as e:
            logger.error(f"Failed to find product with id {product_id}: {e.message}")
            raise NotFoundError(f"Product with ID {product_id} not found") from e

        return from_external(item, product_id, self.stock.synthesize())

    async def create(self, fields: NewProduct) -> CatalogProduct:
        """Persist a brand-new local product under a freshly allocated id."""

        def build_row(product_id: int) -> ProductRow:
            return ProductRow(
                id=product_id,
                title=fields.title,
                price=fields.price,
                description=fields.description,
                category=fields.category,
                image=fields.image,
                stock=self.stock.synthesize(),
                is_local=True,
            )

        row = await self.allocator.persist_new(build_row)
        logger.info(f"Created product {row.id}")
        return from_row(row)

    async def update_stock(self, product_id: int, stock: int) -> CatalogProduct:
        """Set stock on a local row, promoting an external-only product first."""
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise InputValidationError("Stock must be a non-negative integer")

        row = await run_in_threadpool(self.store.find_by_id, product_id)
        if row is not None:
            row.stock = stock
            saved = await run_in_threadpool(self.store.upsert, row)
            logger.info(f"Updated stock of product {product_id} to {stock}")
            return from_row(saved)

        try:
            item = await self.catalog.fetch_by_id(product_id)
        except CatalogError as e:
            logger.error(f"Failed to find product with id {product_id}: {e.message}")
            raise NotFoundError(f"Product with ID {product_id} not found") from e

        promoted = await run_in_threadpool(
            self.store.upsert,
            ProductRow(
                id=product_id,
                title=item.title,
                price=item.price,
                description=item.description,
                category=item.category,
                image=item.image,
                stock=stock,
                is_local=True,
            )
        )
        logger.info(f"Promoted external product {product_id} with stock {stock}")
        return from_row(promoted)

    async def remove(self, product_id: int) -> None:
        """Delete a local row; the external catalog is never touched."""
        row = await run_in_threadpool(self.store.find_by_id, product_id)
        if row is None:
            raise NotFoundError(
                f"Product with ID {product_id} not found in local database"
            )
        await run_in_threadpool(self.store.delete, row)
        logger.info(f"Deleted product {product_id}")
