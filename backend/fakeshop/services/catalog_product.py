"""Ephemeral product values returned by the catalog, tagged with their origin."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from fakeshop.db.models.product import ProductRow
from fakeshop.external.fakestore import ExternalItem


class Origin(str, enum.Enum):
    LOCAL = "local"
    EXTERNAL = "external"


@dataclass(frozen=True)
class CatalogProduct:
    """One entry of the merged catalog view.

    Built per request and never persisted; ``origin`` records whether the
    authoritative copy lives in the Local Store or the external catalog.
    """

    id: int
    title: str
    price: Decimal
    description: str
    category: str
    image: str
    stock: int
    origin: Origin
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_local(self) -> bool:
        return self.origin is Origin.LOCAL


def from_row(row: ProductRow) -> CatalogProduct:
    """Copy a persisted row verbatim."""
    return CatalogProduct(
        id=row.id,
        title=row.title,
        price=Decimal(row.price),
        description=row.description,
        category=row.category,
        image=row.image,
        stock=row.stock,
        origin=Origin.LOCAL if row.is_local else Origin.EXTERNAL,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def from_external(item: ExternalItem, product_id: int, stock: int) -> CatalogProduct:
    """Materialize an external-only product with the given synthesized stock."""
    return CatalogProduct(
        id=product_id,
        title=item.title,
        price=item.price,
        description=item.description,
        category=item.category,
        image=item.image,
        stock=stock,
        origin=Origin.EXTERNAL,
    )
