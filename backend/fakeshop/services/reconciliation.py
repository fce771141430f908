"""Merge the external catalog snapshot with locally persisted rows."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from fakeshop.db.models.product import ProductRow
from fakeshop.external.fakestore import ExternalItem
from fakeshop.services.catalog_product import CatalogProduct, from_external, from_row

logger = logging.getLogger(__name__)


def merge_catalog(
    external_items: Sequence[ExternalItem],
    local_rows: Iterable[ProductRow],
    synthesize_stock: Callable[[], int],
) -> list[CatalogProduct]:
    """Return the merged catalog view.

    External entries come first in catalog order; an external id that also
    exists locally is replaced by the local row verbatim. Local rows that match
    no external id follow in the order they were given. Ids are unique in the
    result: external items without a positive integer id, and repeated
    external ids, are dropped.
    """
    rows_by_id = {row.id: row for row in local_rows}
    merged: list[CatalogProduct] = []
    seen: set[int] = set()

    for item in external_items:
        product_id = item.numeric_id
        if product_id is None:
            logger.warning(f"Skipping external item with unusable id {item.id!r}")
            continue
        if product_id in seen:
            logger.warning(f"Skipping duplicate external item {product_id}")
            continue
        seen.add(product_id)

        local_row = rows_by_id.get(product_id)
        if local_row is not None:
            merged.append(from_row(local_row))
        else:
            merged.append(from_external(item, product_id, synthesize_stock()))

    merged.extend(
        from_row(row) for product_id, row in rows_by_id.items() if product_id not in seen
    )
    return merged
