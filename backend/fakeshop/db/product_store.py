"""Local Store: keyed access to persisted product rows."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fakeshop.core.errors import PersistenceError
from fakeshop.db.models.product import ProductRow

logger = logging.getLogger(__name__)

# Range of the INTEGER primary key; ids outside it cannot exist locally.
MIN_ROW_ID = 1
MAX_ROW_ID = 2**31 - 1


class LocalProductStore:
    """Thin repository over the ``products`` table.

    Reads and writes both translate SQLAlchemy failures into
    ``PersistenceError`` after rolling the session back, so callers never see
    driver exceptions or a session stuck in a failed transaction.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(self) -> list[ProductRow]:
        """Return every local row in natural (ascending id) order."""
        try:
            return list(self.db.scalars(select(ProductRow).order_by(ProductRow.id)))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error listing products: {e}", exc_info=True)
            raise PersistenceError("Failed to read local products") from e

    def find_by_id(self, product_id: int) -> ProductRow | None:
        if not MIN_ROW_ID <= product_id <= MAX_ROW_ID:
            return None
        try:
            return self.db.get(ProductRow, product_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Database error loading product {product_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to read product {product_id}") from e

    def top_ids_descending(self, limit: int) -> list[int]:
        """Return up to ``limit`` of the highest local ids, highest first."""
        try:
            stmt = select(ProductRow.id).order_by(ProductRow.id.desc()).limit(limit)
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error reading top ids: {e}", exc_info=True)
            raise PersistenceError("Failed to read local product ids") from e

    def upsert(self, row: ProductRow) -> ProductRow:
        """Insert a new row or flush changes to an already loaded one.

        A brand-new row whose id already exists violates the primary key and
        surfaces as ``PersistenceError``.
        """
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return row
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error saving product {row.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save product {row.id}") from e

    def delete(self, row: ProductRow) -> None:
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Database error deleting product {row.id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to delete product {row.id}") from e
