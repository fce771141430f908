"""SQLAlchemy model for locally persisted product rows."""

from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text, func
from sqlalchemy.types import DateTime

from fakeshop.db.base import Base


class ProductRow(Base):
    __tablename__ = "products"

    # Ids are assigned by the allocator or copied from the external catalog.
    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(255), nullable=False)
    image = Column(String(2048), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    is_local = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
