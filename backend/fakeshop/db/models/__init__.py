"""Database models package."""
from fakeshop.db.models.product import ProductRow

__all__ = ["ProductRow"]
