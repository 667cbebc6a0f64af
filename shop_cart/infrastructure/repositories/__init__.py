"""
Repository implementations backed by SQLAlchemy
"""

from .sqlalchemy_cart_store import SQLAlchemyCartStore
from .sqlalchemy_catalog_repository import SQLAlchemyCatalogRepository

__all__ = ["SQLAlchemyCartStore", "SQLAlchemyCatalogRepository"]
