"""
SQLAlchemy implementation of CatalogRepository
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from shop_cart.domain.entities.product_entity import Product
from shop_cart.domain.repositories.catalog_repository import CatalogRepository
from shop_cart.infrastructure.database.models import ProductModel
from shop_cart.infrastructure.database.operations import DatabaseManager


class SQLAlchemyCatalogRepository(CatalogRepository):
    """SQLAlchemy implementation of the catalog lookup"""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Find product by ID"""
        try:
            with self._db.managed_session() as session:
                model = session.get(ProductModel, product_id)
                if model is None:
                    self._logger.debug("📭 PRODUCT NOT FOUND: %s", product_id)
                    return None
                return self._map_to_domain(model)
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR looking up product %s: %s", product_id, e)
            raise

    @staticmethod
    def _map_to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            price=Decimal(str(model.price)),
            images=list(model.images or []),
            inventory=model.inventory,
            is_active=bool(model.is_active),
        )
