"""
Catalog repository interface

Defines the contract for resolving product ids against the live catalog.
"""

from abc import ABC, abstractmethod
from typing import Optional

from shop_cart.domain.entities.product_entity import Product


class CatalogRepository(ABC):
    """Repository interface for catalog lookups"""

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Find product by ID, None when it no longer exists"""
