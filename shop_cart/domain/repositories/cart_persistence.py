"""
Cart persistence adapter interface

One contract for both the remote (signed-in) and local (guest) cart mirrors.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from shop_cart.domain.entities.cart_entity import CartLineItem


class CartPersistenceAdapter(ABC):
    """Load/save/clear the persisted representation of a cart"""

    @abstractmethod
    async def load(self) -> Optional[List[CartLineItem]]:
        """Load persisted items, None when nothing is stored"""

    @abstractmethod
    async def save(self, items: Sequence[CartLineItem]) -> None:
        """Persist the complete item list"""

    @abstractmethod
    async def clear(self) -> None:
        """Remove the persisted representation"""
