"""
Remote cart store interface

Per-user cart documents mapping product_id -> {"quantity", "addedAt"}.
Writes replace the whole document.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class RemoteCartStore(ABC):
    """Repository interface for the remote cart mirror"""

    @abstractmethod
    async def get_cart(self, user_id: str) -> Optional[Dict[str, Dict[str, Any]]]:
        """Get the cart document for a user, None when there is none"""

    @abstractmethod
    async def update_cart(self, user_id: str, cart_data: Dict[str, Dict[str, Any]]) -> bool:
        """Replace the cart document for a user"""

    @abstractmethod
    async def clear_cart(self, user_id: str) -> bool:
        """Delete the cart document for a user"""
