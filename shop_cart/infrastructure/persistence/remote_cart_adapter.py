"""
Remote cart adapter

Mirrors a signed-in user's cart to the remote cart store. Only quantity and
add time are stored remotely; name, price, image and stock are re-resolved
against the catalog on every load so catalog price changes show up on the
next load.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from shop_cart.domain.entities.cart_entity import CartLineItem, now_ms
from shop_cart.domain.entities.product_entity import Product
from shop_cart.domain.repositories.cart_persistence import CartPersistenceAdapter
from shop_cart.domain.repositories.catalog_repository import CatalogRepository
from shop_cart.domain.repositories.remote_cart_store import RemoteCartStore
from shop_cart.infrastructure.utilities.exceptions import CartPersistenceError


def serialize_items(items: Sequence[CartLineItem]) -> Dict[str, Dict[str, int]]:
    """product_id -> {"quantity", "addedAt"}"""
    return {
        item.product_id: {"quantity": item.quantity, "addedAt": item.added_at}
        for item in items
    }


def _parse_entry(entry: Any) -> Optional[Dict[str, int]]:
    if not isinstance(entry, dict):
        return None
    quantity = entry.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        return None
    added_at = entry.get("addedAt")
    if isinstance(added_at, bool) or not isinstance(added_at, (int, float)):
        added_at = now_ms()
    return {"quantity": quantity, "addedAt": int(added_at)}


class RemoteCartAdapter(CartPersistenceAdapter):
    """Persistence adapter bound to one user's remote cart document"""

    def __init__(self, store: RemoteCartStore, catalog: CatalogRepository, user_id: str):
        self._store = store
        self._catalog = catalog
        self.user_id = user_id
        self._logger = logging.getLogger(self.__class__.__name__)

    async def load(self) -> Optional[List[CartLineItem]]:
        try:
            data = await self._store.get_cart(self.user_id)
        except Exception as e:
            raise CartPersistenceError(f"Failed to read cart for {self.user_id}: {e}", "load") from e

        if data is None:
            return None

        entries = []
        for product_id, raw in data.items():
            entry = _parse_entry(raw)
            if entry is None:
                self._logger.warning("⚠️ MALFORMED CART ENTRY dropped: %s -> %r", product_id, raw)
                continue
            entries.append((product_id, entry))

        try:
            products = await asyncio.gather(
                *(self._catalog.find_by_id(product_id) for product_id, _ in entries)
            )
        except Exception as e:
            raise CartPersistenceError(f"Failed to resolve cart products: {e}", "load") from e

        items: List[CartLineItem] = []
        for (product_id, entry), product in zip(entries, products):
            if product is None:
                self._logger.info("🗑️ STALE CART ENTRY dropped: product %s no longer exists", product_id)
                continue
            items.append(self._to_line_item(product, entry))

        self._logger.info("📦 REMOTE CART LOADED: user %s, %d items", self.user_id, len(items))
        return items

    @staticmethod
    def _to_line_item(product: Product, entry: Dict[str, int]) -> CartLineItem:
        return CartLineItem(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=entry["quantity"],
            max_quantity=product.inventory or 0,
            image=product.primary_image,
            added_at=entry["addedAt"],
        )

    async def save(self, items: Sequence[CartLineItem]) -> None:
        try:
            ok = await self._store.update_cart(self.user_id, serialize_items(items))
        except Exception as e:
            raise CartPersistenceError(f"Failed to write cart for {self.user_id}: {e}", "save") from e
        if not ok:
            raise CartPersistenceError(f"Remote store rejected cart write for {self.user_id}", "save")

    async def clear(self) -> None:
        try:
            ok = await self._store.clear_cart(self.user_id)
        except Exception as e:
            raise CartPersistenceError(f"Failed to clear cart for {self.user_id}: {e}", "clear") from e
        if not ok:
            raise CartPersistenceError(f"Remote store rejected cart clear for {self.user_id}", "clear")
