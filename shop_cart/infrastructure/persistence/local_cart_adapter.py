"""
Local cart adapter

Guest carts live as one JSON snapshot (items plus derived totals) in
client-persistent storage. The snapshot is self-contained: loading never
touches the catalog. Storage is a best-effort cache, so failures are logged
and swallowed.
"""

import json
import logging
from typing import List, Optional, Sequence

from shop_cart.domain.entities.cart_entity import CartLineItem, now_ms
from shop_cart.domain.repositories.blob_storage import BlobStorage
from shop_cart.domain.repositories.cart_persistence import CartPersistenceAdapter
from shop_cart.domain.services.totals_calculator import (
    DEFAULT_PRICING_RULES,
    PricingRules,
    compute_totals,
)


class LocalCartAdapter(CartPersistenceAdapter):
    """Persistence adapter for the guest cart snapshot"""

    def __init__(
        self,
        storage: BlobStorage,
        key: str,
        rules: PricingRules = DEFAULT_PRICING_RULES,
    ):
        self._storage = storage
        self._key = key
        self._rules = rules
        self._logger = logging.getLogger(self.__class__.__name__)

    async def load(self) -> Optional[List[CartLineItem]]:
        try:
            raw = self._storage.get_item(self._key)
            if raw is None:
                return None
            snapshot = json.loads(raw)
            return [CartLineItem.from_dict(entry) for entry in snapshot.get("items", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            self._logger.warning("⚠️ Error loading local cart: %s", e)
            return None

    async def save(self, items: Sequence[CartLineItem]) -> None:
        snapshot = {
            "items": [item.to_dict() for item in items],
            "totals": compute_totals(items, self._rules).to_dict(),
            "savedAt": now_ms(),
        }
        try:
            self._storage.set_item(self._key, json.dumps(snapshot))
        except (OSError, TypeError, ValueError) as e:
            self._logger.warning("⚠️ Error saving local cart: %s", e)

    async def clear(self) -> None:
        try:
            self._storage.remove_item(self._key)
        except OSError as e:
            self._logger.warning("⚠️ Error clearing local cart: %s", e)
