"""
SQLAlchemy Cart Store

Concrete implementation of RemoteCartStore: one row per user holding the
product_id -> {"quantity", "addedAt"} map as JSON.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from shop_cart.domain.repositories.remote_cart_store import RemoteCartStore
from shop_cart.infrastructure.database.models import CartModel
from shop_cart.infrastructure.database.operations import DatabaseManager


class SQLAlchemyCartStore(RemoteCartStore):
    """SQLAlchemy implementation of the remote cart store"""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_cart(self, user_id: str) -> Optional[Dict[str, Dict[str, Any]]]:
        """Get the cart document for a user"""
        self._logger.info("🔍 GET CART: Fetching cart for user %s", user_id)
        try:
            with self._db.managed_session() as session:
                cart = session.get(CartModel, user_id)
                if cart is None:
                    self._logger.info("📭 NO CART: User %s has no cart", user_id)
                    return None
                items = dict(cart.items or {})
                self._logger.info("📦 CART FOUND: User %s has %d entries", user_id, len(items))
                return items
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR reading cart for %s: %s", user_id, e)
            raise

    async def update_cart(self, user_id: str, cart_data: Dict[str, Dict[str, Any]]) -> bool:
        """Replace the cart document for a user"""
        self._logger.info("🔄 UPDATE CART: User %s, %d entries", user_id, len(cart_data))
        try:
            with self._db.managed_session() as session:
                cart = session.get(CartModel, user_id)
                if cart is None:
                    session.add(CartModel(user_id=user_id, items=dict(cart_data)))
                    self._logger.info("🆕 CART CREATED for user %s", user_id)
                else:
                    # New dict so the JSON column is marked dirty
                    cart.items = dict(cart_data)
            return True
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR updating cart for %s: %s", user_id, e)
            return False

    async def clear_cart(self, user_id: str) -> bool:
        """Delete the cart document for a user"""
        self._logger.info("🗑️ CLEAR CART: User %s", user_id)
        try:
            with self._db.managed_session() as session:
                cart = session.get(CartModel, user_id)
                if cart is not None:
                    session.delete(cart)
            return True
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR clearing cart for %s: %s", user_id, e)
            return False
