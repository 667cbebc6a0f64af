"""
Cart notifications

User-facing transient messages ("added to cart", "only 3 left"). The UI layer
plugs in its own notifier; the default writes to the log.
"""

import logging
from abc import ABC, abstractmethod


class CartNotifier(ABC):
    """Delivers transient user-facing cart messages"""

    @abstractmethod
    def success(self, message: str) -> None:
        """Positive confirmation"""

    @abstractmethod
    def error(self, message: str) -> None:
        """Rejected or failed operation"""


class LoggingCartNotifier(CartNotifier):
    """Notifier that records messages in the application log"""

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger("shop_cart.notifications")

    def success(self, message: str) -> None:
        self._logger.info("🔔 %s", message)

    def error(self, message: str) -> None:
        self._logger.warning("🔔 %s", message)
