"""
Application constants for the shop cart

Centralizes the business numbers and storage keys used by the cart core so the
defaults in Settings and the tests read from one place.
"""

from decimal import Decimal
from typing import Final


# Business logic constants
class BusinessSettings:
    """Pricing rules and per-item limits"""

    GST_RATE: Final[Decimal] = Decimal("0.18")  # 18% GST
    MIN_ORDER_FOR_FREE_SHIPPING: Final[Decimal] = Decimal("999")
    FLAT_SHIPPING_FEE: Final[Decimal] = Decimal("50")


class ValidationSettings:
    """Cart quantity limits"""

    MAX_QUANTITY_PER_ITEM: Final[int] = 99
    MIN_CART_ITEM_QUANTITY: Final[int] = 1


# Synchronisation constants
class SyncSettings:
    """Remote cart mirror settings"""

    SYNC_DEBOUNCE_SECONDS: Final[float] = 1.0


# Storage keys and locations
class StorageSettings:
    """Client-persistent storage layout"""

    GUEST_CART_STORAGE_KEY: Final[str] = "nutrition_shop_cart"
    DEFAULT_STORAGE_DIR: Final[str] = "data/local_storage"
    DEFAULT_DATABASE_URL: Final[str] = "sqlite:///data/shop_cart.db"


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    JSON_LOG_BACKUP_COUNT: Final[int] = 5


class FileSettings:
    """Log file names"""

    MAIN_LOG_FILE: Final[str] = "shop_cart.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"
    JSON_LOG_FILE: Final[str] = "shop_cart.json.log"


class ErrorMessages:
    """User-facing cart messages"""

    INVALID_QUANTITY: Final[str] = "Invalid quantity"
    MAX_QUANTITY_PER_ITEM: Final[str] = "Maximum quantity per item is {limit}"
    OUT_OF_STOCK: Final[str] = "Product is out of stock"
    PRODUCT_UNAVAILABLE: Final[str] = "Product is no longer available"
    STOCK_LIMIT: Final[str] = "Only {stock} items available in stock"
    ITEM_NOT_FOUND: Final[str] = "Item not found in cart"
    LOAD_FAILED: Final[str] = "Failed to load cart"
    SYNC_FAILED: Final[str] = "Failed to sync cart"
    CLEAR_FAILED: Final[str] = "Failed to clear cart"
    VALIDATE_FAILED: Final[str] = "Failed to validate cart. Please try again."
    MERGE_REQUIRES_LOGIN: Final[str] = "Sign in to merge your guest cart"
    CART_INVALID: Final[str] = "Some items in your cart are no longer available"
    CART_VALID: Final[str] = "Cart is valid"
    PRODUCT_NOT_FOUND: Final[str] = "Product no longer exists"
    STOCK_BELOW_QUANTITY: Final[str] = "Only {stock} items available"
    ADD_FAILED: Final[str] = "Failed to add item to cart"
    UPDATE_FAILED: Final[str] = "Failed to update quantity"
    REMOVE_FAILED: Final[str] = "Failed to remove item"
    MERGE_FAILED: Final[str] = "Failed to merge guest cart"


class SuccessMessages:
    """User-facing confirmations"""

    ITEM_ADDED: Final[str] = "{name} added to cart"
    ITEM_REMOVED: Final[str] = "Item removed from cart"
    CART_CLEARED: Final[str] = "Cart cleared"
    GUEST_CART_MERGED: Final[str] = "{count} items from your guest cart were added"
