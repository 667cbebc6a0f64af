"""
Custom exceptions for the shop cart
"""

from shop_cart.infrastructure.utilities.constants import ErrorMessages


class ShopCartError(Exception):
    """Base exception for the shop cart"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"


class CartValidationError(ShopCartError):
    """Rejected cart mutation"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class StockLimitError(CartValidationError):
    """Requested quantity is above the available stock"""

    def __init__(self, product_id: str, available: int):
        super().__init__(
            ErrorMessages.STOCK_LIMIT.format(stock=available), field="quantity"
        )
        self.error_code = "STOCK_LIMIT"
        self.product_id = product_id
        self.available = available


class CartPersistenceError(ShopCartError):
    """Remote cart store read or write failed"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            "Sorry, we couldn't save your cart. Your changes are kept on this device.",
            "PERSISTENCE_ERROR",
        )
        self.operation = operation
