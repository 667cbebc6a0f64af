"""
Application DTOs
"""

from .cart_dtos import (
    CartItemInfo,
    CartOperationResponse,
    CartSummary,
    CartValidationResult,
    InvalidCartItem,
    MergeResult,
    PriceChange,
)

__all__ = [
    "CartItemInfo",
    "CartOperationResponse",
    "CartSummary",
    "CartValidationResult",
    "InvalidCartItem",
    "MergeResult",
    "PriceChange",
]
