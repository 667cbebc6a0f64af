"""
Domain value objects package

Contains immutable value objects that represent concepts in the business domain.
"""

from .money import ZERO, round_currency, to_decimal
from .product_id import ProductId
from .user_id import UserId

__all__ = [
    "ProductId",
    "UserId",
    "ZERO",
    "round_currency",
    "to_decimal",
]
