"""
Domain entities package
"""

from .cart_entity import CartLineItem, CartState, CartTotals, now_ms
from .product_entity import Product

__all__ = ["CartLineItem", "CartState", "CartTotals", "Product", "now_ms"]
