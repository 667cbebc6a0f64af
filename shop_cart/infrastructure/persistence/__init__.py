"""
Cart persistence adapters
"""

from .local_cart_adapter import LocalCartAdapter
from .remote_cart_adapter import RemoteCartAdapter, serialize_items

__all__ = ["LocalCartAdapter", "RemoteCartAdapter", "serialize_items"]
