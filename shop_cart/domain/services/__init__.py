"""
Domain services

Pure cart logic: actions, reducer and totals calculator.
"""

from .cart_actions import (
    ITEM_ACTIONS,
    AddItem,
    CartAction,
    ClearCart,
    ClearError,
    RemoveItem,
    SetCart,
    SetError,
    SetLoading,
    SetSyncing,
    UpdateItem,
)
from .cart_reducer import cart_reducer
from .totals_calculator import DEFAULT_PRICING_RULES, PricingRules, compute_totals

__all__ = [
    "ITEM_ACTIONS",
    "AddItem",
    "CartAction",
    "ClearCart",
    "ClearError",
    "RemoveItem",
    "SetCart",
    "SetError",
    "SetLoading",
    "SetSyncing",
    "UpdateItem",
    "cart_reducer",
    "DEFAULT_PRICING_RULES",
    "PricingRules",
    "compute_totals",
]
