"""
User-facing notification delivery
"""

from .cart_notifier import CartNotifier, LoggingCartNotifier

__all__ = ["CartNotifier", "LoggingCartNotifier"]
