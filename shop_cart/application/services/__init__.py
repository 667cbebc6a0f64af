"""
Application services
"""

from .cart_orchestrator import CartOrchestrator, SyncPhase, items_snapshot

__all__ = [
    'CartOrchestrator',
    'SyncPhase',
    'items_snapshot',
]
