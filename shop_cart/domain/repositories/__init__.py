"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .blob_storage import BlobStorage
from .cart_persistence import CartPersistenceAdapter
from .catalog_repository import CatalogRepository
from .remote_cart_store import RemoteCartStore

__all__ = [
    "BlobStorage",
    "CartPersistenceAdapter",
    "CatalogRepository",
    "RemoteCartStore",
]
