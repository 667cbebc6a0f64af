"""
Blob storage interface

String-keyed, string-valued client-persistent storage.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStorage(ABC):
    """Key/value blob store"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Stored value, or None"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present"""
