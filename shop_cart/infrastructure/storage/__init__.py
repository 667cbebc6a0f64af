"""
Client-persistent storage implementations
"""

from .blob_storage import FileBlobStorage, InMemoryBlobStorage

__all__ = ["FileBlobStorage", "InMemoryBlobStorage"]
