"""
Client-persistent blob storage

FileBlobStorage keeps one UTF-8 file per key, written atomically;
InMemoryBlobStorage is the throwaway variant for tests and ephemeral sessions.
"""

import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional

from shop_cart.domain.repositories.blob_storage import BlobStorage

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class FileBlobStorage(BlobStorage):
    """Blob storage rooted at a directory"""

    def __init__(self, directory: str):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        safe = _SAFE_KEY.sub("_", key)
        if safe != key:
            # Keep distinct keys distinct after sanitising
            safe = f"{safe}-{hashlib.sha256(key.encode()).hexdigest()[:8]}"
        return self._directory / f"{safe}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def __repr__(self):
        return f"FileBlobStorage(directory={str(self._directory)!r})"


class InMemoryBlobStorage(BlobStorage):
    """Dictionary-backed blob storage"""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)
