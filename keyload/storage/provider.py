# keyload/storage/provider.py
from __future__ import annotations
from typing import Dict, List, Optional
from keyload.storage.models import KeyRecord


class StorageProvider:
    # Interface
    name: str = "base"

    def insert(self, keys: List[KeyRecord]) -> int:
        """Store a batch of keys in one call. Returns the number written."""
        raise NotImplementedError

    def get_key(self, fingerprint: str) -> Optional[KeyRecord]: ...
    def count_keys(self) -> int: ...
    def count_by_status(self) -> Dict[str, int]: ...

    def close(self) -> None:
        return
