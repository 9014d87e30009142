from typing import Dict, List, Optional
from keyload.storage.models import KeyRecord
from keyload.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    name = "memory"

    def __init__(self):
        self.keys: Dict[str, KeyRecord] = {}
        self.batches = 0

    def insert(self, keys: List[KeyRecord]) -> int:
        for rec in keys:
            self.keys[rec.fingerprint] = rec
        self.batches += 1
        return len(keys)

    def get_key(self, fingerprint: str) -> Optional[KeyRecord]:
        return self.keys.get(fingerprint)

    def count_keys(self) -> int:
        return len(self.keys)

    def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for rec in self.keys.values():
            counts[rec.status] = counts.get(rec.status, 0) + 1
        return counts
