# keyload/inserter.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import sqlite3, time
from keyload.errors import StorageError
from keyload.logger import get_logger
from keyload.storage import KeyRecord, StorageProvider

log = get_logger("keyload.inserter")


@dataclass
class LoadResult:
    """Outcome of loading one key file."""
    path: str
    loaded: int = 0
    failed: int = 0
    inserted: bool = False
    elapsed: float = 0.0
    error: Optional[str] = None


def insert_batch(storage: StorageProvider, keys: List[KeyRecord], path: str,
                 result: Optional[LoadResult] = None) -> LoadResult:
    """
    Submit every key decoded from ``path`` to storage in a single call.

    Storage failures are logged and recorded on the result; they never
    propagate, so the caller can move on to the next file.
    """
    result = result or LoadResult(path=path)
    result.loaded = len(keys)

    t = time.monotonic()
    try:
        storage.insert(keys)
    except (StorageError, sqlite3.Error) as e:
        result.elapsed = time.monotonic() - t
        result.error = str(e)
        log.error(f"failed to insert keys from {path!r}: {e}")
        return result

    result.elapsed = time.monotonic() - t
    result.inserted = True
    log.info(f"loaded {len(keys)} keys from {path!r} in {result.elapsed:.3f}s")
    return result
