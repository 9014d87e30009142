"""
keyload.loader
--------------
The load loop: resolve each pattern, decode every matching file, and insert
what decoded cleanly, one file at a time.

Each failure is logged and costs only the unit it happened in: one pattern,
one file, one record or one file's batch.
"""

from __future__ import annotations
from typing import BinaryIO, Iterable, List, Tuple
from keyload.errors import PatternError
from keyload.inserter import LoadResult, insert_batch
from keyload.keys import read_keys
from keyload.logger import get_logger
from keyload.resolver import resolve
from keyload.storage import KeyRecord, StorageProvider

log = get_logger("keyload.loader")


def collect_keys(fp: BinaryIO, path: str) -> Tuple[List[KeyRecord], int]:
    """Drain the key stream of one file. Returns (records, failure count)."""
    keys: List[KeyRecord] = []
    failed = 0
    for kr in read_keys(fp):
        if kr.error is not None:
            failed += 1
            log.error(f"error reading key from {path!r}: {kr.error}")
        else:
            keys.append(kr.record)
    return keys, failed


def load_file(storage: StorageProvider, path: str) -> LoadResult:
    result = LoadResult(path=path)
    try:
        f = open(path, "rb")
    except OSError as e:
        result.error = str(e)
        log.error(f"failed to open {path!r} for reading: {e}")
        return result

    with f:
        keys, result.failed = collect_keys(f, path)
    return insert_batch(storage, keys, path, result)


def load_patterns(storage: StorageProvider, patterns: Iterable[str]) -> List[LoadResult]:
    """Load every file matched by ``patterns``, strictly in argument order."""
    results: List[LoadResult] = []
    for pattern in patterns:
        try:
            matches = resolve(pattern)
        except PatternError as e:
            log.error(f"failed to match {pattern!r}: {e}")
            continue

        if not matches:
            log.warning(f"no files match {pattern!r}")
            continue

        for path in matches:
            results.append(load_file(storage, path))
    return results
