"""
keyload.keys
------------
Streaming decoder for key files.

A key file is UTF-8 JSON Lines, one key record per line. Blank lines and
lines starting with ``#`` are skipped. ``read_keys()`` is a generator: it
yields one KeyResult per record as the file is read, and a record that fails
to decode yields a KeyResult carrying the cause instead of ending the stream.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Iterator, Optional
import json
from .crypto import compute_pubkey_fingerprint, load_public_key
from .errors import KeyDecodeError
from .storage.models import KeyRecord, STATUSES
from .utils import b64e


@dataclass
class KeyResult:
    line: int
    record: Optional[KeyRecord] = None
    error: Optional[KeyDecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _optional_str(obj: Dict[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise KeyDecodeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def decode_key(obj: Any) -> KeyRecord:
    """Build a KeyRecord from one parsed JSON object."""
    if not isinstance(obj, dict):
        raise KeyDecodeError(f"expected a JSON object, got {type(obj).__name__}")

    owner = _optional_str(obj, "owner")
    if not owner:
        raise KeyDecodeError("missing owner")

    try:
        raw = load_public_key(
            pubkey_b64=_optional_str(obj, "pubkey_b64"),
            pubkey_pem=_optional_str(obj, "pubkey_pem"),
        )
    except ValueError as e:
        raise KeyDecodeError(str(e)) from e

    pubkey_b64 = b64e(raw)
    fingerprint = compute_pubkey_fingerprint(pubkey_b64)
    claimed = _optional_str(obj, "fingerprint")
    if claimed is not None and claimed.lower() != fingerprint:
        raise KeyDecodeError(f"fingerprint mismatch: record says {claimed}, key is {fingerprint}")

    status = _optional_str(obj, "status") or "trusted"
    if status not in STATUSES:
        raise KeyDecodeError(f"unknown status {status!r}")

    return KeyRecord(
        owner=owner,
        pubkey_b64=pubkey_b64,
        fingerprint=fingerprint,
        status=status,
        expires_at=_optional_str(obj, "expires_at"),
    )


def read_keys(fp: BinaryIO) -> Iterator[KeyResult]:
    """Lazily decode every key record in an open binary file."""
    for lineno, raw in enumerate(fp, start=1):
        try:
            # A byte-order mark may only lead the first line
            line = raw.decode("utf-8-sig" if lineno == 1 else "utf-8").strip()
        except UnicodeDecodeError as e:
            yield KeyResult(lineno, error=KeyDecodeError(f"line {lineno}: not UTF-8: {e}"))
            continue

        if not line or line.startswith("#"):
            continue

        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            yield KeyResult(lineno, error=KeyDecodeError(f"line {lineno}: invalid JSON: {e}"))
            continue

        try:
            record = decode_key(obj)
        except KeyDecodeError as e:
            yield KeyResult(lineno, error=KeyDecodeError(f"line {lineno}: {e}"))
            continue
        yield KeyResult(lineno, record=record)
