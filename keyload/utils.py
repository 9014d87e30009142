"""
keyload.utils
-------------
Small helpers for base64 handling, timestamps and hashing shared by the
decoder, the crypto helpers and the reconciliation stats writer.
"""

from __future__ import annotations
import base64, hashlib, time


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    # validate=True rejects stray characters instead of silently dropping them
    return base64.b64decode(s.encode("ascii"), validate=True)

def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def file_ts() -> str:
    # Filesystem-safe variant of now_ts()
    return time.strftime("%Y%m%dT%H%M%SZ", time.gmtime())

def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
