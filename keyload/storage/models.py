# keyload/storage/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

STATUSES = ("trusted", "revoked", "pending", "untrusted")


@dataclass
class KeyRecord:
    """
    Storage-level representation of one decoded public key.

    The load pipeline treats it as opaque; only the decoder builds it and
    only storage providers look inside.
    """
    owner: str
    pubkey_b64: str
    fingerprint: str
    status: str = "trusted"   # trusted | revoked | pending | untrusted
    expires_at: Optional[str] = None
