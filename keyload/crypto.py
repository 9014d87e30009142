"""
keyload.crypto
--------------
Key material helpers used by the key stream decoder:

- Ed25519: key generation and public key validation
- PEM <-> raw conversion for SubjectPublicKeyInfo encoded public keys
- Fingerprints: stable identifiers used as the storage primary key
"""

from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives import serialization
from .utils import b64d, sha256


# --------- Ed25519 ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def ed25519_public_pem(pub_raw: bytes) -> str:
    pk = ed25519.Ed25519PublicKey.from_public_bytes(pub_raw)
    return pk.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

# --------- Public key loading ----------
def load_public_key(pubkey_b64: str | None = None, pubkey_pem: str | None = None) -> bytes:
    """
    Validate an Ed25519 public key and return its raw 32 bytes.

    Exactly one of ``pubkey_b64`` (raw key, base64) or ``pubkey_pem``
    (SubjectPublicKeyInfo PEM) must be given. Raises ValueError on anything
    that is not a well-formed Ed25519 public key.
    """
    if (pubkey_b64 is None) == (pubkey_pem is None):
        raise ValueError("exactly one of pubkey_b64 or pubkey_pem is required")

    if pubkey_b64 is not None:
        try:
            raw = b64d(pubkey_b64)
        except (ValueError, UnicodeEncodeError) as e:
            raise ValueError(f"invalid base64 public key: {e}") from e
        # from_public_bytes raises ValueError on a wrong length
        return ed25519.Ed25519PublicKey.from_public_bytes(raw).public_bytes_raw()

    try:
        pk = serialization.load_pem_public_key(pubkey_pem.encode("ascii"))
    except (ValueError, UnicodeEncodeError, UnsupportedAlgorithm) as e:
        raise ValueError(f"invalid PEM public key: {e}") from e
    if not isinstance(pk, ed25519.Ed25519PublicKey):
        raise ValueError(f"unsupported public key type {type(pk).__name__}")
    return pk.public_bytes_raw()

def compute_pubkey_fingerprint(pubkey_b64: str) -> str:
    """
    Compute a stable fingerprint for an Ed25519 public key.

    - Input: base64-encoded Ed25519 public key
    - Output: hex-encoded SHA256 hash (truncated to 32 chars for readability)
    """

    raw = b64d(pubkey_b64)
    digest = sha256(raw)

    # Shorten to 16 bytes = 32 hex chars to keep the keyring index small
    return digest[:32]
