import json
import pytest
from keyload.crypto import ed25519_generate
from keyload.utils import b64e


@pytest.fixture
def key_line():
    """Build one JSON key record line with a fresh Ed25519 key."""
    def make(owner="alice", **extra):
        _, pub = ed25519_generate()
        obj = {"owner": owner, "pubkey_b64": b64e(pub)}
        obj.update(extra)
        return json.dumps(obj)
    return make


@pytest.fixture
def write_keys():
    def write(path, lines):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return write
