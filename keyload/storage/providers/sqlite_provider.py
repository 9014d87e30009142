from __future__ import annotations
from typing import Optional, Dict, List
import sqlite3, os
from keyload.errors import StorageConnectionError, StorageError
from keyload.storage.provider import StorageProvider
from keyload.storage.models import KeyRecord


class SQLiteStorage(StorageProvider):
    name = "sqlite"

    def __init__(self, path="db/keyring.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        try:
            os.makedirs(dir_path, exist_ok=True)
            self.db = sqlite3.connect(path, check_same_thread=False)
            self._init()
        except (OSError, sqlite3.Error) as e:
            raise StorageConnectionError(f"cannot open sqlite storage {path!r}: {e}") from e
        self.path = path

    def _init(self) -> None:
        c = self.db.cursor()
        c.execute("""CREATE TABLE IF NOT EXISTS keyring(
            fingerprint TEXT PRIMARY KEY,
            owner TEXT NOT NULL,
            pubkey_b64 TEXT NOT NULL,
            status TEXT,
            expires_at TEXT
        )""")
        c.execute("CREATE INDEX IF NOT EXISTS keyring_owner ON keyring(owner)")
        self.db.commit()

    def insert(self, keys: List[KeyRecord]) -> int:
        # One transaction per batch: either every row lands or none does
        try:
            with self.db:
                self.db.executemany(
                    "INSERT INTO keyring(fingerprint,owner,pubkey_b64,status,expires_at) VALUES(?,?,?,?,?) "
                    "ON CONFLICT(fingerprint) DO UPDATE SET owner=excluded.owner, pubkey_b64=excluded.pubkey_b64, "
                    "status=excluded.status, expires_at=excluded.expires_at",
                    [(k.fingerprint, k.owner, k.pubkey_b64, k.status, k.expires_at) for k in keys],
                )
        except sqlite3.Error as e:
            raise StorageError(f"sqlite insert failed: {e}") from e
        return len(keys)

    def get_key(self, fingerprint: str) -> Optional[KeyRecord]:
        cur = self.db.execute(
            "SELECT owner,pubkey_b64,fingerprint,status,expires_at FROM keyring WHERE fingerprint=?",
            (fingerprint,)
        )
        row = cur.fetchone()
        if not row: return None
        return KeyRecord(*row)

    def count_keys(self) -> int:
        return self.db.execute("SELECT COUNT(*) FROM keyring").fetchone()[0]

    def count_by_status(self) -> Dict[str, int]:
        cur = self.db.execute("SELECT status, COUNT(*) FROM keyring GROUP BY status")
        return {status: n for status, n in cur.fetchall()}

    def close(self):
        self.db.close()
