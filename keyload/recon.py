"""
keyload.recon
-------------
Local handle on the keyserver's reconciliation peer.

The loader never talks to other keyservers. It only needs the peer's state
directory to exist and, once loading is done, a stats snapshot written there
so the peer starts from up-to-date counts.
"""

from __future__ import annotations
from typing import Any, Dict
import json, os, sqlite3
from keyload.errors import PeerError, StorageError
from keyload.logger import get_logger
from keyload.settings import ReconSettings
from keyload.storage import StorageProvider
from keyload.utils import now_ts

log = get_logger("keyload.recon")

STATS_FILE = "stats.json"


class ReconPeer:
    def __init__(self, storage: StorageProvider, path: str, settings: ReconSettings):
        self.storage = storage
        self.path = path
        self.settings = settings
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise PeerError(f"cannot create recon state dir {path!r}: {e}") from e

    @property
    def stats_path(self) -> str:
        return os.path.join(self.path, STATS_FILE)

    def write_stats(self) -> Dict[str, Any]:
        try:
            stats = {
                "ts": now_ts(),
                "total": self.storage.count_keys(),
                "by_status": self.storage.count_by_status(),
            }
        except (StorageError, sqlite3.Error) as e:
            raise StorageError(f"cannot read keyring stats: {e}") from e
        try:
            with open(self.stats_path, "w", encoding="utf-8") as f:
                json.dump(stats, f, sort_keys=True, indent=2)
        except OSError as e:
            log.error(f"[RECON] failed to write stats to {self.stats_path!r}: {e}")
            return stats
        log.info(f"[RECON] stats total={stats['total']} by_status={stats['by_status']} path={self.stats_path}")
        return stats


def new_peer(storage: StorageProvider, settings: ReconSettings) -> ReconPeer:
    peer = ReconPeer(storage, settings.path, settings)
    log.info(f"[RECON] peer ready path={settings.path} recon_addr={settings.recon_addr} http_addr={settings.http_addr}")
    return peer
