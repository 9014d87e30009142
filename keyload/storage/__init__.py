# keyload/storage/__init__.py

from .models import KeyRecord
from .provider import StorageProvider
from .providers.memory_provider import InMemoryStorage
from .providers.sqlite_provider import SQLiteStorage
from keyload.errors import StorageConnectionError
from keyload.logger import get_logger

log = get_logger("keyload.storage")


def dial_storage(settings) -> StorageProvider:
    """
    Open the storage backend described by ``settings`` (a StorageSettings).

    Supported providers:
        - sqlite (default)
        - memory

    Raises StorageConnectionError when the backend cannot be opened.
    """
    provider = settings.provider

    if provider == "memory":
        log.info("[STORAGE] using in-memory keyring")
        return InMemoryStorage()

    if provider == "sqlite":
        storage = SQLiteStorage(settings.sqlite_path)
        log.info(f"[STORAGE] connected sqlite path={settings.sqlite_path}")
        return storage

    raise StorageConnectionError(f"Unknown storage provider: {provider}")


__all__ = [
    "KeyRecord",
    "StorageProvider",
    "InMemoryStorage",
    "SQLiteStorage",
    "dial_storage",
]
