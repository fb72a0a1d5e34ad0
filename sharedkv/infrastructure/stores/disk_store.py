"""Disk-backed implementation of the BackendStore interface.

Wraps a diskcache.Cache directory. Every process pointing at the same
directory sees the same entries, which makes it the shared store used by the
command line tool.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import diskcache as dc

from sharedkv.domain.interfaces.backend_store import BackendStore
from sharedkv.domain.models.common import DerivedKey, Payload

logger = logging.getLogger(__name__)

# Default Configuration Constants
DEFAULT_STORE_DIR = Path.home() / ".sharedkv" / "store"
DEFAULT_TIMEOUT_SECONDS = 1  # SQLite lock timeout used by diskcache

_MISSING = object()


class DiskStore(BackendStore):
    """Shared store persisted in a diskcache directory."""

    def __init__(
        self,
        directory: Union[str, Path] = DEFAULT_STORE_DIR,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Opens (or creates) the cache directory.

        Args:
            directory: Directory holding the diskcache database.
            timeout: Seconds to wait on the database lock.
        """
        self.directory = Path(directory)
        self._cache = dc.Cache(str(self.directory), timeout=timeout)
        logger.info(f"Initialized disk store at: {self._cache.directory}")

    def __enter__(self) -> "DiskStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Closes the underlying database connection."""
        self._cache.close()

    def get(self, key: DerivedKey) -> Tuple[Optional[Payload], bool]:
        value = self._cache.get(key, default=_MISSING)
        if value is _MISSING:
            return None, False
        return Payload(value), True

    def set(self, key: DerivedKey, value: Payload, ttl: int) -> bool:
        expire = ttl if ttl > 0 else None
        stored = self._cache.set(key, bytes(value), expire=expire)
        logger.debug(f"Disk store PUT key: {key[:10]!r}... TTL: {ttl}s")
        return bool(stored)

    def delete(self, key: DerivedKey) -> bool:
        return bool(self._cache.delete(key))

    def clear(self) -> bool:
        count = self._cache.clear()
        logger.info(f"Cleared disk store. Removed {count} items.")
        return True
