"""In-process implementation of the BackendStore interface.

Holds payloads in a dictionary with per-entry expiry. Useful as the default
store for a single process and as a real store in tests.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from sharedkv.domain.interfaces.backend_store import BackendStore
from sharedkv.domain.models.common import DerivedKey, Payload

logger = logging.getLogger(__name__)

# 0 means no bound on the number of entries
DEFAULT_MAX_ITEMS = 0


@dataclass
class StoreEntry:
    """Internal representation of a stored payload with expiry."""
    value: Payload
    expiry_time: Optional[float]  # clock deadline, None for no expiry


class MemoryStore(BackendStore):
    """Thread-safe dictionary store with TTL and optional size bound."""

    def __init__(self, max_items: int = DEFAULT_MAX_ITEMS, clock: Callable[[], float] = time.monotonic):
        """Initializes the memory store.

        Args:
            max_items: Maximum number of entries kept; the oldest insertion is
                evicted first. 0 disables the bound.
            clock: Monotonic time source used for expiry.

        Raises:
            ValueError: If max_items is negative.
        """
        if max_items < 0:
            raise ValueError(f"max_items must be 0 or positive, got {max_items}")
        self._clock = clock
        self._entries: Dict[DerivedKey, StoreEntry] = {}
        self._max_items = max_items
        self._lock = threading.Lock()
        logger.info(f"MemoryStore initialized. max_items={max_items or 'unbounded'}")

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._entries)

    def _is_expired(self, entry: StoreEntry, now: float) -> bool:
        return entry.expiry_time is not None and now >= entry.expiry_time

    def _prune(self) -> None:
        """Removes expired entries and evicts oldest ones if over the limit. Caller holds the lock."""
        now = self._clock()
        expired_keys = [k for k, entry in self._entries.items() if self._is_expired(entry, now)]
        for k in expired_keys:
            del self._entries[k]

        if self._max_items:
            while len(self._entries) > self._max_items:
                # Dicts keep insertion order, so the first key is the oldest
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
                logger.debug(f"MemoryStore EVICTED key: {oldest_key[:10]!r}...")

    def get(self, key: DerivedKey) -> Tuple[Optional[Payload], bool]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                return None, False
            return entry.value, True

    def set(self, key: DerivedKey, value: Payload, ttl: int) -> bool:
        expiry = self._clock() + ttl if ttl > 0 else None
        with self._lock:
            # Re-inserting moves the key to the back of the eviction order
            self._entries.pop(key, None)
            self._entries[key] = StoreEntry(value=value, expiry_time=expiry)
            self._prune()
        return True

    def delete(self, key: DerivedKey) -> bool:
        with self._lock:
            entry = self._entries.pop(key, None)
        return entry is not None and not self._is_expired(entry, self._clock())

    def clear(self) -> bool:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared MemoryStore. Removed {count} items.")
        return True
