"""Cache Facade: the accessor contract over a shared key/value store.

Sits between application code and a BackendStore. Validates input, derives
namespaced keys, encodes boolean False distinctly from "not found", keeps
read/miss/write/delete counters and supports a read-bypass mode used to
force-refresh cached data.
"""

import hashlib
import logging
import threading
from typing import Optional

from sharedkv.core.value_codec import (
    RESERVED_STRING,
    SUPPORTED_TYPES,
    decode_value,
    encode_value,
)
from sharedkv.domain.errors import ConfigurationError, InvalidValueError, StoreError
from sharedkv.domain.interfaces.backend_store import BackendStore
from sharedkv.domain.interfaces.trigger_source import TriggerSource
from sharedkv.domain.models.common import (
    CacheKey,
    CacheStats,
    CacheValue,
    DerivedKey,
    Namespace,
)

logger = logging.getLogger(__name__)


class CacheFacade:
    """Front-end for a BackendStore with namespacing, analytics and bypass.

    One long-lived instance owns the namespace, the bypass flag and the
    counters; create a fresh instance to start from a clean state.

    Example Usage:
        >>> cache = CacheFacade(MemoryStore())
        >>> cache.init("ns1")
        >>> cache.write("user", "oliver")
        >>> cache.read("user")
        'oliver'
        >>> cache.get_stats()
        {'reads': 1, 'misses': 0, 'writes': 1, 'deletes': 0}
    """

    def __init__(self, store: BackendStore, require_namespace: bool = True):
        """Initializes the facade.

        Args:
            store: The backend store to front.
            require_namespace: When True, read/write/delete fail until init()
                has been called.
        """
        self._store = store
        self._require_namespace = require_namespace
        self._namespace: Optional[Namespace] = None
        self._bypass = False
        self._lock = threading.Lock()
        self._counters: CacheStats = {"reads": 0, "misses": 0, "writes": 0, "deletes": 0}
        logger.debug(
            f"CacheFacade initialized. store={store.__class__.__name__}, "
            f"require_namespace={require_namespace}"
        )

    # --- Namespace & Bypass ---

    def init(self, namespace: str) -> None:
        """Sets the namespace applied to every key. The last call wins.

        Raises:
            ConfigurationError: If namespace is not a non-empty string.
        """
        if not isinstance(namespace, str) or not namespace:
            raise ConfigurationError("Namespace must be a non-empty string", operation="init")
        with self._lock:
            self._namespace = Namespace(namespace)
        logger.info(f"Cache namespace set to '{namespace}'")

    @property
    def namespace(self) -> Optional[Namespace]:
        return self._namespace

    def set_bypass(self, enabled: bool) -> None:
        """Turns read-bypass on or off. While on, every read is a miss."""
        with self._lock:
            self._bypass = bool(enabled)
        logger.info(f"Cache read-bypass {'enabled' if enabled else 'disabled'}")

    @property
    def bypassed(self) -> bool:
        return self._bypass

    def setup_bypass_by(self, trigger_key: str, source: TriggerSource) -> bool:
        """Enables read-bypass if the control signal `trigger_key` is present.

        Returns:
            True if the signal was present and bypass was enabled.
        """
        if not source.is_present(trigger_key):
            return False
        logger.info(f"Bypass trigger '{trigger_key}' present")
        self.set_bypass(True)
        return True

    def check_for_flushing_by(self, trigger_key: str, source: TriggerSource) -> bool:
        """Flushes the store if the control signal `trigger_key` is present.

        Returns:
            True if the signal was present and the store was flushed.

        Raises:
            StoreError: If the flush itself fails.
        """
        if not source.is_present(trigger_key):
            return False
        logger.info(f"Flush trigger '{trigger_key}' present")
        self.flush()
        return True

    # --- Key Derivation ---

    def derive_key(self, key: CacheKey) -> DerivedKey:
        """Computes the key sent to the backend for a caller key.

        With a namespace set this is md5(namespace + key) as hex; the hash is
        only used for fixed-width keys. Without one the key is used as-is.
        """
        namespace = self._namespace
        if namespace is None:
            return DerivedKey(key.encode("utf-8"))
        digest = hashlib.md5((namespace + key).encode("utf-8"), usedforsecurity=False)
        return DerivedKey(digest.hexdigest().encode("ascii"))

    def _check_namespace(self, operation: str, key: Optional[str] = None) -> None:
        if self._require_namespace and self._namespace is None:
            raise ConfigurationError(
                "Namespace must be set with init() before use", operation=operation, key=key
            )

    def _check_key(self, operation: str, key: CacheKey) -> None:
        if not isinstance(key, str):
            raise InvalidValueError(
                f"Cache keys must be strings, got {type(key).__name__}", operation=operation
            )

    def _increment(self, counter: str) -> None:
        with self._lock:
            self._counters[counter] += 1

    # --- Operations ---

    def read(self, key: CacheKey) -> Optional[CacheValue]:
        """Reads a value from the backend store.

        Args:
            key: The caller key.

        Returns:
            The stored value, False for a stored boolean False, or None on a miss.

        Raises:
            ConfigurationError: If a namespace is required but unset.
            InvalidValueError: If key is not a string.
            StoreError: If the backend fails or returns an undecodable payload.
        """
        self._check_namespace("read", key)
        self._check_key("read", key)

        if self._bypass:
            self._increment("misses")
            logger.debug(f"Cache BYPASS for key: {key}")
            return None

        derived = self.derive_key(key)
        try:
            payload, found = self._store.get(derived)
        except Exception as e:
            logger.error(f"Backend read failed for key {key}: {e}", exc_info=True)
            raise StoreError(
                "Exception while attempting to read from store",
                operation="read", key=key, original_exception=e,
            ) from e

        if not found:
            self._increment("misses")
            logger.debug(f"Cache MISS for key: {key}")
            return None

        try:
            value = decode_value(payload)
        except ValueError as e:
            logger.error(f"Undecodable payload for key {key}: {e}")
            raise StoreError(
                "Store returned an undecodable payload",
                operation="read", key=key, original_exception=e,
            ) from e

        self._increment("reads")
        logger.debug(f"Cache HIT for key: {key}")
        return value

    def write(self, key: CacheKey, value: CacheValue, ttl: int = 0) -> None:
        """Writes a value to the backend store.

        Args:
            key: The caller key.
            value: A str, int, float or bool. None and the string "false"
                are refused.
            ttl: Time-to-live in seconds; 0 stores without expiry (the
                backend may still evict under memory pressure).

        Raises:
            ConfigurationError: If a namespace is required but unset.
            InvalidValueError: If the key, value or ttl is not accepted.
            StoreError: If the backend fails to store the value.
        """
        self._check_namespace("write", key)
        self._check_key("write", key)

        if value is None:
            raise InvalidValueError("Attempted to store a None value", operation="write", key=key)
        if isinstance(value, str) and value == RESERVED_STRING:
            raise InvalidValueError(
                f"Attempted to store the reserved string value '{RESERVED_STRING}'",
                operation="write", key=key,
            )
        if not isinstance(value, SUPPORTED_TYPES):
            raise InvalidValueError(
                f"Cannot store values of type {type(value).__name__}", operation="write", key=key
            )
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
            raise InvalidValueError(
                f"ttl must be a non-negative integer, got {ttl!r}", operation="write", key=key
            )

        payload = encode_value(value)
        derived = self.derive_key(key)
        try:
            stored = self._store.set(derived, payload, ttl)
        except Exception as e:
            logger.error(f"Backend write failed for key {key}: {e}", exc_info=True)
            raise StoreError(
                "Exception while attempting to write to store",
                operation="write", key=key, original_exception=e,
            ) from e

        if not stored:
            logger.error(f"Backend refused write for key {key}")
            raise StoreError("Store refused the write", operation="write", key=key)

        self._increment("writes")
        logger.debug(f"Cache WRITE key: {key} TTL: {ttl}s")

    def delete(self, key: CacheKey, throw_on_failure: bool = False) -> bool:
        """Deletes a key from the backend store.

        Args:
            key: The caller key.
            throw_on_failure: Raise StoreError when the backend fails (including
                when the key does not exist). Otherwise failures are ignored.

        Returns:
            True if the key was deleted, False for an ignored failure.

        Raises:
            ConfigurationError: If a namespace is required but unset.
            StoreError: On backend failure, only when throw_on_failure is True.
        """
        self._check_namespace("delete", key)
        self._check_key("delete", key)

        derived = self.derive_key(key)
        error: Optional[Exception] = None
        try:
            deleted = self._store.delete(derived)
        except Exception as e:
            error = e
            deleted = False

        if not deleted:
            if throw_on_failure:
                logger.error(f"Backend delete failed for key {key}: {error}")
                raise StoreError(
                    "Failed to delete key from store",
                    operation="delete", key=key, original_exception=error,
                ) from error
            logger.debug(f"Ignoring failed delete for key: {key} ({error})")
            return False

        self._increment("deletes")
        logger.debug(f"Cache DELETE key: {key}")
        return True

    def flush(self) -> None:
        """Clears every entry in the backend store. Counters are kept.

        Raises:
            StoreError: If the backend fails to clear.
        """
        try:
            cleared = self._store.clear()
        except Exception as e:
            logger.error(f"Backend flush failed: {e}", exc_info=True)
            raise StoreError(
                "Exception while attempting to flush store",
                operation="flush", original_exception=e,
            ) from e
        if not cleared:
            logger.error("Backend refused flush")
            raise StoreError("Store refused the flush", operation="flush")
        logger.info("Flushed backend store.")

    # --- Analytics ---

    def get_stats(self) -> CacheStats:
        """Returns a snapshot copy of the operation counters."""
        with self._lock:
            return CacheStats(**self._counters)

    def get_reads(self) -> int:
        """Number of reads that found a value."""
        return self._counters["reads"]

    def get_misses(self) -> int:
        """Number of reads that found nothing (or were bypassed)."""
        return self._counters["misses"]

    def get_writes(self) -> int:
        """Number of successful writes."""
        return self._counters["writes"]

    def get_deletes(self) -> int:
        """Number of successful deletes."""
        return self._counters["deletes"]
