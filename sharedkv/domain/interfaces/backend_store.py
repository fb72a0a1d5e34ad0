"""Interface for the backend store fronted by the cache facade.

Defines the contract any shared key/value store must satisfy: get, set,
delete and clear-all over raw bytes. Unlike stores whose native "false"
doubles as "not found", get() returns an explicit found flag.
"""

import abc
from typing import Optional, Tuple

from sharedkv.domain.models.common import DerivedKey, Payload


class BackendStore(abc.ABC):
    """Abstract Base Class for backend key/value storage."""

    @abc.abstractmethod
    def get(self, key: DerivedKey) -> Tuple[Optional[Payload], bool]:
        """Fetches the payload stored under a key.

        Args:
            key: The backend key to look up.

        Returns:
            A (payload, found) pair. When found is False the payload is None.
        """
        pass

    @abc.abstractmethod
    def set(self, key: DerivedKey, value: Payload, ttl: int) -> bool:
        """Stores a payload under a key.

        Args:
            key: The backend key to store under.
            value: The encoded payload.
            ttl: Time-to-live in seconds; 0 means no expiry.

        Returns:
            True if the payload was stored.
        """
        pass

    @abc.abstractmethod
    def delete(self, key: DerivedKey) -> bool:
        """Removes a key.

        Returns:
            True if the key existed and was removed.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> bool:
        """Removes every entry held by the store.

        Returns:
            True if the store was cleared.
        """
        pass
