"""Defines common Value Objects used across the cache layers.

These objects represent simple values like caller keys, derived keys and
namespaces, ensuring consistency and type safety.
"""

from typing import NewType, TypedDict, Union

# === Keys & Namespacing ===

# Using NewType for semantic clarity, although they are plain values at runtime.
CacheKey = NewType("CacheKey", str)        # Key as supplied by the caller
Namespace = NewType("Namespace", str)      # Process-wide prefix applied before hashing
DerivedKey = NewType("DerivedKey", bytes)  # Key actually sent to the backend store

# === Values ===
Payload = NewType("Payload", bytes)        # Encoded value as held by the backend store
CacheValue = Union[str, int, float, bool]  # Values callers may store


class CacheStats(TypedDict):
    """Snapshot of the facade's operation counters."""
    reads: int
    misses: int
    writes: int
    deletes: int
