"""sharedkv: accessor layer over a shared key/value cache.

Exposes the CacheFacade together with its error taxonomy so application code
can depend on a single import path.
"""

from sharedkv.core.cache_facade import CacheFacade
from sharedkv.domain.errors import (
    CacheError,
    ConfigurationError,
    InvalidValueError,
    StoreError,
)

__version__ = "1.0.0"

__all__ = [
    "CacheFacade",
    "CacheError",
    "ConfigurationError",
    "InvalidValueError",
    "StoreError",
]
