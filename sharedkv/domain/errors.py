"""Error taxonomy raised by the cache facade.

"Not found" is never an error: a miss is reported by returning None.
Every error carries the operation name and the caller key it relates to.
"""

from typing import Optional


class CacheError(Exception):
    """Base class for all errors raised by the cache facade."""

    def __init__(self, message: str, operation: Optional[str] = None, key: Optional[str] = None):
        self.operation = operation
        self.key = key
        context = []
        if operation is not None:
            context.append(f"operation={operation}")
        if key is not None:
            context.append(f"key={key!r}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class ConfigurationError(CacheError):
    """Raised when a namespace is required but unset, or is invalid."""


class InvalidValueError(CacheError):
    """Raised for input the cache refuses to store (None, the string "false", ...)."""


class StoreError(CacheError):
    """Raised when the backend store fails on anything other than a miss."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        key: Optional[str] = None,
        original_exception: Optional[BaseException] = None,
    ):
        self.original_exception = original_exception
        if original_exception is not None:
            message = f"{message}. Last error: {original_exception}"
        super().__init__(message, operation=operation, key=key)
