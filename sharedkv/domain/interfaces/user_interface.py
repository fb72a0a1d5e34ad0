"""Interface for reporting cache operations to the user.

Defines the contract for displaying values, statistics, information and
errors, allowing different UI implementations (e.g., console, GUI).
"""

import abc
from typing import Any

from sharedkv.domain.models.common import CacheKey, CacheStats, CacheValue


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_value(self, key: CacheKey, value: CacheValue, **kwargs: Any) -> None:
        """Displays a value read from the cache.

        Args:
            key: The caller key the value was read from.
            value: The decoded value.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_stats(self, stats: CacheStats, **kwargs: Any) -> None:
        """Displays a snapshot of the operation counters.

        Args:
            stats: The counters returned by the facade.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user.

        Args:
            warning_message: The warning message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass
