"""Interface for external control signals.

A trigger source tells the facade whether a named control signal (for
example a request parameter) is present, so callers can switch on
read-bypass or flush the store without touching application code.
"""

import abc


class TriggerSource(abc.ABC):
    """Abstract Base Class for control-signal lookups."""

    @abc.abstractmethod
    def is_present(self, name: str) -> bool:
        """Returns True if the control signal `name` is present."""
        pass
