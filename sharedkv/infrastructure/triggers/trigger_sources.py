"""Concrete trigger sources.

MappingTriggerSource answers from any mapping, such as the query parameters
of an incoming request. EnvironmentTriggerSource answers from environment
variables so a deployment can bypass or flush the cache at startup.
"""

import logging
import os
from typing import Any, Mapping, Optional

from sharedkv.domain.interfaces.trigger_source import TriggerSource

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "SHAREDKV_TRIGGER_"
FALSY_VALUES = ("", "0", "false", "no", "off")


class MappingTriggerSource(TriggerSource):
    """A signal is present when its name is a key of the mapping."""

    def __init__(self, mapping: Optional[Mapping[str, Any]] = None):
        self._mapping = mapping if mapping is not None else {}

    def is_present(self, name: str) -> bool:
        return name in self._mapping


class EnvironmentTriggerSource(TriggerSource):
    """A signal is present when its environment variable holds a truthy value.

    The variable name is the prefix followed by the signal name upper-cased,
    with '-' and '.' replaced by '_' (apc-bypass -> SHAREDKV_TRIGGER_APC_BYPASS).
    """

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX, environ: Optional[Mapping[str, str]] = None):
        self.prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def variable_name(self, name: str) -> str:
        return f"{self.prefix}{name.upper().replace('-', '_').replace('.', '_')}"

    def is_present(self, name: str) -> bool:
        env_var = self.variable_name(name)
        value = self._environ.get(env_var)
        if value is None:
            return False
        present = value.strip().lower() not in FALSY_VALUES
        logger.debug(f"Trigger variable {env_var}={value!r}, present={present}")
        return present
