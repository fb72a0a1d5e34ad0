"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.sharedkv/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".sharedkv"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "SHAREDKV_"

DEFAULT_BACKEND = "disk"
DEFAULT_DISK_DIRECTORY = DEFAULT_CONFIG_DIR / "store"
DEFAULT_BYPASS_TRIGGER = "apc-bypass"
DEFAULT_FLUSH_TRIGGER = "apc-flush"
BACKENDS = ("memory", "disk")

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None, reload: bool = False) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config / the convenience getters

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        reload: Load again even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not reload:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    # 3. Environment Variables (Highest priority) are handled in get_config
    _loaded = True
    logger.debug("Configuration loading process completed.")


def env_var_name(key: str) -> str:
    """Maps a dotted config key to its environment variable (cache.backend -> SHAREDKV_CACHE_BACKEND)."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def _coerce(value: str) -> Any:
    """Converts common string forms from the environment into Python types."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _lookup(config: Dict[str, Any], key: str) -> Any:
    """Finds a dotted key either flat or nested in the loaded YAML mapping."""
    if key in config:
        return config[key]
    node: Any = config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(key)
        node = node[part]
    return node


def get_config(key: str, default: Any = None, raw: bool = False) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (SHAREDKV_ prefixed)
    3. YAML config
    4. Default value

    Args:
        key: The dotted configuration key (e.g., 'cache.namespace')
        default: Default value if the key is not found
        raw: Return environment values as the plain string, without
            converting numbers and booleans (for names and paths).

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        value = os.environ[env_key]
        return value if raw else _coerce(value)

    try:
        return _lookup(_config, key)
    except KeyError:
        logger.debug(f"Config key '{key}' not found. Returning default: {default}")
        return default


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the running process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value}")
    _config[key] = value


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        if value.lower() in ('true', '1', 'yes', 'on'):
            return True
        if value.lower() in ('false', '0', 'no', 'off'):
            return False
        logger.warning(f"Unexpected boolean value '{value}'. Defaulting to {default}.")
        return default
    return bool(value)


def get_namespace() -> Optional[str]:
    """Namespace applied at startup, if configured."""
    namespace = get_config('cache.namespace', raw=True)
    return str(namespace) if namespace not in (None, '') else None


def get_require_namespace() -> bool:
    """Whether reads/writes/deletes need a namespace first."""
    return _as_bool(get_config('cache.require_namespace'), True)


def get_backend_name() -> str:
    """Backend store to build ('memory' or 'disk')."""
    backend = str(get_config('cache.backend', DEFAULT_BACKEND)).lower()
    if backend not in BACKENDS:
        logger.warning(f"Unknown cache backend '{backend}'. Falling back to '{DEFAULT_BACKEND}'.")
        return DEFAULT_BACKEND
    return backend


def get_disk_directory() -> Path:
    """Directory of the disk store."""
    return Path(str(get_config('cache.disk.directory', DEFAULT_DISK_DIRECTORY, raw=True))).expanduser()


def get_disk_timeout() -> float:
    return float(get_config('cache.disk.timeout', 1))


def get_memory_max_items() -> int:
    max_items = int(get_config('cache.memory.max_items', 0))
    if max_items < 0:
        logger.warning(f"Negative cache.memory.max_items ({max_items}). Using 0 (unbounded).")
        return 0
    return max_items


def get_bypass_trigger() -> str:
    """Name of the control signal that switches on read-bypass."""
    return str(get_config('cache.bypass_trigger', DEFAULT_BYPASS_TRIGGER, raw=True))


def get_flush_trigger() -> str:
    """Name of the control signal that flushes the store."""
    return str(get_config('cache.flush_trigger', DEFAULT_FLUSH_TRIGGER, raw=True))


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
