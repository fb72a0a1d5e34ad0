import logging
import os

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock

from sharedkv.core.cache_facade import CacheFacade
from sharedkv.domain.interfaces.backend_store import BackendStore
from sharedkv.infrastructure.config.settings import ENV_PREFIX, clear_test_config
from sharedkv.infrastructure.stores.memory_store import MemoryStore


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(memory_store: MemoryStore) -> CacheFacade:
    """A namespaced facade over a fresh memory store."""
    return CacheFacade(memory_store)


@pytest.fixture
def mock_store():
    """Backend double whose calls succeed unless a test says otherwise."""
    store = MagicMock(spec=BackendStore)
    store.get.return_value = (None, False)
    store.set.return_value = True
    store.delete.return_value = True
    store.clear.return_value = True
    return store


@pytest.fixture(autouse=True)
def isolate_configuration(monkeypatch):
    """Keeps SHAREDKV_* variables from the host and testing overrides out of each test."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    yield
    clear_test_config()


@pytest.fixture
def restore_logging():
    """Puts back the root logger handlers replaced by setup_logging()."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
