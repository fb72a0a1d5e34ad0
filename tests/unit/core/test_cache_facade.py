import hashlib
import threading

import pytest
from unittest.mock import MagicMock

from sharedkv.core.cache_facade import CacheFacade
from sharedkv.core.value_codec import FALSE_SENTINEL
from sharedkv.domain.errors import ConfigurationError, InvalidValueError, StoreError
from sharedkv.domain.interfaces.trigger_source import TriggerSource
from sharedkv.infrastructure.stores.memory_store import MemoryStore
from sharedkv.infrastructure.triggers.trigger_sources import MappingTriggerSource


@pytest.fixture
def namespaced_cache(cache: CacheFacade) -> CacheFacade:
    cache.init("ns1")
    return cache


# --- Namespace handling ---

@pytest.mark.parametrize("operation, args", [
    ("read", ("k",)),
    ("write", ("k", "v")),
    ("delete", ("k",)),
])
def test_operations_require_namespace(cache: CacheFacade, operation, args):
    """read/write/delete fail until init() has been called."""
    with pytest.raises(ConfigurationError) as exc_info:
        getattr(cache, operation)(*args)
    assert exc_info.value.operation == operation
    assert exc_info.value.key == "k"
    assert cache.get_stats() == {"reads": 0, "misses": 0, "writes": 0, "deletes": 0}


def test_flush_does_not_require_namespace(cache: CacheFacade, memory_store: MemoryStore):
    cache.flush()


@pytest.mark.parametrize("namespace", ["", None, 42])
def test_init_rejects_invalid_namespace(cache: CacheFacade, namespace):
    with pytest.raises(ConfigurationError):
        cache.init(namespace)
    assert cache.namespace is None


def test_init_last_call_wins_and_leaves_counters(cache: CacheFacade):
    cache.init("a")
    cache.init("b")
    assert cache.namespace == "b"
    assert cache.get_stats() == {"reads": 0, "misses": 0, "writes": 0, "deletes": 0}


def test_derived_key_is_md5_of_namespace_and_key(namespaced_cache: CacheFacade):
    expected = hashlib.md5(b"ns1user").hexdigest().encode("ascii")
    assert namespaced_cache.derive_key("user") == expected
    assert len(namespaced_cache.derive_key("a much longer key than the digest")) == 32


def test_namespaces_are_isolated(cache: CacheFacade):
    cache.init("a")
    cache.write("k", "1")
    cache.init("b")
    cache.write("k", "2")
    cache.init("a")
    assert cache.read("k") == "1"
    cache.init("b")
    assert cache.read("k") == "2"


def test_unnamespaced_variant_uses_raw_keys(mock_store: MagicMock):
    cache = CacheFacade(mock_store, require_namespace=False)
    cache.write("user", "oliver")
    mock_store.set.assert_called_once_with(b"user", b'"oliver"', 0)


# --- Reads & writes ---

def test_scenario_counts_reads_misses_and_writes(namespaced_cache: CacheFacade):
    cache = namespaced_cache
    cache.write("user", "oliver")
    assert cache.get_writes() == 1

    assert cache.read("user") == "oliver"
    assert cache.get_reads() == 1

    assert cache.read("missing") is None
    assert cache.get_misses() == 1

    cache.write("flag", False)
    assert cache.read("flag") is False
    assert cache.get_reads() == 2


@pytest.mark.parametrize("value", ["oliver", "", "0", "true", 0, 1, -7, 3.5, True, 10 ** 20])
def test_values_read_back_unchanged(namespaced_cache: CacheFacade, value):
    namespaced_cache.write("k", value)
    result = namespaced_cache.read("k")
    assert result == value
    assert type(result) is type(value)


def test_false_is_stored_as_sentinel(mock_store: MagicMock):
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    cache.write("flag", False)
    args, _ = mock_store.set.call_args
    assert args[1] == FALSE_SENTINEL


def test_sentinel_payload_reads_as_false(mock_store: MagicMock):
    mock_store.get.return_value = (FALSE_SENTINEL, True)
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    assert cache.read("flag") is False
    assert cache.get_stats()["reads"] == 1


@pytest.mark.parametrize("value", [None, "false"])
def test_write_rejects_reserved_values(namespaced_cache: CacheFacade, value):
    with pytest.raises(InvalidValueError) as exc_info:
        namespaced_cache.write("k", value)
    assert exc_info.value.key == "k"
    assert namespaced_cache.get_writes() == 0


@pytest.mark.parametrize("value", [[1, 2], {"a": 1}, object(), b"bytes"])
def test_write_rejects_unsupported_types(namespaced_cache: CacheFacade, value):
    with pytest.raises(InvalidValueError):
        namespaced_cache.write("k", value)


@pytest.mark.parametrize("ttl", [-1, 1.5, "10", True])
def test_write_rejects_invalid_ttl(namespaced_cache: CacheFacade, ttl):
    with pytest.raises(InvalidValueError):
        namespaced_cache.write("k", "v", ttl=ttl)


def test_write_passes_ttl_to_store(mock_store: MagicMock):
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    cache.write("k", 5, ttl=30)
    mock_store.set.assert_called_once_with(cache.derive_key("k"), b"5", 30)


def test_non_string_key_is_rejected(namespaced_cache: CacheFacade):
    with pytest.raises(InvalidValueError):
        namespaced_cache.read(123)


def test_read_miss_changes_only_misses(namespaced_cache: CacheFacade):
    namespaced_cache.read("never-written")
    assert namespaced_cache.get_stats() == {"reads": 0, "misses": 1, "writes": 0, "deletes": 0}


def test_read_after_flush_is_a_miss(namespaced_cache: CacheFacade):
    namespaced_cache.write("k", "v")
    namespaced_cache.flush()
    assert namespaced_cache.read("k") is None
    assert namespaced_cache.get_stats() == {"reads": 0, "misses": 1, "writes": 1, "deletes": 0}


def test_stats_after_mixed_operations(namespaced_cache: CacheFacade):
    for i in range(3):
        namespaced_cache.write(f"k{i}", i)
    for i in range(2):
        namespaced_cache.read(f"absent{i}")
    for i in range(3):
        namespaced_cache.read(f"k{i}")
    assert namespaced_cache.get_stats() == {"reads": 3, "misses": 2, "writes": 3, "deletes": 0}


def test_get_stats_returns_a_copy(namespaced_cache: CacheFacade):
    stats = namespaced_cache.get_stats()
    stats["reads"] = 100
    assert namespaced_cache.get_reads() == 0


# --- Bypass ---

def test_bypass_forces_misses(namespaced_cache: CacheFacade):
    namespaced_cache.write("k", "v")
    namespaced_cache.set_bypass(True)
    assert namespaced_cache.bypassed is True
    assert namespaced_cache.read("k") is None
    assert namespaced_cache.get_misses() == 1
    assert namespaced_cache.get_reads() == 0


def test_bypass_does_not_query_store(mock_store: MagicMock):
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    cache.set_bypass(True)
    cache.read("k")
    mock_store.get.assert_not_called()


def test_bypass_leaves_writes_and_deletes(namespaced_cache: CacheFacade):
    namespaced_cache.set_bypass(True)
    namespaced_cache.write("k", "v")
    namespaced_cache.delete("k")
    assert namespaced_cache.get_writes() == 1
    assert namespaced_cache.get_deletes() == 1


def test_bypass_still_requires_namespace(cache: CacheFacade):
    cache.set_bypass(True)
    with pytest.raises(ConfigurationError):
        cache.read("k")


def test_setup_bypass_by_trigger(namespaced_cache: CacheFacade):
    assert namespaced_cache.setup_bypass_by("apc-bypass", MappingTriggerSource({})) is False
    assert namespaced_cache.bypassed is False
    assert namespaced_cache.setup_bypass_by("apc-bypass", MappingTriggerSource({"apc-bypass": ""})) is True
    assert namespaced_cache.bypassed is True


def test_check_for_flushing_by_trigger(mock_store: MagicMock):
    cache = CacheFacade(mock_store)
    source = MagicMock(spec=TriggerSource)
    source.is_present.return_value = False
    assert cache.check_for_flushing_by("apc-flush", source) is False
    mock_store.clear.assert_not_called()

    source.is_present.return_value = True
    assert cache.check_for_flushing_by("apc-flush", source) is True
    mock_store.clear.assert_called_once()
    source.is_present.assert_called_with("apc-flush")


# --- Delete ---

def test_delete_counts_successes(namespaced_cache: CacheFacade):
    namespaced_cache.write("k", "v")
    assert namespaced_cache.delete("k") is True
    assert namespaced_cache.read("k") is None
    assert namespaced_cache.get_deletes() == 1


def test_failed_delete_is_swallowed_by_default(namespaced_cache: CacheFacade):
    assert namespaced_cache.delete("absent") is False
    assert namespaced_cache.get_deletes() == 0


def test_failed_delete_raises_when_asked(namespaced_cache: CacheFacade):
    with pytest.raises(StoreError) as exc_info:
        namespaced_cache.delete("absent", throw_on_failure=True)
    assert exc_info.value.operation == "delete"
    assert namespaced_cache.get_deletes() == 0


def test_delete_backend_exception(mock_store: MagicMock):
    mock_store.delete.side_effect = RuntimeError("segment locked")
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    assert cache.delete("k") is False
    with pytest.raises(StoreError) as exc_info:
        cache.delete("k", throw_on_failure=True)
    assert isinstance(exc_info.value.original_exception, RuntimeError)
    assert exc_info.value.__cause__ is exc_info.value.original_exception
    assert cache.get_deletes() == 0


# --- Backend failures ---

def test_read_backend_failure_raises_store_error(mock_store: MagicMock):
    mock_store.get.side_effect = OSError("disk gone")
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    with pytest.raises(StoreError) as exc_info:
        cache.read("k")
    assert exc_info.value.operation == "read"
    assert exc_info.value.key == "k"
    assert "disk gone" in str(exc_info.value)
    assert cache.get_stats() == {"reads": 0, "misses": 0, "writes": 0, "deletes": 0}


def test_undecodable_payload_raises_store_error(mock_store: MagicMock):
    mock_store.get.return_value = (b"\xff\xfe not json", True)
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    with pytest.raises(StoreError):
        cache.read("k")
    assert cache.get_reads() == 0


@pytest.mark.parametrize("failure", [RuntimeError("full"), False])
def test_write_backend_failure_raises_store_error(mock_store: MagicMock, failure):
    if isinstance(failure, Exception):
        mock_store.set.side_effect = failure
    else:
        mock_store.set.return_value = failure
    cache = CacheFacade(mock_store)
    cache.init("ns1")
    with pytest.raises(StoreError) as exc_info:
        cache.write("k", "v")
    assert exc_info.value.operation == "write"
    assert cache.get_writes() == 0


@pytest.mark.parametrize("failure", [RuntimeError("locked"), False])
def test_flush_backend_failure_raises_store_error(mock_store: MagicMock, failure):
    if isinstance(failure, Exception):
        mock_store.clear.side_effect = failure
    else:
        mock_store.clear.return_value = failure
    cache = CacheFacade(mock_store)
    with pytest.raises(StoreError) as exc_info:
        cache.flush()
    assert exc_info.value.operation == "flush"


def test_flush_keeps_counters(namespaced_cache: CacheFacade):
    namespaced_cache.write("k", "v")
    namespaced_cache.read("k")
    namespaced_cache.flush()
    assert namespaced_cache.get_stats() == {"reads": 1, "misses": 0, "writes": 1, "deletes": 0}


# --- Concurrency ---

def test_counters_are_consistent_across_threads(namespaced_cache: CacheFacade):
    namespaced_cache.write("shared", "v")

    def worker():
        for _ in range(200):
            namespaced_cache.read("shared")
            namespaced_cache.read("absent")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stats = namespaced_cache.get_stats()
    assert stats["reads"] == 1600
    assert stats["misses"] == 1600
