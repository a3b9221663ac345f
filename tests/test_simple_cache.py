"""Unit tests for the in-memory SimpleTTLCache."""

import threading

import pytest

from app.utils.simple_cache import DEFAULT_TTL_SECONDS, SimpleTTLCache, build_cache_key


def test_build_cache_key_is_stable_and_sensitive_to_changes() -> None:
    key1 = build_cache_key("cat", 5, "English")
    key2 = build_cache_key("cat", 5, "English")
    key3 = build_cache_key("cat", 6, "English")

    assert key1 == key2
    assert key1 != key3


def test_build_cache_key_normalizes_case_and_whitespace() -> None:
    assert build_cache_key("  Cat ", 5, "ENGLISH\n") == build_cache_key("cat", "5", "english")
    assert build_cache_key("hello   world") == build_cache_key("Hello world")


def test_build_cache_key_salt_partitions_keys() -> None:
    assert build_cache_key("cat", salt="v1") != build_cache_key("cat", salt="v2")


def test_build_cache_key_field_boundaries_matter() -> None:
    assert build_cache_key("ab", "c") != build_cache_key("a", "bc")


def test_default_ttl_is_one_day() -> None:
    cache = SimpleTTLCache()
    assert cache.ttl_seconds == DEFAULT_TTL_SECONDS == 86400
    assert cache.stats()["max_entries"] is None


def test_set_and_get_updates_hit_miss_counters() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)

    assert cache.get("missing") is None

    cache.set("key", "es")

    assert cache.get("key") == "es"

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["size"] == 1


def test_entry_is_live_until_ttl_elapses(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=5, clock=clock)
    cache.set("key", "value")

    clock.advance(4)
    assert cache.get("key") == "value"

    clock.advance(1)
    assert cache.get("key") is None
    stats = cache.stats()
    assert stats["evictions"] == 1
    assert stats["size"] == 0


def test_per_entry_ttl_overrides_default(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=100, clock=clock)
    cache.set("short", "a", ttl=1)
    cache.set("long", "b")

    clock.advance(2)

    assert cache.get("short") is None
    assert cache.get("long") == "b"


def test_set_replaces_existing_entry_and_restarts_ttl(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=10, clock=clock)
    cache.set("key", "old")

    clock.advance(8)
    cache.set("key", "new")
    clock.advance(8)

    assert cache.get("key") == "new"
    assert len(cache) == 1


def test_evict_expired_sweeps_all_stale_entries(clock) -> None:
    cache = SimpleTTLCache(ttl_seconds=10, clock=clock)
    cache.set("a", "1")
    cache.set("b", "2")
    clock.advance(5)
    cache.set("c", "3")

    clock.advance(6)

    assert cache.evict_expired() == 2
    assert len(cache) == 1
    assert cache.get("c") == "3"


def test_unbounded_by_default() -> None:
    cache = SimpleTTLCache(ttl_seconds=100)
    for i in range(2000):
        cache.set(f"k-{i}", str(i))

    assert len(cache) == 2000
    assert cache.stats()["evictions"] == 0


def test_lru_eviction_when_bounded() -> None:
    cache = SimpleTTLCache(ttl_seconds=100, max_entries=2)
    cache.set("a", "1")
    cache.set("b", "2")

    # Access "a" so that "b" becomes least recently used
    assert cache.get("a") == "1"

    cache.set("c", "3")

    assert cache.get("a") == "1"
    assert cache.get("c") == "3"
    assert cache.get("b") is None


def test_clear_resets_state() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)
    cache.set("a", "1")
    cache.set("b", "2")
    cache.get("a")

    cache.clear()

    stats = cache.stats()
    assert stats["size"] == 0
    assert stats["hits"] == 0
    assert stats["misses"] == 0
    assert stats["evictions"] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ttl_seconds": 0},
        {"ttl_seconds": 10, "max_entries": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SimpleTTLCache(**kwargs)


def test_thread_safety_under_concurrent_sets() -> None:
    cache = SimpleTTLCache(ttl_seconds=30)
    total_keys = 50

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", str(idx))

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["size"] == total_keys
    assert cache.get("k-0") == "0"
    assert cache.get("k-49") == "49"
