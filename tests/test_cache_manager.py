from __future__ import annotations

import asyncio

import pytest

from rebrick.services import cache_manager
from rebrick.services.cache_manager import TTLCache, get_cache


def test_set_then_get_returns_value(cache: TTLCache) -> None:
    cache.set("key", {"name": "Red"})

    assert cache.get("key") == {"name": "Red"}
    assert cache.has("key")


def test_missing_key_returns_default(cache: TTLCache) -> None:
    marker = object()

    assert cache.get("nope") is None
    assert cache.get("nope", marker) is marker


def test_entry_expires_after_ttl(cache: TTLCache, clock) -> None:
    cache.set("key", "value", ttl=10)

    clock.advance(9)
    assert cache.get("key") == "value"

    clock.advance(1)
    assert cache.get("key") is None
    assert not cache.has("key")
    assert cache.size == 0


def test_default_ttl_is_one_hour(clock) -> None:
    cache = TTLCache(clock=clock)
    cache.set("key", "value")

    clock.advance(3599)
    assert cache.has("key")
    clock.advance(1)
    assert not cache.has("key")


def test_set_overwrites_existing_entry(cache: TTLCache, clock) -> None:
    cache.set("key", "old", ttl=5)
    clock.advance(4)
    cache.set("key", "new", ttl=5)
    clock.advance(4)

    assert cache.get("key") == "new"


def test_none_payload_is_cached(cache: TTLCache) -> None:
    marker = object()
    cache.set("empty", None)

    assert cache.has("empty")
    assert cache.get("empty", marker) is None


def test_lru_eviction_bounds_size(clock) -> None:
    cache = TTLCache(max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.size == 2
    assert cache.has("a")
    assert not cache.has("b")
    assert cache.has("c")


def test_cleanup_expired_removes_only_stale_entries(cache: TTLCache, clock) -> None:
    cache.set("short", 1, ttl=1)
    cache.set("long", 2, ttl=100)
    clock.advance(2)

    assert cache.cleanup_expired() == 1
    assert cache.size == 1
    assert cache.has("long")


def test_invalidate_and_clear(cache: TTLCache) -> None:
    cache.set("a", 1)
    cache.set("b", 2)

    cache.invalidate("a")
    assert not cache.has("a")

    cache.clear()
    assert cache.size == 0


def test_stats_count_hits_and_misses(cache: TTLCache) -> None:
    cache.set("a", 1)
    cache.get("a")
    cache.get("missing")

    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["size"] == 1


def test_get_cache_returns_process_wide_instance(monkeypatch) -> None:
    monkeypatch.setattr(cache_manager, "_cache_instance", None)

    assert get_cache() is get_cache()


@pytest.mark.asyncio
async def test_cleanup_task_sweeps_expired_entries(cache: TTLCache, clock) -> None:
    cache.set("stale", 1, ttl=1)
    clock.advance(5)

    cache.start_cleanup_task(interval=0.01)
    for _ in range(50):
        if cache.size == 0:
            break
        await asyncio.sleep(0.01)
    await cache.stop_cleanup_task()

    assert cache.size == 0
