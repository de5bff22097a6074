import asyncio

import pytest

from hospital_directory.utils.cache import TTLCache


def test_get_returns_value_until_ttl_expires(cache, clock):
    cache.set("k", [1, 2])
    clock.advance(599)
    assert cache.get("k") == [1, 2]
    clock.advance(1)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_per_entry_ttl_override(cache, clock):
    cache.set("short", "a", ttl=5)
    cache.set("forever", "b", ttl=0)
    clock.advance(10_000)
    assert cache.get("short") is None
    assert cache.get("forever") == "b"


def test_empty_list_is_a_cache_hit(cache):
    cache.set("none-found", [])
    assert cache.get("none-found") == []


def test_clear(cache):
    cache.set("a", 1)
    cache.clear()
    assert cache.get("a") is None


def test_oldest_entry_evicted_over_max_size(clock):
    cache = TTLCache(ttl_seconds=60, max_size=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_concurrent_misses_share_one_load(cache):
    loads = []

    async def loader():
        loads.append(1)
        await asyncio.sleep(0.01)
        return ["record"]

    async def both():
        return await asyncio.gather(cache.get_or_load("k", loader), cache.get_or_load("k", loader))

    assert asyncio.run(both()) == [["record"], ["record"]]
    assert len(loads) == 1
    assert cache.get("k") == ["record"]


def test_failed_load_is_not_cached_and_can_be_retried(cache):
    async def failing():
        raise RuntimeError("store down")

    async def working():
        return "ok"

    with pytest.raises(RuntimeError):
        asyncio.run(cache.get_or_load("k", failing))
    assert cache.get("k") is None
    assert asyncio.run(cache.get_or_load("k", working)) == "ok"
