import asyncio

import pytest

from culturegraph.knowledge.retrieval.cache import QueryCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class Counter:
    def __init__(self, value="result", delay=0.0):
        self.calls = 0
        self.value = value
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.value


def test_make_key_ignores_parameter_order():
    first = QueryCache.make_key("semantic", {"concept": "diwali", "limit": 5})
    second = QueryCache.make_key("semantic", {"limit": 5, "concept": "diwali"})

    assert first == second
    assert first != QueryCache.make_key("traverse", {"concept": "diwali", "limit": 5})


@pytest.mark.asyncio
async def test_second_lookup_is_served_from_cache(settings):
    cache = QueryCache(settings)
    compute = Counter()

    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert await cache.get_or_compute("semantic", {"q": 2}, compute) == "result"

    assert compute.calls == 2
    assert len(cache) == 2


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(settings):
    clock = FakeClock()
    cache = QueryCache(settings, ttl=10, timer=clock)
    compute = Counter()

    await cache.get_or_compute("semantic", {"q": 1}, compute)
    clock.now = 9.0
    await cache.get_or_compute("semantic", {"q": 1}, compute)
    assert compute.calls == 1

    clock.now = 11.0
    await cache.get_or_compute("semantic", {"q": 1}, compute)
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_invalidate_drops_everything(settings):
    cache = QueryCache(settings)
    compute = Counter()

    await cache.get_or_compute("traverse", {"start": "a"}, compute)
    await cache.invalidate()
    await cache.get_or_compute("traverse", {"start": "a"}, compute)

    assert compute.calls == 2


@pytest.mark.asyncio
async def test_rejected_values_are_not_stored(settings):
    cache = QueryCache(settings)
    compute = Counter(value={"success": False})

    for _ in range(2):
        await cache.get_or_compute("semantic", {"q": 1}, compute, cacheable=lambda value: value["success"])

    assert compute.calls == 2
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_computation(settings):
    cache = QueryCache(settings)
    compute = Counter(delay=0.05)

    results = await asyncio.gather(*[cache.get_or_compute("semantic", {"q": 1}, compute) for _ in range(5)])

    assert results == ["result"] * 5
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_disabled_cache_always_computes(settings):
    cache = QueryCache(settings, enabled=False)
    compute = Counter()

    await cache.get_or_compute("semantic", {"q": 1}, compute)
    await cache.get_or_compute("semantic", {"q": 1}, compute)

    assert compute.calls == 2
    assert await cache.get(QueryCache.make_key("semantic", {"q": 1})) is None


@pytest.mark.asyncio
async def test_least_recently_used_entry_is_evicted(settings):
    cache = QueryCache(settings, maxsize=2)

    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.get("a")
    await cache.set("c", 3)

    assert await cache.get("a") == 1
    assert await cache.get("b") is None
    assert await cache.get("c") == 3


@pytest.mark.asyncio
async def test_lock_failure_falls_back_to_computing(settings, monkeypatch):
    cache = QueryCache(settings)
    compute = Counter()

    async def broken_lock(key):
        raise RuntimeError("<asyncio.locks.Lock object> is bound to a different event loop")

    monkeypatch.setattr(cache, "_acquire_lock", broken_lock)

    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert compute.calls == 2


@pytest.mark.asyncio
async def test_lock_release_failure_keeps_the_value(settings, monkeypatch):
    cache = QueryCache(settings)
    compute = Counter()

    async def broken_release(key, lock):
        raise RuntimeError("<asyncio.locks.Lock object> is bound to a different event loop")

    monkeypatch.setattr(cache, "_release_lock", broken_release)

    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert await cache.get_or_compute("semantic", {"q": 1}, compute) == "result"
    assert compute.calls == 1
