"""
core/cache/ttl_cache.py 테스트

만료는 주입된 시계로 제어. 타이머는 이벤트 루프 실행 중에만 동작
"""

import asyncio

import pytest

from core.cache.ttl_cache import CacheEntry, TTLCache


class TestCacheEntry:
    """CacheEntry.is_expired 테스트"""

    def test_boundary(self) -> None:
        """정확히 ttl 시점에는 유효, 이후 만료"""
        entry = CacheEntry(value=1, timestamp=100.0, ttl=10.0)
        assert not entry.is_expired(110.0)
        assert entry.is_expired(110.5)


class TestGetSet:
    """기본 연산"""

    def test_set_and_get(self, cache: TTLCache) -> None:
        cache.set("k", {"a": 1}, 60)
        assert cache.get("k") == {"a": 1}
        assert cache.has("k")

    def test_missing(self, cache: TTLCache) -> None:
        assert cache.get("nope") is None
        assert not cache.has("nope")

    def test_expired_read_evicts(self, cache: TTLCache, fake_clock) -> None:
        cache.set("k", "v", 60)
        fake_clock.advance(61)

        assert cache.get("k") is None
        assert cache.size() == 0

    def test_has_does_not_evict(self, cache: TTLCache, fake_clock) -> None:
        cache.set("k", "v", 60)
        fake_clock.advance(61)

        assert not cache.has("k")
        assert cache.size() == 1

    def test_overwrite_resets_age(self, cache: TTLCache, fake_clock) -> None:
        cache.set("k", "old", 60)
        fake_clock.advance(50)
        cache.set("k", "new", 60)
        fake_clock.advance(50)

        assert cache.get("k") == "new"

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_deletes(self, cache: TTLCache, ttl: float) -> None:
        cache.set("k", "v", 60)
        cache.set("k", "other", ttl)

        assert cache.get("k") is None
        assert cache.size() == 0

    def test_delete_missing_is_noop(self, cache: TTLCache) -> None:
        cache.delete("nope")
        assert cache.size() == 0


class TestBulkOperations:
    """delete_matching / clear / stats 테스트"""

    def test_delete_matching(self, cache: TTLCache) -> None:
        cache.set("customer_transactions_1", [], 60)
        cache.set("supplier_transactions_2", [], 60)
        cache.set("customer_details_1", {}, 60)

        removed = cache.delete_matching("_transactions_")

        assert removed == 2
        assert cache.keys() == ["customer_details_1"]

    def test_clear(self, cache: TTLCache) -> None:
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.clear()
        assert cache.size() == 0

    def test_stats(self, cache: TTLCache, fake_clock) -> None:
        cache.set("short", 1, 10)
        cache.set("long", 2, 100)
        fake_clock.advance(20)

        stats = cache.stats()

        assert stats["total"] == 2
        assert stats["expired"] == 1
        assert stats["valid"] == 1
        assert sorted(stats["keys"]) == ["long", "short"]


class TestTimers:
    """실행 중인 루프에서의 타이머 예약"""

    @pytest.mark.asyncio
    async def test_timer_removes_entry(self) -> None:
        cache = TTLCache()
        cache.set("k", "v", 0.01)

        await asyncio.sleep(0.05)

        assert cache.size() == 0

    @pytest.mark.asyncio
    async def test_overwrite_cancels_old_timer(self) -> None:
        cache = TTLCache()
        cache.set("k", "old", 0.01)
        cache.set("k", "new", 60)

        await asyncio.sleep(0.05)

        assert cache.get("k") == "new"

    @pytest.mark.asyncio
    async def test_timer_respects_injected_clock(self, cache: TTLCache) -> None:
        """주입된 시계 기준으로 유효하면 항목 유지"""
        cache.set("k", "v", 0.01)

        await asyncio.sleep(0.05)

        assert cache.size() == 1
        assert cache.get("k") == "v"

    @pytest.mark.asyncio
    async def test_delete_cancels_timer(self) -> None:
        cache = TTLCache()
        cache.set("k", "v", 0.01)
        cache.delete("k")
        cache.set("k", "again", 60)

        await asyncio.sleep(0.05)

        assert cache.get("k") == "again"
