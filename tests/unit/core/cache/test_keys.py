"""
core/cache/keys.py 테스트
"""

from datetime import date
from decimal import Decimal

import pytest

from core.cache.keys import CacheHelpers, CacheKeys
from core.cache.ttl_cache import TTLCache
from core.types import PartyKind


@pytest.fixture
def helpers(cache: TTLCache) -> CacheHelpers:
    return CacheHelpers(cache)


class TestCacheKeys:
    """키 생성기"""

    def test_memo_keys(self) -> None:
        assert CacheKeys.daily_cash_memo(date(2025, 1, 5)) == "daily_cash_memo_2025-01-05"
        assert CacheKeys.previous_balance("2025-01-05") == "previous_balance_2025-01-05"

    def test_party_keys(self) -> None:
        assert CacheKeys.party_list(PartyKind.CUSTOMER) == "customers_list"
        assert CacheKeys.party_list("supplier") == "suppliers_list"
        assert CacheKeys.party_details("customer", "c1") == "customer_details_c1"
        assert CacheKeys.party_transactions("supplier", "s1") == "supplier_transactions_s1"


class TestMemoInvalidation:
    """invalidate_memo / invalidate_memos_after 테스트"""

    def test_later_previous_balances_dropped(self, helpers: CacheHelpers, cache: TTLCache) -> None:
        for day in (1, 2, 3):
            helpers.set_previous_balance(date(2025, 1, day), Decimal(day))
        helpers.set_memo(date(2025, 1, 2), "memo")

        helpers.invalidate_memo(date(2025, 1, 2))

        assert helpers.get_memo(date(2025, 1, 2)) is None
        assert helpers.get_previous_balance(date(2025, 1, 1)) == Decimal(1)
        assert helpers.get_previous_balance(date(2025, 1, 2)) == Decimal(2)
        assert helpers.get_previous_balance(date(2025, 1, 3)) is None

    def test_memos_after(self, helpers: CacheHelpers) -> None:
        for day in (1, 2, 3):
            helpers.set_memo(date(2025, 1, day), f"memo-{day}")

        helpers.invalidate_memos_after(date(2025, 1, 1))

        assert helpers.get_memo(date(2025, 1, 1)) is None
        assert helpers.get_memo(date(2025, 1, 2)) is None
        assert helpers.get_memo(date(2025, 1, 3)) is None

    def test_memos_after_keeps_earlier(self, helpers: CacheHelpers) -> None:
        helpers.set_memo(date(2024, 12, 31), "old")

        helpers.invalidate_memos_after(date(2025, 1, 1))

        assert helpers.get_memo(date(2024, 12, 31)) == "old"


class TestPartyInvalidation:
    """거래처 키"""

    def test_invalidate_party(self, helpers: CacheHelpers, cache: TTLCache) -> None:
        cache.set(CacheKeys.customer_details("c1"), {}, 60)
        cache.set(CacheKeys.customer_transactions("c1"), {}, 60)
        cache.set(CacheKeys.CUSTOMERS_LIST, [], 60)

        helpers.invalidate_party(PartyKind.CUSTOMER, "c1")

        assert cache.keys() == [CacheKeys.CUSTOMERS_LIST]

    def test_invalidate_transactions(self, helpers: CacheHelpers, cache: TTLCache) -> None:
        cache.set(CacheKeys.customer_transactions("c1"), {}, 60)
        cache.set(CacheKeys.supplier_transactions("s1"), {}, 60)
        cache.set(CacheKeys.SUPPLIERS_LIST, [], 60)

        helpers.invalidate_transactions()

        assert cache.keys() == [CacheKeys.SUPPLIERS_LIST]

    def test_invalidate_lists(self, helpers: CacheHelpers, cache: TTLCache) -> None:
        cache.set(CacheKeys.CUSTOMERS_LIST, [], 60)
        cache.set(CacheKeys.SUPPLIERS_LIST, [], 60)

        helpers.invalidate_customers_list()
        assert not cache.has(CacheKeys.CUSTOMERS_LIST)

        helpers.invalidate_party_list("supplier")
        assert not cache.has(CacheKeys.SUPPLIERS_LIST)
