"""
Cache keys and invalidation helpers

네임스페이스 키 생성기와, 원장 서비스 및 거래처 디렉터리가
읽기/쓰기/무효화에 사용하는 타입 헬퍼
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from core.cache.ttl_cache import TTLCache
from core.constants import CacheTTL
from core.types import PartyKind

logger = logging.getLogger(__name__)

MEMO_PREFIX = "daily_cash_memo_"
PREVIOUS_BALANCE_PREFIX = "previous_balance_"


class CacheKeys:
    """키 생성기"""

    CUSTOMERS_LIST = "customers_list"
    SUPPLIERS_LIST = "suppliers_list"

    @staticmethod
    def customer_transactions(customer_id: str) -> str:
        return f"customer_transactions_{customer_id}"

    @staticmethod
    def supplier_transactions(supplier_id: str) -> str:
        return f"supplier_transactions_{supplier_id}"

    @staticmethod
    def customer_details(customer_id: str) -> str:
        return f"customer_details_{customer_id}"

    @staticmethod
    def supplier_details(supplier_id: str) -> str:
        return f"supplier_details_{supplier_id}"

    @staticmethod
    def daily_cash_memo(memo_date: date | str) -> str:
        return f"{MEMO_PREFIX}{_iso(memo_date)}"

    @staticmethod
    def previous_balance(memo_date: date | str) -> str:
        return f"{PREVIOUS_BALANCE_PREFIX}{_iso(memo_date)}"

    @staticmethod
    def party_list(kind: PartyKind | str) -> str:
        if PartyKind(kind) == PartyKind.CUSTOMER:
            return CacheKeys.CUSTOMERS_LIST
        return CacheKeys.SUPPLIERS_LIST

    @staticmethod
    def party_details(kind: PartyKind | str, party_id: str) -> str:
        if PartyKind(kind) == PartyKind.CUSTOMER:
            return CacheKeys.customer_details(party_id)
        return CacheKeys.supplier_details(party_id)

    @staticmethod
    def party_transactions(kind: PartyKind | str, party_id: str) -> str:
        if PartyKind(kind) == PartyKind.CUSTOMER:
            return CacheKeys.customer_transactions(party_id)
        return CacheKeys.supplier_transactions(party_id)


def _iso(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


class CacheHelpers:
    """공유 TTLCache 위의 타입 지정 읽기/쓰기/무효화

    Args:
        cache: 다른 사용자와 공유하는 캐시 인스턴스
    """

    def __init__(self, cache: TTLCache):
        self.cache = cache

    # -------------------------------------------------------------------------
    # 원장 날짜
    # -------------------------------------------------------------------------

    def get_memo(self, memo_date: date) -> Any | None:
        return self.cache.get(CacheKeys.daily_cash_memo(memo_date))

    def set_memo(self, memo_date: date, memo: Any) -> None:
        self.cache.set(CacheKeys.daily_cash_memo(memo_date), memo, CacheTTL.SHORT)

    def get_previous_balance(self, memo_date: date) -> Decimal | None:
        return self.cache.get(CacheKeys.previous_balance(memo_date))

    def set_previous_balance(self, memo_date: date, balance: Decimal) -> None:
        self.cache.set(CacheKeys.previous_balance(memo_date), balance, CacheTTL.SHORT)

    def invalidate_memo(self, memo_date: date) -> None:
        """날짜와 그에 의존하는 이전 잔액 키 삭제

        이후 날짜의 이전 잔액은 이 날의 마감 잔액에서 파생.
        ``memo_date`` 자체의 키는 해당 없음
        """
        self.cache.delete(CacheKeys.daily_cash_memo(memo_date))
        cutoff = memo_date.isoformat()
        for key in self.cache.keys():
            if key.startswith(PREVIOUS_BALANCE_PREFIX):
                if key[len(PREVIOUS_BALANCE_PREFIX):] > cutoff:
                    self.cache.delete(key)

    def invalidate_memos_after(self, memo_date: date) -> None:
        """``memo_date`` 이후 캐시된 모든 날짜 삭제 (재계산용)"""
        cutoff = memo_date.isoformat()
        for key in self.cache.keys():
            if key.startswith(MEMO_PREFIX) and key[len(MEMO_PREFIX):] > cutoff:
                self.cache.delete(key)
        self.invalidate_memo(memo_date)

    # -------------------------------------------------------------------------
    # 거래처
    # -------------------------------------------------------------------------

    def invalidate_customer(self, customer_id: str) -> None:
        self.cache.delete(CacheKeys.customer_details(customer_id))
        self.cache.delete(CacheKeys.customer_transactions(customer_id))

    def invalidate_supplier(self, supplier_id: str) -> None:
        self.cache.delete(CacheKeys.supplier_details(supplier_id))
        self.cache.delete(CacheKeys.supplier_transactions(supplier_id))

    def invalidate_party(self, kind: PartyKind | str, party_id: str) -> None:
        if PartyKind(kind) == PartyKind.CUSTOMER:
            self.invalidate_customer(party_id)
        else:
            self.invalidate_supplier(party_id)

    def invalidate_transactions(self) -> None:
        """캐시된 모든 거래 이력 삭제"""
        removed = self.cache.delete_matching("_transactions_")
        logger.debug(f"거래 이력 캐시 무효화: {removed}건")

    def invalidate_customers_list(self) -> None:
        self.cache.delete(CacheKeys.CUSTOMERS_LIST)

    def invalidate_suppliers_list(self) -> None:
        self.cache.delete(CacheKeys.SUPPLIERS_LIST)

    def invalidate_party_list(self, kind: PartyKind | str) -> None:
        self.cache.delete(CacheKeys.party_list(kind))
