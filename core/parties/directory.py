"""
Party directory

고객/공급처와 거래 이력의 캐시 조회

캐시 규칙:
- 목록은 MEDIUM 캐시, 생성/수정/삭제 후 전체 무효화
- 상세는 거래처별 MEDIUM 캐시
- 이력은 필터 없는 1페이지만 캐시 (SHORT)
- 거래처 변경 시 해당 거래처의 상세/이력 키 삭제
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from adapters.interfaces import IPartyApi
from core.cache import CacheHelpers, CacheKeys, TTLCache
from core.constants import CacheTTL, Defaults
from core.ledger.balance import BalancePoint, party_totals, running_balance
from core.types import PartyKind
from core.utils.formatters import format_phone

logger = logging.getLogger(__name__)


def matches_search(party: dict[str, Any], query: str, kind: PartyKind | str) -> bool:
    """이름/전화/이메일 일치 검사 (공급처는 GST 번호 포함)

    전화번호는 원본 쿼리로 비교, 나머지는 대소문자 무시
    """
    query = query.strip()
    if not query:
        return True
    lowered = query.lower()
    if lowered in (party.get("name") or "").lower():
        return True
    if party.get("phone") and query in party["phone"]:
        return True
    if party.get("email") and lowered in party["email"].lower():
        return True
    if PartyKind(kind) == PartyKind.SUPPLIER and party.get("gstNumber"):
        return lowered in party["gstNumber"].lower()
    return False


class PartyDirectory:
    """TTL 캐시를 거치는 고객/공급처 조회

    Args:
        api: 원격 거래처 API
        cache: 공유 TTL 캐시

    사용법:
    ```python
    directory = PartyDirectory(client, cache)
    customers = await directory.list(PartyKind.CUSTOMER)
    history = await directory.transactions(PartyKind.CUSTOMER, "c-1")
    ```
    """

    def __init__(self, api: IPartyApi, cache: TTLCache):
        self.api = api
        self.cache = cache
        self.helpers = CacheHelpers(cache)

    # -------------------------------------------------------------------------
    # 목록 및 상세
    # -------------------------------------------------------------------------

    async def list(
        self,
        kind: PartyKind | str,
        force_refresh: bool = False,
    ) -> list[dict[str, Any]]:
        """종류별 전체 거래처"""
        kind = PartyKind(kind)
        key = CacheKeys.party_list(kind)
        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        parties = await self.api.list_parties(kind, limit=Defaults.LIST_FETCH_LIMIT)
        self.cache.set(key, parties, CacheTTL.MEDIUM)
        return parties

    async def search(self, kind: PartyKind | str, query: str) -> list[dict[str, Any]]:
        """캐시된 목록 필터링"""
        parties = await self.list(kind)
        return [p for p in parties if matches_search(p, query, kind)]

    async def get(self, kind: PartyKind | str, party_id: str) -> dict[str, Any]:
        """거래처 하나"""
        kind = PartyKind(kind)
        key = CacheKeys.party_details(kind, party_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        party = await self.api.get_party(kind, party_id)
        self.cache.set(key, party, CacheTTL.MEDIUM)
        return party

    # -------------------------------------------------------------------------
    # 거래 이력
    # -------------------------------------------------------------------------

    async def transactions(
        self,
        kind: PartyKind | str,
        party_id: str,
        page: int = 1,
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """거래처 이력 한 페이지

        Returns:
            {"transactions": [...], "pagination": {"page", "total", "totalPages"}}
        """
        kind = PartyKind(kind)
        filters = {k: v for k, v in (filters or {}).items() if v not in ("", None)}
        # 필터 없는 1페이지만 캐시
        cacheable = page == 1 and not filters
        key = CacheKeys.party_transactions(kind, party_id)

        if cacheable:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        params = {"page": page, "limit": Defaults.TRANSACTIONS_PAGE_SIZE, **filters}
        result = await self.api.get_party_transactions(kind, party_id, params)
        pagination = result.get("pagination") or {}
        history = {
            "transactions": result.get("transactions") or [],
            "pagination": {
                "page": pagination.get("page") or page,
                "total": pagination.get("total") or 0,
                "totalPages": pagination.get("totalPages") or 0,
            },
        }

        if cacheable:
            self.cache.set(key, history, CacheTTL.SHORT)
        return history

    async def totals(self, kind: PartyKind | str, party_id: str) -> dict[str, Decimal]:
        """이력 1페이지 기준 입금/출금 합계"""
        history = await self.transactions(kind, party_id)
        return party_totals(history["transactions"], kind)

    async def trend(self, kind: PartyKind | str, party_id: str) -> list[BalancePoint]:
        """이력 1페이지 기준 누적 잔액"""
        history = await self.transactions(kind, party_id)
        return running_balance(history["transactions"])

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def create(self, kind: PartyKind | str, data: dict[str, Any]) -> dict[str, Any]:
        kind = PartyKind(kind)
        party = await self.api.create_party(kind, data)
        self.helpers.invalidate_party_list(kind)
        logger.info(f"{kind.value} 생성: {party.get('name')} ({format_phone(party.get('phone'))})")
        return party

    async def update(
        self,
        kind: PartyKind | str,
        party_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        kind = PartyKind(kind)
        party = await self.api.update_party(kind, party_id, data)
        self.helpers.invalidate_party_list(kind)
        self.helpers.invalidate_party(kind, party_id)
        return party

    async def delete(self, kind: PartyKind | str, party_id: str) -> None:
        kind = PartyKind(kind)
        await self.api.delete_party(kind, party_id)
        self.helpers.invalidate_party_list(kind)
        self.helpers.invalidate_party(kind, party_id)
        logger.info(f"{kind.value} 삭제: {party_id}")
