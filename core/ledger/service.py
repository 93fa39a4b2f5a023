"""
Daily cash memo service (클라이언트 측)

원격 원장 API 앞단:

- 조회는 캐시 우선 (``daily_cash_memo_{date}``, ``previous_balance_{date}``)
- 항목은 로컬에서 검증하고 원격 호출 전에 마감 여부 확인
- 변경 성공 후 관련 키 무효화 → 날짜 재조회
- 호출 실패 시 캐시는 그대로
- 항목 리포트는 항상 원격 조회

사용법:
```python
service = DailyCashMemoService(CashMemoRestClient(config), TTLCache())
memo = await service.add_entry(date(2025, 1, 1), "credit", {
    "name": "Cash sale", "amount": 1000, "account": "acc-1",
})
```
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from adapters.interfaces import ICashMemoApi
from core.cache import CacheHelpers, TTLCache
from core.config.loader import Settings
from core.ledger.balance import BalanceSummary, summarize
from core.ledger.book import RecomputeResult
from core.ledger.entry import LedgerEntry, apply_patch, parse_entry
from core.ledger.errors import InvalidStateTransition, NotFoundError
from core.ledger.memo import DailyCashMemo, parse_date
from core.ledger.report import EntriesReport, EntriesReportQuery
from core.types import EntryKind
from core.utils.formatters import format_currency, format_date

logger = logging.getLogger(__name__)


class DailyCashMemoService:
    """일일 현금 메모 API 클라이언트 (캐시 + 검증)

    Args:
        api: 원격 API
        cache: 공유 TTL 캐시
        optimistic_concurrency: 변경 요청에 메모 버전 포함
        cache_enabled: 캐시 경유 조회 여부 (무효화는 항상 수행)
    """

    def __init__(
        self,
        api: ICashMemoApi,
        cache: TTLCache,
        optimistic_concurrency: bool = False,
        cache_enabled: bool = True,
    ):
        self.api = api
        self.cache = CacheHelpers(cache)
        self.optimistic_concurrency = optimistic_concurrency
        self.cache_enabled = cache_enabled

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: TTLCache | None = None,
    ) -> "DailyCashMemoService":
        """settings.yaml의 REST 클라이언트로 서비스 생성"""
        from adapters.api.rest_client import CashMemoRestClient

        return cls(
            CashMemoRestClient(settings.api),
            cache or TTLCache(),
            optimistic_concurrency=settings.ledger.optimistic_concurrency,
            cache_enabled=settings.cache.enabled,
        )

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_memo(
        self,
        memo_date: date | str,
        force_refresh: bool = False,
    ) -> DailyCashMemo | None:
        """날짜의 메모 (아직 없으면 None)

        없는 날짜는 캐시하지 않음
        """
        memo_date = parse_date(memo_date)
        if not force_refresh and self.cache_enabled:
            cached = self.cache.get_memo(memo_date)
            if cached is not None:
                return cached

        memo = await self.api.get_memo_by_date(memo_date)
        if memo is not None:
            self.cache.set_memo(memo_date, memo)
        return memo

    async def get_previous_balance(
        self,
        memo_date: date | str,
        force_refresh: bool = False,
    ) -> Decimal:
        """직전 가장 최근 날의 마감 잔액"""
        memo_date = parse_date(memo_date)
        if not force_refresh and self.cache_enabled:
            cached = self.cache.get_previous_balance(memo_date)
            if cached is not None:
                return cached

        balance = await self.api.get_previous_balance(memo_date)
        self.cache.set_previous_balance(memo_date, balance)
        return balance

    async def get_summary(self, memo_date: date | str) -> BalanceSummary:
        """원장 화면에 표시되는 하루치 잔액

        저장된 날짜는 자체 이월 스냅샷 사용.
        메모가 없는 날짜는 결정된 이전 잔액 사용
        """
        memo = await self.get_memo(memo_date)
        if memo is not None:
            return summarize(memo)
        return summarize(None, await self.get_previous_balance(memo_date))

    async def entries_report(self, query: EntriesReportQuery) -> EntriesReport:
        """기간 리포트 (캐시하지 않음)"""
        return await self.api.get_entries_report(query)

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------

    def _version(self, memo: DailyCashMemo) -> int | None:
        return memo.version if self.optimistic_concurrency else None

    async def add_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        data: dict[str, Any],
    ) -> DailyCashMemo:
        """항목 검증 후 추가 (날짜가 없으면 생성)

        Raises:
            ValidationError: 잘못된 항목 (전송 안 함)
            ImmutableMemoError: 마감된 날짜 (전송 안 함)
        """
        memo_date = parse_date(memo_date)
        entry = parse_entry(kind, data)
        memo = await self.get_memo(memo_date)

        if memo is None:
            opening = await self.get_previous_balance(memo_date)
            await self.api.create_memo(
                memo_date,
                opening,
                credit_entries=[entry] if entry.kind == EntryKind.CREDIT else [],
                debit_entries=[entry] if entry.kind == EntryKind.DEBIT else [],
            )
        else:
            memo.ensure_mutable()
            await self.api.append_entry(memo.id, entry, self._version(memo))

        logger.info(
            f"{entry.kind.value} 항목 추가 ({format_date(memo_date)}): "
            f"{format_currency(entry.amount)}"
        )
        return await self._refresh(memo_date, [entry])

    async def edit_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        entry_id: str,
        patch: dict[str, Any],
    ) -> DailyCashMemo:
        """항목에 patch 병합 후 해당 열 저장

        Raises:
            NotFoundError: 날짜 또는 항목 없음
            ImmutableMemoError: 마감된 날짜
            ValidationError: 수정 결과가 잘못됨
        """
        memo_date = parse_date(memo_date)
        kind = EntryKind(kind)
        memo = await self._require_memo(memo_date)
        memo.ensure_mutable()

        current = memo.find_entry(kind, entry_id)
        updated_entry = apply_patch(current, patch)
        updated = memo.with_entry_replaced(entry_id, updated_entry)

        await self._put_column(memo, updated, kind)
        logger.info(f"{kind.value} 항목 수정 ({format_date(memo_date)}): {entry_id}")
        return await self._refresh(memo_date, [current, updated_entry])

    async def delete_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        entry: LedgerEntry | str,
    ) -> DailyCashMemo:
        """항목 삭제 (ID 기준, ID가 없으면 구조 비교)

        Raises:
            NotFoundError: 날짜 또는 항목 없음
            ImmutableMemoError: 마감된 날짜
        """
        memo_date = parse_date(memo_date)
        kind = EntryKind(kind)
        memo = await self._require_memo(memo_date)
        memo.ensure_mutable()

        updated = memo.with_entry_removed(kind, entry)
        removed = [e for e in memo.entries(kind) if e not in updated.entries(kind)]

        await self._put_column(memo, updated, kind)
        logger.info(f"{kind.value} 항목 삭제 ({format_date(memo_date)})")
        return await self._refresh(memo_date, removed)

    async def save_notes(self, memo_date: date | str, notes: str) -> DailyCashMemo:
        """notes 저장 (상태 무관, 날짜가 없으면 생성)"""
        memo_date = parse_date(memo_date)
        memo = await self.get_memo(memo_date)

        if memo is None:
            opening = await self.get_previous_balance(memo_date)
            await self.api.create_memo(memo_date, opening, notes=notes or "")
        else:
            await self.api.update_memo(
                memo.id, notes=notes or "", expected_version=self._version(memo)
            )
        return await self._refresh(memo_date)

    async def post_memo(self, memo_date: date | str) -> DailyCashMemo:
        """draft → posted

        Raises:
            InvalidStateTransition: 날짜 없음 또는 이미 마감됨 (전송 안 함)
        """
        memo_date = parse_date(memo_date)
        memo = await self.get_memo(memo_date, force_refresh=True)
        if memo is None:
            raise InvalidStateTransition(f"No daily cash memo for {memo_date} to post")
        if memo.is_posted:
            raise InvalidStateTransition(f"Daily cash memo for {memo_date} is already posted")

        await self.api.post_memo(memo.id)
        logger.info(f"일일 현금 메모 마감: {format_date(memo_date)}")
        return await self._refresh(memo_date)

    async def recompute_forward(self, from_date: date | str) -> RecomputeResult:
        """특정 날짜 이후 이월 잔액 재설정 요청"""
        from_date = parse_date(from_date)
        result = await self.api.recompute_forward(from_date)
        self.cache.invalidate_memos_after(from_date)
        return result

    # -------------------------------------------------------------------------
    # 헬퍼
    # -------------------------------------------------------------------------

    async def _require_memo(self, memo_date: date) -> DailyCashMemo:
        memo = await self.get_memo(memo_date)
        if memo is None:
            raise NotFoundError(f"No daily cash memo for {memo_date}")
        return memo

    async def _put_column(
        self,
        memo: DailyCashMemo,
        updated: DailyCashMemo,
        kind: EntryKind,
    ) -> None:
        if kind == EntryKind.CREDIT:
            await self.api.update_memo(
                memo.id,
                credit_entries=list(updated.credit_entries),
                expected_version=self._version(memo),
            )
        else:
            await self.api.update_memo(
                memo.id,
                debit_entries=list(updated.debit_entries),
                expected_version=self._version(memo),
            )

    def _invalidate_parties(self, entries: Iterable[LedgerEntry]) -> None:
        touched_customers = set()
        touched_suppliers = set()
        for entry in entries:
            relations = entry.relation_ids()
            if "customer" in relations:
                touched_customers.add(relations["customer"])
            if "supplier" in relations:
                touched_suppliers.add(relations["supplier"])
        for customer_id in touched_customers:
            self.cache.invalidate_customer(customer_id)
        for supplier_id in touched_suppliers:
            self.cache.invalidate_supplier(supplier_id)

    async def _refresh(
        self,
        memo_date: date,
        touched: Iterable[LedgerEntry] = (),
    ) -> DailyCashMemo:
        """변경 성공 후 무효화 → 날짜 재조회"""
        self.cache.invalidate_memo(memo_date)
        self._invalidate_parties(touched)
        memo = await self.get_memo(memo_date, force_refresh=True)
        if memo is None:
            raise NotFoundError(f"Daily cash memo for {memo_date} vanished after update")
        return memo
