"""
Cash book

일일 원장의 서버 측 엔진 (``IMemoStore`` 기반)
- 정식 검증
- 이월 잔액을 결정하며 날짜를 지연 생성
- 마감 (posting) 및 항목 리포트

모든 변경은 날짜를 읽고 새 메모 값을 만든 뒤 저장.
검증, 마감 여부, 버전 검사 중 하나라도 실패하면 아무것도 기록하지 않음.
프로세스 내 변경은 asyncio lock 하나로 직렬화

사용법:
```python
book = CashBook(InMemoryMemoStore())
memo = await book.add_entry("2025-01-01", EntryKind.CREDIT, {
    "name": "Opening sale", "amount": 1000, "account": "acc-1",
})
memo.closing_balance  # Decimal("1000.00")
```
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable

from adapters.interfaces import IMemoStore
from core.ledger.entry import (
    CreditEntry,
    DebitEntry,
    LedgerEntry,
    apply_patch,
    parse_entry,
    stamp_new_entry,
)
from core.ledger.errors import (
    ConflictError,
    ImmutableMemoError,
    InvalidStateTransition,
    NotFoundError,
)
from core.ledger.memo import DailyCashMemo, parse_date
from core.ledger.report import EntriesReport, EntriesReportQuery, build_entries_report
from core.ledger.resolver import OpeningBalanceResolver
from core.types import EntryKind
from core.utils.formatters import format_currency, format_datetime
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

EntryInput = LedgerEntry | dict[str, Any]


@dataclass(frozen=True)
class RecomputeResult:
    """이후 날짜 재계산 결과

    Attributes:
        updated: 이월 잔액이 바뀐 draft 날짜
        skipped: 건드리지 않은 posted 날짜
    """

    updated: tuple[date, ...] = field(default_factory=tuple)
    skipped: tuple[date, ...] = field(default_factory=tuple)

    def to_api(self) -> dict[str, list[str]]:
        return {
            "updated": [d.isoformat() for d in self.updated],
            "skipped": [d.isoformat() for d in self.skipped],
        }

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RecomputeResult":
        return cls(
            updated=tuple(parse_date(d) for d in data.get("updated") or []),
            skipped=tuple(parse_date(d) for d in data.get("skipped") or []),
        )


def _check_version(memo: DailyCashMemo, expected_version: int | None) -> None:
    if expected_version is not None and memo.version != expected_version:
        raise ConflictError(
            f"Daily cash memo for {memo.date} is at version {memo.version}, "
            f"expected {expected_version}"
        )


class CashBook:
    """서버 측 일일 원장 엔진

    Args:
        store: 메모 저장소
        clock: 현재 UTC 시각 반환 함수
    """

    def __init__(self, store: IMemoStore, clock: Callable[[], datetime] = now_utc):
        self.store = store
        self.resolver = OpeningBalanceResolver(store)
        self._clock = clock
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_memo(self, memo_date: date | str) -> DailyCashMemo | None:
        """날짜의 메모 (없으면 None)"""
        return await self.store.get_by_date(parse_date(memo_date))

    async def require_memo(self, memo_date: date | str) -> DailyCashMemo:
        """날짜의 메모

        Raises:
            NotFoundError: 해당 날짜에 메모 없음
        """
        memo_date = parse_date(memo_date)
        memo = await self.store.get_by_date(memo_date)
        if memo is None:
            raise NotFoundError(f"No daily cash memo for {memo_date}")
        return memo

    async def require_memo_by_id(self, memo_id: str) -> DailyCashMemo:
        """ID로 메모 조회

        Raises:
            NotFoundError: 알 수 없는 ID
        """
        memo = await self.store.get_by_id(memo_id)
        if memo is None:
            raise NotFoundError(f"Daily cash memo {memo_id} not found")
        return memo

    async def previous_balance(self, memo_date: date | str) -> Decimal:
        """직전 가장 최근 날의 마감 잔액 (없으면 0)"""
        return await self.resolver.previous_balance(parse_date(memo_date))

    async def entries_report(self, query: EntriesReportQuery) -> EntriesReport:
        """조회 범위 내 저장된 날짜들의 항목 리포트"""
        memos = await self.store.list_between(query.start_date, query.end_date)
        report = build_entries_report(memos, query)
        logger.debug(
            f"항목 리포트 {query.start_date}..{query.end_date}: "
            f"{len(memos)}일에서 {report.summary.count}건"
        )
        return report

    # -------------------------------------------------------------------------
    # 헬퍼
    # -------------------------------------------------------------------------

    def _stamp(self, entry: LedgerEntry) -> LedgerEntry:
        return stamp_new_entry(entry, uuid.uuid4().hex, self._clock())

    def _coerce(self, kind: EntryKind | str, data: EntryInput) -> LedgerEntry:
        kind = EntryKind(kind)
        if isinstance(data, (CreditEntry, DebitEntry)):
            if data.kind != kind:
                # 요청된 종류로 재검증 (항목 종류는 바뀌지 않음)
                return parse_entry(kind, data.to_api())
            return data
        return parse_entry(kind, data)

    def _coerce_column(self, kind: EntryKind, items: Iterable[EntryInput]) -> tuple:
        return tuple(self._stamp(self._coerce(kind, item)) for item in items)

    async def _create(
        self,
        memo_date: date,
        credit_entries: tuple[CreditEntry, ...] = (),
        debit_entries: tuple[DebitEntry, ...] = (),
        notes: str = "",
    ) -> DailyCashMemo:
        opening = await self.resolver.resolve_opening_balance(memo_date)
        memo = DailyCashMemo(
            date=memo_date,
            opening_balance=opening,
            credit_entries=credit_entries,
            debit_entries=debit_entries,
            notes=(notes or "").strip(),
        )
        stored = await self.store.insert(memo)
        logger.info(f"일일 현금 메모 생성: {memo_date} (이월 {format_currency(opening)})")
        return stored

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------

    async def create_memo(
        self,
        memo_date: date | str,
        credit_entries: Iterable[EntryInput] = (),
        debit_entries: Iterable[EntryInput] = (),
        notes: str = "",
        opening_balance: Decimal | None = None,
    ) -> DailyCashMemo:
        """원장 하루치 생성

        이월 잔액은 항상 저장소에서 결정.
        호출자가 준 값은 비교용으로만 사용

        Raises:
            ValidationError: 잘못된 항목
            ConflictError: 해당 날짜에 이미 메모 있음
        """
        memo_date = parse_date(memo_date)
        credits = self._coerce_column(EntryKind.CREDIT, credit_entries)
        debits = self._coerce_column(EntryKind.DEBIT, debit_entries)

        async with self._lock:
            if await self.store.get_by_date(memo_date) is not None:
                raise ConflictError(f"Daily cash memo for {memo_date} already exists")
            memo = await self._create(memo_date, credits, debits, notes)

        if opening_balance is not None and opening_balance != memo.opening_balance:
            logger.warning(
                f"클라이언트 이월 잔액 불일치 ({memo_date}): "
                f"요청 {opening_balance}, 결정값 {memo.opening_balance} 유지"
            )
        return memo

    async def add_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        data: EntryInput,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        """항목 추가 (날짜가 없으면 먼저 생성)

        Raises:
            ValidationError: 잘못된 항목
            ImmutableMemoError: 마감된 날짜
            ConflictError: 버전 불일치
        """
        memo_date = parse_date(memo_date)
        entry = self._stamp(self._coerce(kind, data))

        async with self._lock:
            memo = await self.store.get_by_date(memo_date)
            if memo is None:
                if entry.kind == EntryKind.CREDIT:
                    return await self._create(memo_date, credit_entries=(entry,))
                return await self._create(memo_date, debit_entries=(entry,))
            _check_version(memo, expected_version)
            return await self.store.save(memo.with_entry_added(entry))

    async def append_entry(
        self,
        memo_id: str,
        kind: EntryKind | str,
        data: EntryInput,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        """기존 메모에 항목 추가 (ID 기준)

        Raises:
            NotFoundError: 알 수 없는 메모 ID
            ValidationError / ImmutableMemoError / ConflictError
        """
        entry = self._stamp(self._coerce(kind, data))

        async with self._lock:
            memo = await self.require_memo_by_id(memo_id)
            _check_version(memo, expected_version)
            return await self.store.save(memo.with_entry_added(entry))

    async def edit_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        entry_id: str,
        patch: dict[str, Any],
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        """항목 하나 부분 수정

        Raises:
            NotFoundError: 날짜 또는 항목 없음
            ImmutableMemoError: 마감된 날짜
            ValidationError: 수정 결과가 잘못됨
        """
        kind = EntryKind(kind)
        async with self._lock:
            memo = await self.require_memo(memo_date)
            memo.ensure_mutable()
            _check_version(memo, expected_version)
            current = memo.find_entry(kind, entry_id)
            updated = apply_patch(current, patch)
            return await self.store.save(memo.with_entry_replaced(entry_id, updated))

    async def delete_entry(
        self,
        memo_date: date | str,
        kind: EntryKind | str,
        entry_id: str,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        """ID로 항목 하나 삭제

        Raises:
            NotFoundError: 날짜 또는 항목 없음
            ImmutableMemoError: 마감된 날짜
        """
        async with self._lock:
            memo = await self.require_memo(memo_date)
            memo.ensure_mutable()
            _check_version(memo, expected_version)
            return await self.store.save(memo.with_entry_removed(kind, entry_id))

    async def replace_entries(
        self,
        memo_id: str,
        credit_entries: Iterable[EntryInput] | None = None,
        debit_entries: Iterable[EntryInput] | None = None,
        notes: str | None = None,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        """항목 및/또는 notes 일괄 교체 (PUT)

        None인 열은 유지.
        마감된 날짜라도 저장된 값과 같은 열은 허용 (notes만 저장하며 항목을 그대로 보내는 경우)

        Raises:
            NotFoundError: 알 수 없는 메모 ID
            ImmutableMemoError: 마감된 날짜의 항목 변경
            ValidationError / ConflictError
        """
        credits = (
            None if credit_entries is None
            else tuple(self._coerce(EntryKind.CREDIT, e) for e in credit_entries)
        )
        debits = (
            None if debit_entries is None
            else tuple(self._coerce(EntryKind.DEBIT, e) for e in debit_entries)
        )

        async with self._lock:
            memo = await self.require_memo_by_id(memo_id)
            _check_version(memo, expected_version)

            credits_changed = credits is not None and credits != memo.credit_entries
            debits_changed = debits is not None and debits != memo.debit_entries

            updated = memo
            if credits_changed or debits_changed:
                updated = memo.with_entries(
                    credit_entries=tuple(self._stamp(e) for e in credits) if credits_changed else None,
                    debit_entries=tuple(self._stamp(e) for e in debits) if debits_changed else None,
                )
            if notes is not None:
                updated = updated.with_notes(notes)

            if updated == memo:
                return memo
            return await self.store.save(updated)

    async def save_notes(self, memo_date: date | str, notes: str) -> DailyCashMemo:
        """notes 저장 (상태 무관, 날짜가 없으면 생성)"""
        memo_date = parse_date(memo_date)
        async with self._lock:
            memo = await self.store.get_by_date(memo_date)
            if memo is None:
                return await self._create(memo_date, notes=notes)
            return await self.store.save(memo.with_notes(notes))

    async def post(self, memo_date: date | str) -> DailyCashMemo:
        """draft → posted

        Raises:
            InvalidStateTransition: 날짜 없음 또는 이미 마감됨
        """
        memo_date = parse_date(memo_date)
        async with self._lock:
            memo = await self.store.get_by_date(memo_date)
            if memo is None:
                raise InvalidStateTransition(f"No daily cash memo for {memo_date} to post")
            return await self._post(memo)

    async def post_by_id(self, memo_id: str) -> DailyCashMemo:
        """draft → posted (메모 ID 기준)

        Raises:
            InvalidStateTransition: 메모 없음 또는 이미 마감됨
        """
        async with self._lock:
            memo = await self.store.get_by_id(memo_id)
            if memo is None:
                raise InvalidStateTransition(f"Daily cash memo {memo_id} does not exist")
            return await self._post(memo)

    async def _post(self, memo: DailyCashMemo) -> DailyCashMemo:
        stored = await self.store.save(memo.posted(at=self._clock()))
        logger.info(
            f"일일 현금 메모 마감: {stored.date} ({format_datetime(stored.posted_at)}, "
            f"마감 잔액 {format_currency(stored.closing_balance)})"
        )
        return stored

    async def recompute_forward(self, from_date: date | str) -> RecomputeResult:
        """``from_date`` 이후 날짜의 이월 잔액 재설정

        이후 날짜를 날짜순으로 순회.
        draft 날짜는 직전 날의 마감 잔액을 이월 잔액으로 받음.
        posted 날짜는 건드리지 않고 자신의 마감 잔액을 다음 날로 넘김
        """
        from_date = parse_date(from_date)
        updated: list[date] = []
        skipped: list[date] = []

        async with self._lock:
            anchor = await self.store.get_by_date(from_date)
            if anchor is None:
                anchor = await self.store.get_latest_before(from_date)
            carry = anchor.closing_balance if anchor is not None else Decimal("0")

            for memo in await self.store.list_after(from_date):
                if memo.is_posted:
                    skipped.append(memo.date)
                    carry = memo.closing_balance
                    continue
                if memo.opening_balance != carry:
                    memo = await self.store.save(
                        replace(memo, opening_balance=carry)
                    )
                    updated.append(memo.date)
                carry = memo.closing_balance

        logger.info(
            f"재계산 ({from_date} 이후): {len(updated)}건 갱신, posted {len(skipped)}건 건너뜀"
        )
        return RecomputeResult(updated=tuple(updated), skipped=tuple(skipped))
