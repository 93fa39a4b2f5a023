"""
Mock cash memo API

``InMemoryMemoStore`` 위 ``CashBook`` 기반의 프로세스 내 ``ICashMemoApi``.
서버와 같은 정식 엔진을 거치며 HTTP 없이 실제 원장 동작 검증
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.book import CashBook, RecomputeResult
from core.ledger.entry import CreditEntry, DebitEntry, LedgerEntry
from core.ledger.errors import LedgerError, UpstreamFailure
from core.ledger.memo import DailyCashMemo
from core.ledger.report import EntriesReport, EntriesReportQuery
from core.storage.memo_store import InMemoryMemoStore


@dataclass
class MockApiState:
    """호출 기록 및 실패 주입"""

    # 호출 순서대로의 메서드 이름
    calls: list[str] = field(default_factory=list)

    # 다음 호출에서 발생시킬 오류 (발생 후 초기화)
    fail_next: LedgerError | None = None

    def count(self, method: str) -> int:
        return self.calls.count(method)


class MockCashMemoApi:
    """프로세스 내 일일 현금 메모 API

    사용법:
    ```python
    api = MockCashMemoApi()
    service = DailyCashMemoService(api, TTLCache())

    # 다음 원격 호출 실패
    api.set_fail_next(UpstreamFailure("down", status_code=503))
    ```
    """

    def __init__(self, book: CashBook | None = None):
        self.book = book or CashBook(InMemoryMemoStore())
        self.state = MockApiState()

    # -------------------------------------------------------------------------
    # 테스트 헬퍼
    # -------------------------------------------------------------------------

    def set_fail_next(self, error: LedgerError | None = None) -> None:
        """다음 호출에서 오류 발생 (기본 UpstreamFailure)"""
        self.state.fail_next = error or UpstreamFailure("Mock upstream failure", status_code=503)

    def _record(self, method: str) -> None:
        self.state.calls.append(method)
        if self.state.fail_next is not None:
            error, self.state.fail_next = self.state.fail_next, None
            raise error

    # -------------------------------------------------------------------------
    # ICashMemoApi
    # -------------------------------------------------------------------------

    async def get_memo_by_date(self, memo_date: date) -> DailyCashMemo | None:
        self._record("get_memo_by_date")
        return await self.book.get_memo(memo_date)

    async def get_previous_balance(self, memo_date: date) -> Decimal:
        self._record("get_previous_balance")
        return await self.book.previous_balance(memo_date)

    async def create_memo(
        self,
        memo_date: date,
        opening_balance: Decimal,
        credit_entries: list[CreditEntry] | None = None,
        debit_entries: list[DebitEntry] | None = None,
        notes: str = "",
    ) -> DailyCashMemo:
        self._record("create_memo")
        return await self.book.create_memo(
            memo_date,
            credit_entries=credit_entries or [],
            debit_entries=debit_entries or [],
            notes=notes,
            opening_balance=opening_balance,
        )

    async def append_entry(
        self,
        memo_id: str,
        entry: LedgerEntry,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        self._record("append_entry")
        return await self.book.append_entry(memo_id, entry.kind, entry, expected_version)

    async def update_memo(
        self,
        memo_id: str,
        credit_entries: list[CreditEntry] | None = None,
        debit_entries: list[DebitEntry] | None = None,
        notes: str | None = None,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        self._record("update_memo")
        return await self.book.replace_entries(
            memo_id,
            credit_entries=credit_entries,
            debit_entries=debit_entries,
            notes=notes,
            expected_version=expected_version,
        )

    async def post_memo(self, memo_id: str) -> DailyCashMemo:
        self._record("post_memo")
        return await self.book.post_by_id(memo_id)

    async def recompute_forward(self, from_date: date) -> RecomputeResult:
        self._record("recompute_forward")
        return await self.book.recompute_forward(from_date)

    async def get_entries_report(self, query: EntriesReportQuery) -> EntriesReport:
        self._record("get_entries_report")
        return await self.book.entries_report(query)
