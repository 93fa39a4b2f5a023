"""
Daily cash memo ledger

하루 하나의 원장: 입금(credit)/출금(debit) 열, 이월 잔액, draft → posted 상태.


사용법:
```python
from core.ledger import CashBook, DailyCashMemoService

# 서버 측 (정식 엔진)
book = CashBook(InMemoryMemoStore())
memo = await book.add_entry("2025-01-01", "credit", {
    "name": "Cash sale", "amount": 1000, "account": "acc-1",
})

# 클라이언트 측 (캐시 우선)
service = DailyCashMemoService(CashMemoRestClient(settings.api), TTLCache())
memo = await service.get_memo("2025-01-01")
```
"""

from core.ledger.balance import (
    BalancePoint,
    BalanceSummary,
    closing_balance,
    party_totals,
    running_balance,
    summarize,
    total_credit,
    total_debit,
)
from core.ledger.book import CashBook, RecomputeResult
from core.ledger.entry import (
    CreditEntry,
    DebitEntry,
    LedgerEntry,
    PartyRef,
    apply_patch,
    parse_entry,
    round_amount,
)
from core.ledger.errors import (
    ConflictError,
    ImmutableMemoError,
    InvalidStateTransition,
    LedgerError,
    NotFoundError,
    UpstreamFailure,
    ValidationError,
)
from core.ledger.memo import DailyCashMemo, parse_date
from core.ledger.report import (
    EntriesReport,
    EntriesReportQuery,
    ReportRow,
    ReportSummary,
    build_entries_report,
)
from core.ledger.resolver import OpeningBalanceResolver
from core.ledger.service import DailyCashMemoService

__all__ = [
    # 엔진 / 클라이언트
    "CashBook",
    "RecomputeResult",
    "DailyCashMemoService",
    "OpeningBalanceResolver",
    # 값 객체
    "DailyCashMemo",
    "CreditEntry",
    "DebitEntry",
    "LedgerEntry",
    "PartyRef",
    "parse_entry",
    "apply_patch",
    "parse_date",
    "round_amount",
    # 잔액
    "BalanceSummary",
    "BalancePoint",
    "total_credit",
    "total_debit",
    "closing_balance",
    "summarize",
    "party_totals",
    "running_balance",
    # 리포트
    "EntriesReport",
    "EntriesReportQuery",
    "ReportRow",
    "ReportSummary",
    "build_entries_report",
    # 오류
    "LedgerError",
    "ValidationError",
    "ImmutableMemoError",
    "NotFoundError",
    "InvalidStateTransition",
    "ConflictError",
    "UpstreamFailure",
]
