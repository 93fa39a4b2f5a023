"""
Entries report aggregator

여러 날짜에 걸친 조회: 입금/출금 항목을 시간순 하나의 목록으로 펼친 뒤
AND 조건으로 필터링하고 필터링된 결과를 집계

사용법:
```python
query = EntriesReportQuery.create("2025-01-01", "2025-01-31", category="mazdoor")
report = build_entries_report(memos, query)
report.summary.total_debit
```
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from core.ledger.entry import ZERO, CreditEntry, LedgerEntry, round_amount
from core.ledger.errors import ValidationError
from core.ledger.memo import DailyCashMemo, parse_date
from core.types import (
    ALL_CREDIT_CATEGORY,
    DEBIT_CATEGORIES_WITH_MAZDOOR,
    DEBIT_CATEGORIES_WITH_SUPPLIER,
    CreditCategory,
    DebitCategory,
    EntryKind,
)

# 카테고리 필터 허용 값
REPORT_CATEGORIES: frozenset[str] = frozenset(
    {ALL_CREDIT_CATEGORY}
    | {c.value for c in CreditCategory}
    | {c.value for c in DebitCategory}
)


@dataclass(frozen=True)
class EntriesReportQuery:
    """리포트 필터

    Attributes:
        start_date: 시작일 (포함)
        end_date: 종료일 (포함)
        category: 정확한 카테고리, ``credit``이면 모든 입금 항목
        related_party_id: 고객/공급처/마즈두르 ID (카테고리에 따라 선택)
        description_contains: 설명 부분 문자열 (대소문자 무시)
    """

    start_date: date
    end_date: date
    category: str | None = None
    related_party_id: str | None = None
    description_contains: str | None = None

    @classmethod
    def create(
        cls,
        start_date: date | str,
        end_date: date | str,
        category: str | None = None,
        related_party_id: str | None = None,
        description_contains: str | None = None,
    ) -> "EntriesReportQuery":
        """검증 포함 생성자

        Raises:
            ValidationError: 잘못된 날짜, 시작일 > 종료일, 알 수 없는 카테고리
        """
        start = parse_date(start_date)
        end = parse_date(end_date)
        if start > end:
            raise ValidationError(
                "Start date must be before end date",
                {"startDate": "Start date must be before end date"},
            )
        category = category or None
        if category is not None and category not in REPORT_CATEGORIES:
            raise ValidationError(f"Unknown category: {category}", {"category": category})
        description = (description_contains or "").strip() or None
        return cls(
            start_date=start,
            end_date=end,
            category=category,
            related_party_id=related_party_id or None,
            description_contains=description,
        )

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "EntriesReportQuery":
        """쿼리 문자열에서 생성

        ``mazdoorId``, ``customerId``, ``supplierId`` 모두 거래처 필터로 매핑.
        먼저 주어진 값 우선
        """
        if not params.get("startDate") or not params.get("endDate"):
            raise ValidationError(
                "Please select start and end date",
                {"startDate": "required", "endDate": "required"},
            )
        party_id = (
            params.get("mazdoorId")
            or params.get("customerId")
            or params.get("supplierId")
        )
        return cls.create(
            start_date=params["startDate"],
            end_date=params["endDate"],
            category=params.get("category"),
            related_party_id=party_id,
            description_contains=params.get("description"),
        )

    def to_params(self) -> dict[str, str]:
        """쿼리 문자열 (거래처 ID는 카테고리에 맞는 키로 전송)"""
        params = {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }
        if self.category:
            params["category"] = self.category
        if self.related_party_id:
            params[_party_param(self.category)] = self.related_party_id
        if self.description_contains:
            params["description"] = self.description_contains
        return params


def _party_param(category: str | None) -> str:
    if category in DEBIT_CATEGORIES_WITH_MAZDOOR:
        return "mazdoorId"
    if category in DEBIT_CATEGORIES_WITH_SUPPLIER:
        return "supplierId"
    return "customerId"


@dataclass(frozen=True)
class ReportRow:
    """리포트의 펼쳐진 항목 한 줄"""

    date: date
    kind: str
    category: str | None
    name: str
    description: str
    related_party: str | None
    payment_method: str
    amount: Decimal
    memo_id: str | None = None
    entry_id: str | None = None

    def to_api(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "type": self.kind,
            "category": self.category,
            "name": self.name,
            "description": self.description,
            "relatedParty": self.related_party,
            "paymentMethod": self.payment_method,
            "amount": float(self.amount),
            "memoId": self.memo_id,
            "entryId": self.entry_id,
        }

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReportRow":
        related = data.get("relatedParty")
        if related is None:
            # 이전 페이로드는 관계별 컬럼 사용
            if data.get("type") == EntryKind.CREDIT.value:
                related = data.get("account") or data.get("customer")
            else:
                related = data.get("mazdoor") or data.get("supplier")
        return cls(
            date=parse_date(str(data["date"])[:10]),
            kind=data["type"],
            category=data.get("category"),
            name=data.get("name") or "",
            description=data.get("description") or "",
            related_party=related,
            payment_method=data.get("paymentMethod") or "",
            amount=round_amount(data.get("amount") or 0),
            memo_id=data.get("memoId"),
            entry_id=data.get("entryId"),
        )


@dataclass(frozen=True)
class ReportSummary:
    """필터링된 행만의 합계"""

    total_credit: Decimal = ZERO
    total_debit: Decimal = ZERO
    count: int = 0

    @property
    def closing_balance(self) -> Decimal:
        """total_credit − total_debit"""
        return self.total_credit - self.total_debit

    def to_api(self) -> dict[str, Any]:
        return {
            "totalCredit": float(self.total_credit),
            "totalDebit": float(self.total_debit),
            "closingBalance": float(self.closing_balance),
            "count": self.count,
        }

    @classmethod
    def from_rows(cls, rows: Iterable[ReportRow]) -> "ReportSummary":
        credit = ZERO
        debit = ZERO
        count = 0
        for row in rows:
            count += 1
            if row.kind == EntryKind.CREDIT.value:
                credit += row.amount
            else:
                debit += row.amount
        return cls(total_credit=credit, total_debit=debit, count=count)


@dataclass(frozen=True)
class EntriesReport:
    """리포트 페이로드"""

    query: EntriesReportQuery
    rows: tuple[ReportRow, ...] = field(default_factory=tuple)
    summary: ReportSummary = field(default_factory=ReportSummary)

    def to_api(self) -> dict[str, Any]:
        return {
            "entries": [row.to_api() for row in self.rows],
            "summary": self.summary.to_api(),
        }

    @classmethod
    def from_api(cls, query: EntriesReportQuery, data: dict[str, Any]) -> "EntriesReport":
        """원격 페이로드 파싱 (summary는 행에서 재계산)"""
        rows = tuple(ReportRow.from_api(e) for e in data.get("entries") or [])
        return cls(query=query, rows=rows, summary=ReportSummary.from_rows(rows))


# -------------------------------------------------------------------------
# 집계
# -------------------------------------------------------------------------

def _party_id_for_filter(entry: LedgerEntry, category: str | None) -> list[str]:
    """거래처 필터가 비교할 관계 ID 목록"""
    relations = entry.relation_ids()
    if category in DEBIT_CATEGORIES_WITH_MAZDOOR:
        return [relations["mazdoor"]] if "mazdoor" in relations else []
    if category in DEBIT_CATEGORIES_WITH_SUPPLIER:
        return [relations["supplier"]] if "supplier" in relations else []
    if category is not None:
        # 입금 카테고리 (credit 포함)는 고객 기준
        return [relations["customer"]] if "customer" in relations else []
    # 계좌는 거래처가 아님
    return [party_id for name, party_id in relations.items() if name != "account"]


def entry_matches(entry: LedgerEntry, query: EntriesReportQuery) -> bool:
    """항목 하나의 AND 조건 필터 검사"""
    if query.category is not None:
        if query.category == ALL_CREDIT_CATEGORY:
            if not isinstance(entry, CreditEntry):
                return False
        elif entry.category != query.category:
            return False

    if query.related_party_id is not None:
        if query.related_party_id not in _party_id_for_filter(entry, query.category):
            return False

    if query.description_contains is not None:
        if query.description_contains.lower() not in (entry.description or "").lower():
            return False

    return True


def _row(memo: DailyCashMemo, entry: LedgerEntry) -> ReportRow:
    party = entry.related_party
    return ReportRow(
        date=memo.date,
        kind=entry.kind.value,
        category=entry.category,
        name=entry.name,
        description=entry.description,
        related_party=party.label if party is not None else None,
        payment_method=entry.payment_method,
        amount=entry.amount,
        memo_id=memo.id,
        entry_id=entry.id,
    )


def build_entries_report(
    memos: Iterable[DailyCashMemo],
    query: EntriesReportQuery,
) -> EntriesReport:
    """펼치기, 필터링, 집계

    범위 밖의 날짜는 무시.
    행 순서: 날짜 오름차순, 같은 날은 입금 먼저, 그 다음 추가 순서

    Args:
        memos: 원장 하루치 목록 (순서 무관)
        query: 검증된 필터

    Returns:
        필터링된 행 기준 summary를 포함한 EntriesReport
    """
    in_range = sorted(
        (m for m in memos if query.start_date <= m.date <= query.end_date),
        key=lambda m: m.date,
    )

    rows: list[ReportRow] = []
    for memo in in_range:
        for entry in (*memo.credit_entries, *memo.debit_entries):
            if entry_matches(entry, query):
                rows.append(_row(memo, entry))

    return EntriesReport(query=query, rows=tuple(rows), summary=ReportSummary.from_rows(rows))
