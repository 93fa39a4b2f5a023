"""
일일 현금 메모 (원장 하루치)

한 날짜의 입금/출금 항목, 날짜 생성 시점의 이월 잔액 스냅샷,
자유 메모(notes), draft/posted 상태.

메모는 불변 값이며 모든 변경 헬퍼는 새 메모를 반환.
마감 잔액은 항상 항목에서 계산하며 저장하지 않음
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from core.domain.state_machines import MemoStateMachine, StateMachineError
from core.ledger.entry import (
    ZERO,
    CreditEntry,
    DebitEntry,
    LedgerEntry,
    format_timestamp,
    parse_entry,
    parse_timestamp,
    round_amount,
)
from core.ledger.errors import (
    ImmutableMemoError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from core.types import EntryKind, MemoStatus


def parse_date(value: date | str) -> date:
    """ISO 달력 날짜 (시간 포함 시 거부)

    Raises:
        ValidationError: ISO 날짜가 아님
    """
    if isinstance(value, datetime):
        raise ValidationError("Date must not carry a time", {"date": str(value)})
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}", {"date": "Expected YYYY-MM-DD"}) from e


@dataclass(frozen=True)
class DailyCashMemo:
    """원장 하루치

    Attributes:
        date: 달력 날짜 (고유 키)
        opening_balance: 날짜 생성 시 결정된 이월 잔액 스냅샷
        credit_entries: 입금 항목 (추가 순서)
        debit_entries: 출금 항목 (추가 순서)
        notes: 자유 메모 (상태와 무관하게 수정 가능)
        status: draft 또는 posted
        id: 저장소 ID (원격 생성 전에는 None)
        version: 저장된 변경마다 1 증가
        created_at / updated_at / posted_at: 저장소 타임스탬프
    """

    date: date
    opening_balance: Decimal = ZERO
    credit_entries: tuple[CreditEntry, ...] = field(default_factory=tuple)
    debit_entries: tuple[DebitEntry, ...] = field(default_factory=tuple)
    notes: str = ""
    status: str = MemoStatus.DRAFT.value
    id: str | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None
    posted_at: datetime | None = None

    # -------------------------------------------------------------------------
    # 파생 값
    # -------------------------------------------------------------------------

    @property
    def is_posted(self) -> bool:
        """항목 변경 불가 상태 여부"""
        return self.status == MemoStatus.POSTED.value

    @property
    def credit_sum(self) -> Decimal:
        """입금 합계 (이월 잔액 제외)"""
        return sum((e.amount for e in self.credit_entries), ZERO)

    @property
    def debit_sum(self) -> Decimal:
        """출금 합계"""
        return sum((e.amount for e in self.debit_entries), ZERO)

    @property
    def closing_balance(self) -> Decimal:
        """이월 + Σ입금 − Σ출금 (접근 시마다 재계산)"""
        return self.opening_balance + self.credit_sum - self.debit_sum

    def state_machine(self) -> MemoStateMachine:
        """현재 상태의 상태 머신"""
        return MemoStateMachine(self.status)

    def entries(self, kind: EntryKind | str) -> tuple[LedgerEntry, ...]:
        """한 열의 항목"""
        if EntryKind(kind) == EntryKind.CREDIT:
            return self.credit_entries
        return self.debit_entries

    def find_entry(self, kind: EntryKind | str, entry_id: str) -> LedgerEntry:
        """ID로 항목 조회

        Raises:
            NotFoundError: 해당 열에 ID가 없음
        """
        for entry in self.entries(kind):
            if entry.id == entry_id:
                return entry
        raise NotFoundError(f"{EntryKind(kind).value} entry {entry_id} not found on {self.date}")

    # -------------------------------------------------------------------------
    # 변경 헬퍼 (새 메모 반환)
    # -------------------------------------------------------------------------

    def ensure_mutable(self) -> None:
        """마감된 경우 ImmutableMemoError 발생"""
        if not self.state_machine().can_edit_entries:
            raise ImmutableMemoError(f"Daily cash memo for {self.date} is posted")

    def _with_column(self, kind: EntryKind, entries: tuple[LedgerEntry, ...]) -> "DailyCashMemo":
        if kind == EntryKind.CREDIT:
            return replace(self, credit_entries=entries)
        return replace(self, debit_entries=entries)

    def with_entry_added(self, entry: LedgerEntry) -> "DailyCashMemo":
        """항목을 해당 열에 추가"""
        self.ensure_mutable()
        return self._with_column(entry.kind, self.entries(entry.kind) + (entry,))

    def with_entry_replaced(self, entry_id: str, entry: LedgerEntry) -> "DailyCashMemo":
        """ID가 같은 항목 교체 (위치 유지)"""
        self.ensure_mutable()
        self.find_entry(entry.kind, entry_id)
        column = tuple(entry if e.id == entry_id else e for e in self.entries(entry.kind))
        return self._with_column(entry.kind, column)

    def with_entry_removed(self, kind: EntryKind | str, entry: LedgerEntry | str) -> "DailyCashMemo":
        """ID로 항목 삭제

        ID가 없는 항목은 구조 비교로 찾음 (저장소가 ID를 부여하기 전의 항목)

        Raises:
            NotFoundError: 일치하는 항목 없음
            ImmutableMemoError: 마감된 메모
        """
        self.ensure_mutable()
        kind = EntryKind(kind)
        column = self.entries(kind)
        if isinstance(entry, str):
            target_id: str | None = entry
            target = None
        else:
            target_id = entry.id
            target = entry

        kept: list[LedgerEntry] = []
        removed = False
        for e in column:
            if removed:
                kept.append(e)
            elif target_id is not None and e.id == target_id:
                removed = True
            elif target_id is None and target is not None and e.id is None and e.same_structure(target):
                removed = True
            else:
                kept.append(e)

        if not removed:
            raise NotFoundError(f"{kind.value} entry {target_id or '(unsaved)'} not found on {self.date}")
        return self._with_column(kind, tuple(kept))

    def with_entries(
        self,
        credit_entries: tuple[CreditEntry, ...] | None = None,
        debit_entries: tuple[DebitEntry, ...] | None = None,
    ) -> "DailyCashMemo":
        """한 열 또는 두 열 일괄 교체"""
        self.ensure_mutable()
        return replace(
            self,
            credit_entries=self.credit_entries if credit_entries is None else credit_entries,
            debit_entries=self.debit_entries if debit_entries is None else debit_entries,
        )

    def with_notes(self, notes: str) -> "DailyCashMemo":
        """notes 교체 (마감 후에도 허용)"""
        return replace(self, notes=(notes or "").strip())

    def posted(self, at: datetime | None = None) -> "DailyCashMemo":
        """draft → posted

        Raises:
            InvalidStateTransition: 이미 마감됨
        """
        machine = self.state_machine()
        try:
            machine.post()
        except StateMachineError as e:
            raise InvalidStateTransition(f"Daily cash memo for {self.date} is already posted") from e
        return replace(self, status=machine.state, posted_at=at)

    # -------------------------------------------------------------------------
    # API 형식
    # -------------------------------------------------------------------------

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "DailyCashMemo":
        """API 페이로드에서 생성

        ``openingBalance`` 또는 이전 키 ``previousBalance`` 허용.
        저장된 ``closingBalance``는 무시하고 재계산
        """
        opening = data.get("openingBalance", data.get("previousBalance", 0)) or 0
        status = data.get("status") or MemoStatus.DRAFT.value
        if status not in {s.value for s in MemoStatus}:
            raise ValidationError(f"Unknown memo status: {status}", {"status": status})
        memo_id = data.get("_id") or data.get("id")
        return cls(
            date=parse_date(str(data["date"])[:10]),
            opening_balance=round_amount(opening),
            credit_entries=tuple(
                parse_entry(EntryKind.CREDIT, e) for e in data.get("creditEntries") or []
            ),
            debit_entries=tuple(
                parse_entry(EntryKind.DEBIT, e) for e in data.get("debitEntries") or []
            ),
            notes=data.get("notes") or "",
            status=status,
            id=str(memo_id) if memo_id else None,
            version=int(data.get("version") or 1),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            posted_at=parse_timestamp(data.get("postedAt")),
        )

    def to_api(self) -> dict[str, Any]:
        """API 페이로드 (camelCase, 금액은 소수점 2자리 숫자)"""
        data: dict[str, Any] = {
            "date": self.date.isoformat(),
            "openingBalance": float(self.opening_balance),
            "creditEntries": [e.to_api() for e in self.credit_entries],
            "debitEntries": [e.to_api() for e in self.debit_entries],
            "notes": self.notes,
            "status": self.status,
            "version": self.version,
            "totalCredit": float(self.opening_balance + self.credit_sum),
            "totalDebit": float(self.debit_sum),
            "closingBalance": float(self.closing_balance),
        }
        if self.id is not None:
            data["_id"] = self.id
        for key, value in (
            ("createdAt", self.created_at),
            ("updatedAt", self.updated_at),
            ("postedAt", self.posted_at),
        ):
            if value is not None:
                data[key] = format_timestamp(value)
        return data
