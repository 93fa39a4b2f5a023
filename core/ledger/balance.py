"""
Balance calculator

원장 하루치의 표시용 합계를 계산하는 순수 함수와
거래처(고객/공급처) 이력 추이에 쓰는 누적 잔액.

메모가 없으면 항목 없는 날로 취급하며 이월 잔액은 호출자가 전달 (첫날은 0)
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable

from core.ledger.entry import ZERO, parse_timestamp, round_amount
from core.ledger.memo import DailyCashMemo
from core.types import EntryKind, PartyKind


@dataclass(frozen=True)
class BalanceSummary:
    """일일 현금 메모 하단에 표시되는 합계

    Attributes:
        opening_balance: 이월 잔액
        credit_sum: 입금 합계
        total_credit: 이월 + 입금 합계
        total_debit: 출금 합계
        closing_balance: total_credit − total_debit (마감 잔액)
    """

    opening_balance: Decimal
    credit_sum: Decimal
    total_credit: Decimal
    total_debit: Decimal
    closing_balance: Decimal

    def to_dict(self) -> dict[str, str]:
        """문자열 값 (Decimal 정밀도 유지)"""
        return {
            "opening_balance": str(self.opening_balance),
            "credit_sum": str(self.credit_sum),
            "total_credit": str(self.total_credit),
            "total_debit": str(self.total_debit),
            "closing_balance": str(self.closing_balance),
        }


def _opening(memo: DailyCashMemo | None, opening_balance: Decimal | None) -> Decimal:
    if opening_balance is not None:
        return opening_balance
    if memo is not None:
        return memo.opening_balance
    return ZERO


def total_credit(memo: DailyCashMemo | None, opening_balance: Decimal | None = None) -> Decimal:
    """이월 + 입금 합계

    Args:
        memo: 원장 하루치 (None → 항목 없음)
        opening_balance: 주어지면 메모의 스냅샷 대신 사용
    """
    credits = memo.credit_sum if memo is not None else ZERO
    return _opening(memo, opening_balance) + credits


def total_debit(memo: DailyCashMemo | None) -> Decimal:
    """출금 합계"""
    if memo is None:
        return ZERO
    return memo.debit_sum


def closing_balance(memo: DailyCashMemo | None, opening_balance: Decimal | None = None) -> Decimal:
    """total_credit − total_debit"""
    return total_credit(memo, opening_balance) - total_debit(memo)


def summarize(memo: DailyCashMemo | None, opening_balance: Decimal | None = None) -> BalanceSummary:
    """하루치 합계 일괄 계산"""
    opening = _opening(memo, opening_balance)
    credit_sum = memo.credit_sum if memo is not None else ZERO
    debit = total_debit(memo)
    return BalanceSummary(
        opening_balance=opening,
        credit_sum=credit_sum,
        total_credit=opening + credit_sum,
        total_debit=debit,
        closing_balance=opening + credit_sum - debit,
    )


# -------------------------------------------------------------------------
# 거래처 거래 이력
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class BalancePoint:
    """누적 잔액 시계열의 한 점"""

    index: int
    when: date | datetime | None
    kind: str
    amount: Decimal
    balance: Decimal

    @property
    def credit(self) -> Decimal:
        return self.amount if self.kind == EntryKind.CREDIT.value else ZERO

    @property
    def debit(self) -> Decimal:
        return self.amount if self.kind == EntryKind.DEBIT.value else ZERO


def _transaction_time(transaction: dict[str, Any]) -> datetime:
    when = parse_timestamp(transaction.get("date") or transaction.get("createdAt"))
    if when is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    return when


def party_totals(
    transactions: Iterable[dict[str, Any]],
    party_kind: PartyKind | str,
) -> dict[str, Decimal]:
    """거래처 이력의 입금/출금 합계

    고객 잔액 = 입금 − 출금, 공급처 잔액 = 출금 − 입금
    """
    credit = ZERO
    debit = ZERO
    for t in transactions:
        amount = round_amount(t.get("amount") or 0)
        if t.get("type") == EntryKind.CREDIT.value:
            credit += amount
        elif t.get("type") == EntryKind.DEBIT.value:
            debit += amount

    if PartyKind(party_kind) == PartyKind.CUSTOMER:
        balance = credit - debit
    else:
        balance = debit - credit
    return {"total_credit": credit, "total_debit": debit, "balance": balance}


def running_balance(transactions: Iterable[dict[str, Any]]) -> list[BalancePoint]:
    """날짜순 누적 잔액 (date가 없으면 createdAt)

    고객/공급처 모두 입금은 더하고 출금은 뺌.
    안정 정렬이므로 같은 날 거래는 원래 순서 유지
    """
    ordered = sorted(transactions, key=_transaction_time)

    points: list[BalancePoint] = []
    balance = ZERO
    for index, t in enumerate(ordered, start=1):
        amount = round_amount(t.get("amount") or 0)
        kind = t.get("type") or ""
        if kind == EntryKind.DEBIT.value:
            balance -= amount
        else:
            balance += amount
        points.append(BalancePoint(
            index=index,
            when=parse_timestamp(t.get("date") or t.get("createdAt")),
            kind=kind,
            amount=amount,
            balance=balance,
        ))
    return points
