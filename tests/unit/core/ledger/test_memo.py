"""
core/ledger/memo.py 테스트

파생 잔액, 불변 변경 헬퍼, 마감, API 형식
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.ledger.entry import parse_entry, stamp_new_entry
from core.ledger.errors import (
    ImmutableMemoError,
    InvalidStateTransition,
    NotFoundError,
    ValidationError,
)
from core.ledger.memo import DailyCashMemo, parse_date
from core.types import EntryKind, MemoStatus

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def _credit(amount, entry_id: str | None = None):
    entry = parse_entry("credit", {"name": "Sale", "amount": amount, "account": "acc-1"})
    return stamp_new_entry(entry, entry_id, NOW) if entry_id else entry


def _debit(amount, entry_id: str | None = None):
    entry = parse_entry("debit", {"name": "Rent", "amount": amount, "category": "rent"})
    return stamp_new_entry(entry, entry_id, NOW) if entry_id else entry


@pytest.fixture
def memo() -> DailyCashMemo:
    return DailyCashMemo(
        date=date(2025, 1, 1),
        opening_balance=Decimal("100.00"),
        credit_entries=(_credit(1000, "c1"), _credit(50, "c2")),
        debit_entries=(_debit(300, "d1"),),
        id="m-1",
    )


class TestParseDate:
    """parse_date 테스트"""

    def test_iso_string(self) -> None:
        assert parse_date("2025-01-31") == date(2025, 1, 31)

    def test_date_passthrough(self) -> None:
        assert parse_date(date(2025, 1, 31)) == date(2025, 1, 31)

    def test_datetime_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_date(datetime(2025, 1, 31, 10, 0))

    @pytest.mark.parametrize("value", ["2025-13-01", "yesterday", ""])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValidationError):
            parse_date(value)


class TestDerivedValues:
    """합계 및 마감 잔액"""

    def test_sums(self, memo: DailyCashMemo) -> None:
        assert memo.credit_sum == Decimal("1050.00")
        assert memo.debit_sum == Decimal("300.00")

    def test_closing_balance(self, memo: DailyCashMemo) -> None:
        """이월 + 입금 − 출금"""
        assert memo.closing_balance == Decimal("850.00")

    def test_empty_day(self) -> None:
        empty = DailyCashMemo(date=date(2025, 1, 1), opening_balance=Decimal("5"))
        assert empty.closing_balance == Decimal("5")
        assert empty.status == MemoStatus.DRAFT.value

    def test_negative_closing_allowed(self) -> None:
        """잔액을 넘는 출금도 그대로 기록"""
        memo = DailyCashMemo(date=date(2025, 1, 1), debit_entries=(_debit(10, "d1"),))
        assert memo.closing_balance == Decimal("-10.00")


class TestMutationHelpers:
    """with_* 헬퍼는 새 메모 반환"""

    def test_add_does_not_touch_original(self, memo: DailyCashMemo) -> None:
        updated = memo.with_entry_added(_debit(50, "d2"))

        assert len(updated.debit_entries) == 2
        assert len(memo.debit_entries) == 1
        assert updated.closing_balance == Decimal("800.00")

    def test_add_keeps_column(self, memo: DailyCashMemo) -> None:
        updated = memo.with_entry_added(_credit(1, "c3"))
        assert [e.id for e in updated.credit_entries] == ["c1", "c2", "c3"]
        assert updated.debit_entries == memo.debit_entries

    def test_replace_keeps_position(self, memo: DailyCashMemo) -> None:
        replacement = _credit(10, "c1")
        updated = memo.with_entry_replaced("c1", replacement)
        assert [e.id for e in updated.credit_entries] == ["c1", "c2"]
        assert updated.credit_entries[0].amount == Decimal("10.00")

    def test_replace_unknown(self, memo: DailyCashMemo) -> None:
        with pytest.raises(NotFoundError):
            memo.with_entry_replaced("nope", _credit(10, "nope"))

    def test_remove_by_id(self, memo: DailyCashMemo) -> None:
        updated = memo.with_entry_removed(EntryKind.CREDIT, "c1")
        assert [e.id for e in updated.credit_entries] == ["c2"]

    def test_remove_unknown_id(self, memo: DailyCashMemo) -> None:
        with pytest.raises(NotFoundError):
            memo.with_entry_removed("debit", "c1")

    def test_remove_structural_without_id(self) -> None:
        """구조가 같은 ID 없는 항목 중 첫 번째만 삭제"""
        a = _debit(10)
        memo = DailyCashMemo(date=date(2025, 1, 1), debit_entries=(a, _debit(10), _debit(20)))

        updated = memo.with_entry_removed("debit", a)

        assert [e.amount for e in updated.debit_entries] == [Decimal("10.00"), Decimal("20.00")]

    def test_structural_match_ignores_entries_with_ids(self) -> None:
        memo = DailyCashMemo(date=date(2025, 1, 1), debit_entries=(_debit(10, "d1"),))
        with pytest.raises(NotFoundError):
            memo.with_entry_removed("debit", _debit(10))

    def test_notes_trimmed(self, memo: DailyCashMemo) -> None:
        assert memo.with_notes("  hello  ").notes == "hello"

    def test_find_entry(self, memo: DailyCashMemo) -> None:
        assert memo.find_entry("debit", "d1").amount == Decimal("300.00")
        with pytest.raises(NotFoundError):
            memo.find_entry("credit", "d1")


class TestPosting:
    """draft → posted"""

    def test_post(self, memo: DailyCashMemo) -> None:
        posted = memo.posted(at=NOW)
        assert posted.is_posted
        assert posted.posted_at == NOW
        assert not memo.is_posted

    def test_post_twice(self, memo: DailyCashMemo) -> None:
        with pytest.raises(InvalidStateTransition):
            memo.posted().posted()

    def test_posted_rejects_entry_changes(self, memo: DailyCashMemo) -> None:
        posted = memo.posted()
        with pytest.raises(ImmutableMemoError):
            posted.with_entry_added(_credit(1, "c9"))
        with pytest.raises(ImmutableMemoError):
            posted.with_entry_removed("credit", "c1")
        with pytest.raises(ImmutableMemoError):
            posted.with_entry_replaced("c1", _credit(1, "c1"))
        with pytest.raises(ImmutableMemoError):
            posted.with_entries(credit_entries=())

    def test_posted_allows_notes(self, memo: DailyCashMemo) -> None:
        posted = memo.posted().with_notes("counted twice")
        assert posted.notes == "counted twice"
        assert posted.is_posted


class TestWireFormat:
    """from_api / to_api 테스트"""

    def test_to_api_totals(self, memo: DailyCashMemo) -> None:
        data = memo.to_api()
        assert data["_id"] == "m-1"
        assert data["date"] == "2025-01-01"
        assert data["openingBalance"] == 100.0
        assert data["totalCredit"] == 1150.0
        assert data["totalDebit"] == 300.0
        assert data["closingBalance"] == 850.0

    def test_round_trip(self, memo: DailyCashMemo) -> None:
        assert DailyCashMemo.from_api(memo.to_api()) == memo

    def test_previous_balance_key(self) -> None:
        memo = DailyCashMemo.from_api({"date": "2025-01-02T00:00:00.000Z", "previousBalance": 700})
        assert memo.date == date(2025, 1, 2)
        assert memo.opening_balance == Decimal("700.00")

    def test_stored_closing_is_ignored(self) -> None:
        memo = DailyCashMemo.from_api({
            "date": "2025-01-02",
            "openingBalance": 10,
            "closingBalance": 999999,
        })
        assert memo.closing_balance == Decimal("10.00")

    def test_unknown_status(self) -> None:
        with pytest.raises(ValidationError):
            DailyCashMemo.from_api({"date": "2025-01-02", "status": "archived"})
