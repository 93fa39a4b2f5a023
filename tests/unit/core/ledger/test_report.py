"""
core/ledger/report.py 테스트

기간/카테고리/거래처/설명 필터와 필터링된 행의 summary
"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger.entry import parse_entry
from core.ledger.errors import ValidationError
from core.ledger.memo import DailyCashMemo
from core.ledger.report import (
    EntriesReport,
    EntriesReportQuery,
    ReportRow,
    build_entries_report,
)


@pytest.fixture
def memos() -> list[DailyCashMemo]:
    """순서가 섞인 사흘치"""
    day1 = DailyCashMemo(
        date=date(2025, 1, 1),
        id="m1",
        credit_entries=(
            parse_entry("credit", {
                "name": "Payment", "amount": 500, "account": "acc-1",
                "category": "customer_payment", "customer": "c-1",
            }),
        ),
        debit_entries=(
            parse_entry("debit", {
                "name": "Labour", "amount": 200, "category": "mazdoor",
                "mazdoor": {"_id": "z-1", "name": "Rafiq"}, "description": "Loading trucks",
            }),
        ),
    )
    day2 = DailyCashMemo(
        date=date(2025, 1, 2),
        id="m2",
        debit_entries=(
            parse_entry("debit", {
                "name": "Steel", "amount": 1000, "category": "raw_material", "supplier": "s-1",
            }),
            parse_entry("debit", {
                "name": "Labour", "amount": 150, "category": "mazdoor", "mazdoor": "z-2",
                "description": "Unloading",
            }),
        ),
    )
    day3 = DailyCashMemo(
        date=date(2025, 2, 1),
        id="m3",
        credit_entries=(
            parse_entry("credit", {"name": "Sale", "amount": 90, "account": "acc-1"}),
        ),
    )
    return [day2, day3, day1]


class TestQuery:
    """EntriesReportQuery 검증 및 API 형식"""

    def test_start_after_end(self) -> None:
        with pytest.raises(ValidationError):
            EntriesReportQuery.create("2025-02-01", "2025-01-01")

    def test_unknown_category(self) -> None:
        with pytest.raises(ValidationError):
            EntriesReportQuery.create("2025-01-01", "2025-01-31", category="bribes")

    def test_missing_dates(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            EntriesReportQuery.from_params({"startDate": "2025-01-01"})
        assert "endDate" in exc_info.value.fields

    def test_from_params(self) -> None:
        query = EntriesReportQuery.from_params({
            "startDate": "2025-01-01",
            "endDate": "2025-01-31",
            "category": "mazdoor",
            "mazdoorId": "z-1",
            "description": "  load ",
        })

        assert query.category == "mazdoor"
        assert query.related_party_id == "z-1"
        assert query.description_contains == "load"

    def test_empty_values_dropped(self) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-01-31", category="", description_contains=" ")
        assert query.category is None
        assert query.description_contains is None

    @pytest.mark.parametrize("category,key", [
        ("mazdoor", "mazdoorId"),
        ("raw_material", "supplierId"),
        ("customer_payment", "customerId"),
    ])
    def test_to_params_party_key(self, category: str, key: str) -> None:
        query = EntriesReportQuery.create(
            "2025-01-01", "2025-01-31", category=category, related_party_id="x"
        )
        params = query.to_params()
        assert params[key] == "x"
        assert params["startDate"] == "2025-01-01"


class TestBuildReport:
    """build_entries_report 테스트"""

    def test_range_order_and_summary(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-01-31")

        report = build_entries_report(memos, query)

        assert [(r.date.day, r.kind) for r in report.rows] == [
            (1, "credit"), (1, "debit"), (2, "debit"), (2, "debit"),
        ]
        assert report.summary.total_credit == Decimal("500.00")
        assert report.summary.total_debit == Decimal("1350.00")
        assert report.summary.closing_balance == Decimal("-850.00")
        assert report.summary.count == 4

    def test_all_credit_category(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-12-31", category="credit")

        report = build_entries_report(memos, query)

        assert [r.name for r in report.rows] == ["Payment", "Sale"]
        assert report.summary.total_debit == Decimal("0")

    def test_category_and_party(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create(
            "2025-01-01", "2025-12-31", category="mazdoor", related_party_id="z-2"
        )

        report = build_entries_report(memos, query)

        assert len(report.rows) == 1
        assert report.rows[0].amount == Decimal("150.00")

    def test_party_without_category(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-12-31", related_party_id="s-1")
        report = build_entries_report(memos, query)
        assert [r.name for r in report.rows] == ["Steel"]

    def test_party_filter_ignores_account(self, memos: list[DailyCashMemo]) -> None:
        """계좌 ID는 거래처가 아님"""
        query = EntriesReportQuery.create("2025-01-01", "2025-12-31", related_party_id="acc-1")
        report = build_entries_report(memos, query)
        assert report.rows == ()

    def test_description_case_insensitive(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create(
            "2025-01-01", "2025-12-31", description_contains="LOAD"
        )

        report = build_entries_report(memos, query)

        assert [r.description for r in report.rows] == ["Loading trucks", "Unloading"]

    def test_related_party_label(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-01-01", category="mazdoor")
        report = build_entries_report(memos, query)
        assert report.rows[0].related_party == "Rafiq"
        assert report.rows[0].memo_id == "m1"

    def test_empty_range(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2024-01-01", "2024-12-31")
        report = build_entries_report(memos, query)
        assert report.rows == ()
        assert report.summary.count == 0


class TestWireFormat:
    """EntriesReport.from_api / ReportRow.from_api 테스트"""

    def test_summary_recomputed(self, memos: list[DailyCashMemo]) -> None:
        query = EntriesReportQuery.create("2025-01-01", "2025-01-31")
        report = build_entries_report(memos, query)
        payload = report.to_api()
        payload["summary"]["totalCredit"] = 1

        parsed = EntriesReport.from_api(query, payload)

        assert parsed.summary == report.summary
        assert parsed.rows == report.rows

    def test_legacy_row_columns(self) -> None:
        row = ReportRow.from_api({
            "date": "2025-01-02T00:00:00.000Z",
            "type": "debit",
            "category": "raw_material",
            "name": "Steel",
            "supplier": "Steel House",
            "amount": 10,
        })
        assert row.related_party == "Steel House"
        assert row.date == date(2025, 1, 2)
