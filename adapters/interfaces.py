"""
Adapter interface definitions

의존성 주입 및 Mock 교체를 위해 Protocol로 정의.
모든 구현체는 이 Protocol을 준수해야 함.
금액은 항상 Decimal
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from core.types import PartyKind

if TYPE_CHECKING:
    from core.ledger.book import RecomputeResult
    from core.ledger.entry import CreditEntry, DebitEntry, LedgerEntry
    from core.ledger.memo import DailyCashMemo
    from core.ledger.report import EntriesReport, EntriesReportQuery


@runtime_checkable
class IMemoStore(Protocol):
    """원장 날짜 영속화 (서버 측)

    날짜당 메모는 최대 하나.
    ``save``는 버전을 증가시키며 저장된 버전과 다르면 거부
    """

    async def get_by_date(self, memo_date: date) -> "DailyCashMemo | None":
        """날짜의 메모 (없으면 None)"""
        ...

    async def get_by_id(self, memo_id: str) -> "DailyCashMemo | None":
        """저장소 ID로 메모 조회 (없으면 None)"""
        ...

    async def get_latest_before(self, memo_date: date) -> "DailyCashMemo | None":
        """해당 날짜 이전의 가장 최근 메모"""
        ...

    async def list_between(self, start: date, end: date) -> list["DailyCashMemo"]:
        """start <= date <= end 메모 (날짜 오름차순)"""
        ...

    async def list_after(self, memo_date: date) -> list["DailyCashMemo"]:
        """해당 날짜 이후 메모 (날짜 오름차순)"""
        ...

    async def insert(self, memo: "DailyCashMemo") -> "DailyCashMemo":
        """새 메모 저장 (ID 및 타임스탬프 부여)

        Raises:
            ConflictError: 해당 날짜에 이미 메모 있음
        """
        ...

    async def save(self, memo: "DailyCashMemo") -> "DailyCashMemo":
        """저장된 메모 교체 (버전 증가)

        Raises:
            NotFoundError: 알 수 없는 메모 ID
            ConflictError: 저장된 버전이 memo.version과 다름
        """
        ...


@runtime_checkable
class ICashMemoApi(Protocol):
    """원격 일일 현금 메모 API (클라이언트 측)

    HTTP 구현: ``CashMemoRestClient``, 프로세스 내 구현: ``MockCashMemoApi``
    """

    async def get_memo_by_date(self, memo_date: date) -> "DailyCashMemo | None":
        """날짜의 메모 (아직 없으면 None)"""
        ...

    async def get_previous_balance(self, memo_date: date) -> Decimal:
        """직전 가장 최근 날의 마감 잔액 (없으면 0)"""
        ...

    async def create_memo(
        self,
        memo_date: date,
        opening_balance: Decimal,
        credit_entries: "list[CreditEntry] | None" = None,
        debit_entries: "list[DebitEntry] | None" = None,
        notes: str = "",
    ) -> "DailyCashMemo":
        """원장 하루치 생성"""
        ...

    async def append_entry(
        self,
        memo_id: str,
        entry: "LedgerEntry",
        expected_version: int | None = None,
    ) -> "DailyCashMemo":
        """항목 하나를 해당 열에 추가"""
        ...

    async def update_memo(
        self,
        memo_id: str,
        credit_entries: "list[CreditEntry] | None" = None,
        debit_entries: "list[DebitEntry] | None" = None,
        notes: str | None = None,
        expected_version: int | None = None,
    ) -> "DailyCashMemo":
        """항목 및/또는 notes 일괄 교체"""
        ...

    async def post_memo(self, memo_id: str) -> "DailyCashMemo":
        """draft → posted"""
        ...

    async def recompute_forward(self, from_date: date) -> "RecomputeResult":
        """특정 날짜 이후 draft 날짜의 이월 잔액 재설정"""
        ...

    async def get_entries_report(self, query: "EntriesReportQuery") -> "EntriesReport":
        """기간 항목 리포트"""
        ...


@runtime_checkable
class IPartyApi(Protocol):
    """원격 고객/공급처 API"""

    async def list_parties(self, kind: PartyKind, limit: int = 1000) -> list[dict[str, Any]]:
        """종류별 전체 거래처"""
        ...

    async def get_party(self, kind: PartyKind, party_id: str) -> dict[str, Any]:
        """거래처 하나

        Raises:
            NotFoundError: 알 수 없는 ID
        """
        ...

    async def get_party_transactions(
        self,
        kind: PartyKind,
        party_id: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """거래처 거래 이력 한 페이지

        Returns:
            {"transactions": [...], "pagination": {"page", "total", "totalPages"}}
        """
        ...

    async def create_party(self, kind: PartyKind, data: dict[str, Any]) -> dict[str, Any]:
        ...

    async def update_party(
        self,
        kind: PartyKind,
        party_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        ...

    async def delete_party(self, kind: PartyKind, party_id: str) -> None:
        ...
