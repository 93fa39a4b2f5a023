"""
Cash memo REST client

원격 원장 API용 httpx 클라이언트 (``ICashMemoApi``, ``IPartyApi`` 구현)

응답 형식: ``{"success", "data", "message"}``
오류 응답은 원장 오류 종류로 매핑:

- 400 → ValidationError
- 404 → NotFoundError
- 409 → ConflictError (본문 code가 지정하면 InvalidStateTransition)
- 423 → ImmutableMemoError
- 5xx 및 전송 오류 → UpstreamFailure
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

import httpx

from core.config.loader import ApiConfig
from core.ledger.book import RecomputeResult
from core.ledger.entry import CreditEntry, DebitEntry, LedgerEntry, round_amount
from core.ledger.errors import (
    ERRORS_BY_CODE,
    ConflictError,
    ImmutableMemoError,
    InvalidStateTransition,
    LedgerError,
    NotFoundError,
    UpstreamFailure,
    ValidationError,
)
from core.ledger.memo import DailyCashMemo
from core.ledger.report import EntriesReport, EntriesReportQuery
from core.types import PartyKind

logger = logging.getLogger(__name__)

MEMOS_PATH = "/daily-cash-memos"


def _party_path(kind: PartyKind | str) -> str:
    return "/customers" if PartyKind(kind) == PartyKind.CUSTOMER else "/suppliers"


def error_from_response(status_code: int, body: dict[str, Any]) -> LedgerError:
    """HTTP 오류 응답 → 원장 오류

    Args:
        status_code: HTTP 상태 코드
        body: 디코딩된 JSON 본문 (JSON이 아니면 {})
    """
    message = body.get("message") or f"HTTP {status_code}"
    code = body.get("code")

    if status_code == 400:
        return ValidationError(message, body.get("errors") or {})
    if status_code == 404:
        return NotFoundError(message)
    if status_code == 409:
        if code == InvalidStateTransition.code:
            return InvalidStateTransition(message)
        return ConflictError(message)
    if status_code == 423:
        return ImmutableMemoError(message)
    if status_code < 500 and code in ERRORS_BY_CODE and code != UpstreamFailure.code:
        error_cls = ERRORS_BY_CODE[code]
        return error_cls(message)
    return UpstreamFailure(message, status_code=status_code)


class CashMemoRestClient:
    """원격 원장 API 클라이언트

    Args:
        config: Base URL, 타임아웃, 선택적 bearer 토큰
        transport: httpx transport 교체 (테스트, 프로세스 내 ASGI 앱)

    사용법:
    ```python
    async with CashMemoRestClient(get_settings().api) as client:
        memo = await client.get_memo_by_date(date(2025, 1, 1))
    ```
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ApiConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 (지연 초기화)"""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.config.token:
                headers["Authorization"] = f"Bearer {self.config.token}"
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout_sec,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CashMemoRestClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """요청 전송 후 디코딩된 응답 반환

        Raises:
            LedgerError 하위 클래스: 오류 응답
            UpstreamFailure: 전송 오류 또는 디코딩 불가 본문
        """
        client = await self._ensure_client()

        try:
            response = await client.request(method, path, params=params, json=body)
        except httpx.RequestError as e:
            logger.error(f"요청 오류: {method} {path}: {e}")
            raise UpstreamFailure(f"Ledger API unreachable: {e}") from e

        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {}
            if response.status_code < 400:
                raise UpstreamFailure(
                    f"Ledger API returned a non-JSON body for {method} {path}",
                    status_code=response.status_code,
                )
        if not isinstance(payload, dict):
            payload = {"data": payload}

        if response.status_code >= 400:
            error = error_from_response(response.status_code, payload)
            log = logger.error if isinstance(error, UpstreamFailure) else logger.warning
            log(
                f"원장 API 오류: {response.status_code} - {error.message}",
                extra={"path": path, "code": error.code},
            )
            raise error

        return payload

    @staticmethod
    def _data(payload: dict[str, Any]) -> Any:
        return payload.get("data")

    @staticmethod
    def _memo(payload: dict[str, Any]) -> DailyCashMemo:
        data = payload.get("data") or {}
        return DailyCashMemo.from_api(data.get("memo", data))

    # =========================================================================
    # 일일 현금 메모
    # =========================================================================

    async def get_memo_by_date(self, memo_date: date) -> DailyCashMemo | None:
        """날짜의 메모 (404면 None)"""
        try:
            payload = await self._request("GET", f"{MEMOS_PATH}/date/{memo_date.isoformat()}")
        except NotFoundError:
            return None
        return self._memo(payload)

    async def get_previous_balance(self, memo_date: date) -> Decimal:
        payload = await self._request(
            "GET",
            f"{MEMOS_PATH}/previous-balance",
            params={"date": memo_date.isoformat()},
        )
        data = self._data(payload) or {}
        return round_amount(data.get("previousBalance") or 0)

    async def create_memo(
        self,
        memo_date: date,
        opening_balance: Decimal,
        credit_entries: list[CreditEntry] | None = None,
        debit_entries: list[DebitEntry] | None = None,
        notes: str = "",
    ) -> DailyCashMemo:
        body = {
            "date": memo_date.isoformat(),
            "openingBalance": float(opening_balance),
            "creditEntries": [e.to_api() for e in credit_entries or []],
            "debitEntries": [e.to_api() for e in debit_entries or []],
            "notes": notes,
        }
        payload = await self._request("POST", MEMOS_PATH, body=body)
        return self._memo(payload)

    async def append_entry(
        self,
        memo_id: str,
        entry: LedgerEntry,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        body = entry.to_api()
        if expected_version is not None:
            body["expectedVersion"] = expected_version
        payload = await self._request(
            "POST", f"{MEMOS_PATH}/{memo_id}/{entry.kind.value}", body=body
        )
        return self._memo(payload)

    async def update_memo(
        self,
        memo_id: str,
        credit_entries: list[CreditEntry] | None = None,
        debit_entries: list[DebitEntry] | None = None,
        notes: str | None = None,
        expected_version: int | None = None,
    ) -> DailyCashMemo:
        body: dict[str, Any] = {}
        if credit_entries is not None:
            body["creditEntries"] = [e.to_api() for e in credit_entries]
        if debit_entries is not None:
            body["debitEntries"] = [e.to_api() for e in debit_entries]
        if notes is not None:
            body["notes"] = notes
        if expected_version is not None:
            body["expectedVersion"] = expected_version
        payload = await self._request("PUT", f"{MEMOS_PATH}/{memo_id}", body=body)
        return self._memo(payload)

    async def post_memo(self, memo_id: str) -> DailyCashMemo:
        payload = await self._request("POST", f"{MEMOS_PATH}/{memo_id}/post")
        return self._memo(payload)

    async def recompute_forward(self, from_date: date) -> RecomputeResult:
        payload = await self._request(
            "POST",
            f"{MEMOS_PATH}/recompute",
            params={"fromDate": from_date.isoformat()},
        )
        return RecomputeResult.from_api(self._data(payload) or {})

    async def get_entries_report(self, query: EntriesReportQuery) -> EntriesReport:
        payload = await self._request(
            "GET", f"{MEMOS_PATH}/entries", params=query.to_params()
        )
        return EntriesReport.from_api(query, self._data(payload) or {})

    # =========================================================================
    # 고객 / 공급처
    # =========================================================================

    async def list_parties(self, kind: PartyKind, limit: int = 1000) -> list[dict[str, Any]]:
        payload = await self._request("GET", _party_path(kind), params={"limit": limit})
        return list(self._data(payload) or [])

    async def get_party(self, kind: PartyKind, party_id: str) -> dict[str, Any]:
        payload = await self._request("GET", f"{_party_path(kind)}/{party_id}")
        return self._data(payload) or {}

    async def get_party_transactions(
        self,
        kind: PartyKind,
        party_id: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        payload = await self._request(
            "GET", f"{_party_path(kind)}/{party_id}/transactions", params=params
        )
        return {
            "transactions": list(self._data(payload) or []),
            "pagination": payload.get("pagination") or {},
        }

    async def create_party(self, kind: PartyKind, data: dict[str, Any]) -> dict[str, Any]:
        payload = await self._request("POST", _party_path(kind), body=data)
        return self._data(payload) or {}

    async def update_party(
        self,
        kind: PartyKind,
        party_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        payload = await self._request("PUT", f"{_party_path(kind)}/{party_id}", body=data)
        return self._data(payload) or {}

    async def delete_party(self, kind: PartyKind, party_id: str) -> None:
        await self._request("DELETE", f"{_party_path(kind)}/{party_id}")
