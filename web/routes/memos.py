"""
일일 현금 메모 라우트

서버 측 원장 API.
CashBook의 원장 오류는 ``web.app``의 예외 핸들러가 HTTP 응답으로 변환
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query, Request

from core.ledger.book import CashBook
from core.ledger.memo import DailyCashMemo
from core.ledger.report import EntriesReportQuery
from core.types import EntryKind
from core.utils.timezone import business_date
from web.dependencies import get_cash_book
from web.models.requests import CreateMemoRequest, UpdateMemoRequest
from web.models.responses import ApiResponse

router = APIRouter(prefix="/api/daily-cash-memos", tags=["Daily cash memos"])


def _memo_response(memo: DailyCashMemo, message: str | None = None) -> ApiResponse:
    return ApiResponse(data={"memo": memo.to_api()}, message=message)


# =========================================================================
# 조회
# =========================================================================

@router.get("/date/{memo_date}", response_model=ApiResponse)
async def get_memo_by_date(
    memo_date: str = Path(..., description="YYYY-MM-DD"),
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """날짜의 메모 (메모가 없으면 404)"""
    memo = await book.require_memo(memo_date)
    return _memo_response(memo)


@router.get("/previous-balance", response_model=ApiResponse)
async def get_previous_balance(
    memo_date: str | None = Query(default=None, alias="date", description="YYYY-MM-DD (default: today)"),
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """직전 가장 최근 날의 마감 잔액 (없으면 0)"""
    balance = await book.previous_balance(memo_date or business_date())
    return ApiResponse(data={"previousBalance": float(balance)})


@router.get("/entries", response_model=ApiResponse)
async def get_entries_report(
    request: Request,
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """기간 항목 리포트

    Query: startDate, endDate (필수), category, mazdoorId, customerId,
    supplierId, description
    """
    query = EntriesReportQuery.from_params(dict(request.query_params))
    report = await book.entries_report(query)
    return ApiResponse(data=report.to_api())


# =========================================================================
# 변경
# =========================================================================

@router.post("", response_model=ApiResponse, status_code=201)
async def create_memo(
    request: CreateMemoRequest,
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """원장 하루치 생성 (이미 있으면 409)"""
    memo = await book.create_memo(
        request.date,
        credit_entries=request.credit_entries,
        debit_entries=request.debit_entries,
        notes=request.notes,
        opening_balance=request.client_opening_balance,
    )
    return _memo_response(memo, "Daily cash memo created")


@router.post("/recompute", response_model=ApiResponse)
async def recompute_forward(
    from_date: str = Query(..., alias="fromDate", description="YYYY-MM-DD"),
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """fromDate 이후 draft 날짜의 이월 잔액 재설정"""
    result = await book.recompute_forward(from_date)
    return ApiResponse(data=result.to_api())


async def _append(
    book: CashBook,
    memo_id: str,
    kind: EntryKind,
    body: dict[str, Any],
) -> ApiResponse:
    data = dict(body)
    expected_version = data.pop("expectedVersion", None)
    memo = await book.append_entry(
        memo_id,
        kind,
        data,
        expected_version=int(expected_version) if expected_version is not None else None,
    )
    return _memo_response(memo, "Entry added")


@router.post("/{memo_id}/credit", response_model=ApiResponse)
async def append_credit(
    memo_id: str,
    body: dict[str, Any] = Body(...),
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """입금 항목 하나 추가"""
    return await _append(book, memo_id, EntryKind.CREDIT, body)


@router.post("/{memo_id}/debit", response_model=ApiResponse)
async def append_debit(
    memo_id: str,
    body: dict[str, Any] = Body(...),
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """출금 항목 하나 추가"""
    return await _append(book, memo_id, EntryKind.DEBIT, body)


@router.put("/{memo_id}", response_model=ApiResponse)
async def update_memo(
    memo_id: str,
    request: UpdateMemoRequest,
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """항목 및/또는 notes 일괄 교체

    마감된 날짜의 항목은 변경 불가 (423), notes는 가능
    """
    memo = await book.replace_entries(
        memo_id,
        credit_entries=request.credit_entries,
        debit_entries=request.debit_entries,
        notes=request.notes,
        expected_version=request.expected_version,
    )
    return _memo_response(memo, "Daily cash memo updated")


@router.post("/{memo_id}/post", response_model=ApiResponse)
async def post_memo(
    memo_id: str,
    book: CashBook = Depends(get_cash_book),
) -> ApiResponse:
    """draft → posted (이미 마감이면 409)"""
    memo = await book.post_by_id(memo_id)
    return _memo_response(memo, "Daily cash memo posted")
