"""
헬스 체크 엔드포인트

GET /health - 서버 상태
"""

from fastapi import APIRouter

from core.utils.timezone import now_utc
from web.dependencies import is_cash_book_ready
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: CashBook이 열려 있으면 "ok", 그 전에는 "starting"
    """
    return HealthResponse(
        status="ok" if is_cash_book_ready() else "starting",
        timestamp=now_utc(),
    )
