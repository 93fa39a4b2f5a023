"""
의존성 주입

FastAPI Depends용 의존성
"""

from fastapi import HTTPException

from core.ledger.book import CashBook


# =========================================================================
# CashBook (프로세스당 하나)
# =========================================================================

# 앱 lifespan 또는 테스트에서 직접 설정
_cash_book: CashBook | None = None


def set_cash_book(book: CashBook | None) -> None:
    """프로세스 전역 CashBook 설정

    Args:
        book: CashBook 인스턴스 (None이면 해제)
    """
    global _cash_book
    _cash_book = book


def get_cash_book() -> CashBook:
    """프로세스 전역 CashBook

    Raises:
        HTTPException: lifespan이 저장소를 열기 전이면 503
    """
    if _cash_book is None:
        raise HTTPException(status_code=503, detail="Cash book is not initialised")
    return _cash_book


def is_cash_book_ready() -> bool:
    return _cash_book is not None
