"""
FastAPI application

라우터 등록, 오류 매핑, CashBook 생명주기
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.ledger.errors import (
    ConflictError,
    ImmutableMemoError,
    InvalidStateTransition,
    LedgerError,
    NotFoundError,
    UpstreamFailure,
    ValidationError,
)
from core.logging import setup_logging
from web.models.responses import ErrorResponse

setup_logging("web")

from web.routes import health, memos  # noqa: E402

logger = logging.getLogger(__name__)

# 원장 오류 → HTTP 상태 (먼저 일치한 항목 우선)
ERROR_STATUS: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidStateTransition, 409),
    (ConflictError, 409),
    (ImmutableMemoError, 423),
    (UpstreamFailure, 502),
]


def status_for(error: LedgerError) -> int:
    """원장 오류의 HTTP 상태 코드"""
    for error_cls, status_code in ERROR_STATUS:
        if isinstance(error, error_cls):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    미리 설정된 CashBook이 없으면 SQLite CashBook 생성
    """
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
    from core.ledger.book import CashBook
    from core.storage.memo_store import SQLiteMemoStore
    from web.dependencies import is_cash_book_ready, set_cash_book

    settings = get_settings()
    db: SQLiteAdapter | None = None

    if not is_cash_book_ready():
        db = SQLiteAdapter(settings.ledger.db_path)
        await db.connect()
        await init_schema(db)
        set_cash_book(CashBook(SQLiteMemoStore(db)))
        logger.info(f"Web: CashBook 초기화 완료 ({settings.ledger.db_path})")

    yield

    if db is not None:
        set_cash_book(None)
        await db.close()
        logger.info("Web: CashBook 종료")


app = FastAPI(
    title="Cash Book API",
    description="Daily cash memo ledger",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 오류 매핑
# =========================================================================

def _error_response(status_code: int, error: LedgerError) -> JSONResponse:
    body = ErrorResponse(**error.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} → {status_code}: {exc.message}")
    return _error_response(status_code, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    fields = {
        ".".join(str(p) for p in error["loc"][1:]) or "body": error["msg"]
        for error in exc.errors()
    }
    return _error_response(400, ValidationError("Invalid request", fields))


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(memos.router)
