"""
공통 pytest fixture

시계, 샘플 항목 페이로드, 인메모리 원장 구성
"""

import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from adapters.mock.cash_memo_api import MockCashMemoApi
from core.cache.ttl_cache import TTLCache
from core.config.loader import Settings
from core.ledger.book import CashBook
from core.storage.memo_store import InMemoryMemoStore
from web.dependencies import set_cash_book


class FakeClock:
    """수동으로 진행하는 단조 증가 초 단위 시계"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUtcClock:
    """수동으로 진행하는 UTC datetime 시계"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """테스트마다 새 Settings 싱글톤"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def utc_clock() -> FakeUtcClock:
    return FakeUtcClock()


# -------------------------------------------------------------------------
# 날짜 및 항목 페이로드
# -------------------------------------------------------------------------

@pytest.fixture
def day_a() -> date:
    return date(2025, 1, 1)


@pytest.fixture
def day_b() -> date:
    return date(2025, 1, 2)


@pytest.fixture
def credit_data() -> dict[str, Any]:
    """유효한 입금 항목 페이로드 (1000)"""
    return {"name": "Cash sale", "amount": 1000, "account": "acc-1"}


@pytest.fixture
def debit_data() -> dict[str, Any]:
    """유효한 출금 항목 페이로드 (임대료 300)"""
    return {"name": "Shop rent", "amount": 300, "category": "rent"}


# -------------------------------------------------------------------------
# 원장 구성
# -------------------------------------------------------------------------

@pytest.fixture
def memo_store(utc_clock: FakeUtcClock) -> InMemoryMemoStore:
    return InMemoryMemoStore(clock=utc_clock)


@pytest.fixture
def cash_book(memo_store: InMemoryMemoStore, utc_clock: FakeUtcClock) -> CashBook:
    return CashBook(memo_store, clock=utc_clock)


@pytest.fixture
def mock_api(cash_book: CashBook) -> MockCashMemoApi:
    return MockCashMemoApi(cash_book)


@pytest.fixture
def cache(fake_clock: FakeClock) -> TTLCache:
    return TTLCache(clock=fake_clock)


@pytest.fixture
def hosted_book(cash_book: CashBook) -> CashBook:
    """웹 앱의 프로세스 전역 CashBook으로 설치"""
    set_cash_book(cash_book)
    yield cash_book
    set_cash_book(None)
