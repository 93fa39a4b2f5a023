"""
Memo stores

``IMemoStore`` 프로토콜 기반 원장 날짜 영속화

- ``InMemoryMemoStore``: dict 기반, 프로세스 내 Mock API 및 테스트용
- ``SQLiteMemoStore``: aiosqlite 기반, 웹 서비스용

두 저장소 모두 날짜당 메모 하나를 보장하고 저장마다 ``version`` 증가
"""

import json
import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import ConflictError, NotFoundError
from core.ledger.memo import DailyCashMemo
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryMemoStore:
    """dict 기반 메모 저장소

    Args:
        clock: 현재 UTC 시각 반환 함수 (테스트용 주입 가능)
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock
        self._by_id: dict[str, DailyCashMemo] = {}
        self._id_by_date: dict[date, str] = {}

    async def get_by_date(self, memo_date: date) -> DailyCashMemo | None:
        memo_id = self._id_by_date.get(memo_date)
        return self._by_id.get(memo_id) if memo_id else None

    async def get_by_id(self, memo_id: str) -> DailyCashMemo | None:
        return self._by_id.get(memo_id)

    async def get_latest_before(self, memo_date: date) -> DailyCashMemo | None:
        earlier = [d for d in self._id_by_date if d < memo_date]
        if not earlier:
            return None
        return self._by_id[self._id_by_date[max(earlier)]]

    async def list_between(self, start: date, end: date) -> list[DailyCashMemo]:
        dates = sorted(d for d in self._id_by_date if start <= d <= end)
        return [self._by_id[self._id_by_date[d]] for d in dates]

    async def list_after(self, memo_date: date) -> list[DailyCashMemo]:
        dates = sorted(d for d in self._id_by_date if d > memo_date)
        return [self._by_id[self._id_by_date[d]] for d in dates]

    async def insert(self, memo: DailyCashMemo) -> DailyCashMemo:
        if memo.date in self._id_by_date:
            raise ConflictError(f"Daily cash memo for {memo.date} already exists")
        now = self._clock()
        stored = replace(
            memo,
            id=memo.id or _new_id(),
            version=1,
            created_at=now,
            updated_at=now,
        )
        self._by_id[stored.id] = stored
        self._id_by_date[stored.date] = stored.id
        return stored

    async def save(self, memo: DailyCashMemo) -> DailyCashMemo:
        current = self._by_id.get(memo.id) if memo.id else None
        if current is None:
            raise NotFoundError(f"Daily cash memo {memo.id} not found")
        if current.version != memo.version:
            raise ConflictError(
                f"Daily cash memo for {memo.date} changed "
                f"(version {current.version}, expected {memo.version})"
            )
        stored = replace(
            memo,
            date=current.date,
            version=current.version + 1,
            created_at=current.created_at,
            updated_at=self._clock(),
        )
        self._by_id[stored.id] = stored
        return stored


class SQLiteMemoStore:
    """SQLite 기반 메모 저장소

    메모는 API 페이로드(JSON)로 조회용 컬럼과 함께 저장.

    Args:
        db: 스키마가 초기화된 연결 상태의 SQLiteAdapter
        clock: 현재 UTC 시각 반환 함수

    사용법:
    ```python
    async with SQLiteAdapter(Paths.LEDGER_DB) as db:
        await init_schema(db)
        store = SQLiteMemoStore(db)
        memo = await store.get_by_date(date(2025, 1, 1))
    ```
    """

    _COLUMNS = "payload"

    def __init__(self, db: SQLiteAdapter, clock: Callable[[], datetime] = now_utc):
        self.db = db
        self._clock = clock

    @staticmethod
    def _decode(row: tuple | None) -> DailyCashMemo | None:
        if row is None:
            return None
        return DailyCashMemo.from_api(json.loads(row[0]))

    async def get_by_date(self, memo_date: date) -> DailyCashMemo | None:
        row = await self.db.fetchone(
            f"SELECT {self._COLUMNS} FROM daily_cash_memos WHERE memo_date = ?",
            (memo_date.isoformat(),),
        )
        return self._decode(row)

    async def get_by_id(self, memo_id: str) -> DailyCashMemo | None:
        row = await self.db.fetchone(
            f"SELECT {self._COLUMNS} FROM daily_cash_memos WHERE memo_id = ?",
            (memo_id,),
        )
        return self._decode(row)

    async def get_latest_before(self, memo_date: date) -> DailyCashMemo | None:
        row = await self.db.fetchone(
            f"SELECT {self._COLUMNS} FROM daily_cash_memos "
            "WHERE memo_date < ? ORDER BY memo_date DESC LIMIT 1",
            (memo_date.isoformat(),),
        )
        return self._decode(row)

    async def list_between(self, start: date, end: date) -> list[DailyCashMemo]:
        rows = await self.db.fetchall(
            f"SELECT {self._COLUMNS} FROM daily_cash_memos "
            "WHERE memo_date >= ? AND memo_date <= ? ORDER BY memo_date ASC",
            (start.isoformat(), end.isoformat()),
        )
        return [DailyCashMemo.from_api(json.loads(r[0])) for r in rows]

    async def list_after(self, memo_date: date) -> list[DailyCashMemo]:
        rows = await self.db.fetchall(
            f"SELECT {self._COLUMNS} FROM daily_cash_memos "
            "WHERE memo_date > ? ORDER BY memo_date ASC",
            (memo_date.isoformat(),),
        )
        return [DailyCashMemo.from_api(json.loads(r[0])) for r in rows]

    async def insert(self, memo: DailyCashMemo) -> DailyCashMemo:
        existing = await self.db.fetchone(
            "SELECT memo_id FROM daily_cash_memos WHERE memo_date = ?",
            (memo.date.isoformat(),),
        )
        if existing is not None:
            raise ConflictError(f"Daily cash memo for {memo.date} already exists")

        now = self._clock()
        stored = replace(
            memo,
            id=memo.id or _new_id(),
            version=1,
            created_at=now,
            updated_at=now,
        )
        async with self.db.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO daily_cash_memos (
                    memo_id, memo_date, status, version, payload, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.date.isoformat(),
                    stored.status,
                    stored.version,
                    json.dumps(stored.to_api()),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )

        logger.debug(f"메모 저장 (신규): {stored.date} ({stored.id})")
        return stored

    async def save(self, memo: DailyCashMemo) -> DailyCashMemo:
        current = await self.get_by_id(memo.id) if memo.id else None
        if current is None:
            raise NotFoundError(f"Daily cash memo {memo.id} not found")

        stored = replace(
            memo,
            date=current.date,
            version=memo.version + 1,
            created_at=current.created_at,
            updated_at=self._clock(),
        )
        async with self.db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE daily_cash_memos
                SET status = ?, version = ?, payload = ?, updated_at = ?
                WHERE memo_id = ? AND version = ?
                """,
                (
                    stored.status,
                    stored.version,
                    json.dumps(stored.to_api()),
                    stored.updated_at.isoformat(),
                    stored.id,
                    memo.version,
                ),
            )
            if cursor.rowcount == 0:
                raise ConflictError(
                    f"Daily cash memo for {memo.date} changed "
                    f"(version {current.version}, expected {memo.version})"
                )

        logger.debug(f"메모 저장: {stored.date} v{stored.version}")
        return stored
