"""
Database adapter

서버 측 CashBook용 SQLite (WAL 모드) 연결 관리
"""

from adapters.db.sqlite_adapter import (
    MEMORY_DB,
    SQLiteAdapter,
    create_connection,
    init_schema,
)

__all__ = [
    "MEMORY_DB",
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
]
