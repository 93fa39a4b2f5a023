"""
Storage module

IMemoStore 프로토콜 기반 원장 날짜 영속화
"""

from core.storage.memo_store import InMemoryMemoStore, SQLiteMemoStore

__all__ = [
    "InMemoryMemoStore",
    "SQLiteMemoStore",
]
