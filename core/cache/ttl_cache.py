"""
TTL cache

프로세스 내 key/value 캐시 (항목별 TTL)

- 만료된 항목은 반환하지 않으며 조회 시 제거
- 이벤트 루프가 실행 중이면 ``set``이 TTL 경과 후 제거하는 타이머도 예약
  (조회 시점 검사가 기준)
- ``set(key, value, 0)``은 키 삭제 (강제 무효화)

모든 연산은 동기. 같은 인스턴스를 받은 사용자끼리 참조로 공유

사용법:
```python
cache = TTLCache()
cache.set("customers_list", customers, CacheTTL.MEDIUM)
cache.get("customers_list")
```
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """저장 값 + 저장 시각 + TTL"""

    value: Any
    timestamp: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


class TTLCache:
    """항목별 TTL key/value 캐시

    Args:
        clock: 단조 증가 초 단위 시계 (테스트용 주입 가능)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    # -------------------------------------------------------------------------
    # 기본 연산
    # -------------------------------------------------------------------------

    def set(self, key: str, value: Any, ttl: float) -> None:
        """값 저장 (기존 항목과 타이머 교체)

        Args:
            key: 캐시 키
            value: 임의 값
            ttl: 수명 (초), ``<= 0``이면 대신 키 삭제
        """
        if ttl <= 0:
            self.delete(key)
            return

        self._cancel_timer(key)
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock(), ttl=ttl)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[key] = loop.call_later(ttl, self._expire, key)

    def get(self, key: str) -> Any | None:
        """유효한 항목의 값 (없으면 None)"""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self.delete(key)
            return None
        return entry.value

    def has(self, key: str) -> bool:
        """유효한 항목 존재 여부"""
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def delete(self, key: str) -> None:
        """키 삭제 (없는 키는 무시)"""
        self._cancel_timer(key)
        self._entries.pop(key, None)

    def delete_matching(self, substring: str) -> int:
        """``substring``을 포함하는 모든 키 삭제

        Returns:
            삭제된 키 수
        """
        keys = [k for k in self._entries if substring in k]
        for key in keys:
            self.delete(key)
        return len(keys)

    def clear(self) -> None:
        """전체 삭제"""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._entries.clear()

    def size(self) -> int:
        """저장된 항목 수 (제거 전 만료 항목 포함)"""
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def stats(self) -> dict[str, Any]:
        """진단용 항목 수"""
        now = self._clock()
        expired = sum(1 for e in self._entries.values() if e.is_expired(now))
        return {
            "total": len(self._entries),
            "expired": expired,
            "valid": len(self._entries) - expired,
            "keys": list(self._entries),
        }

    # -------------------------------------------------------------------------
    # 타이머
    # -------------------------------------------------------------------------

    def _cancel_timer(self, key: str) -> None:
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()

    def _expire(self, key: str) -> None:
        self._timers.pop(key, None)
        entry = self._entries.get(key)
        # 실제 타이머가 주입된 시계보다 먼저 실행될 수 있음
        if entry is not None and entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            logger.debug(f"캐시 만료: {key}")
