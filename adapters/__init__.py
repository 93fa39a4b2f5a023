"""
Adapter layer

외부 서비스 연동 (원격 원장 API, 데이터베이스).
Protocol 기반 인터페이스로 Mock 교체 가능
"""

from adapters.interfaces import (
    ICashMemoApi,
    IMemoStore,
    IPartyApi,
)

__all__ = [
    "ICashMemoApi",
    "IMemoStore",
    "IPartyApi",
]
