"""
Mock adapters

테스트용 프로세스 내 구현.
동일한 Protocol을 따르므로 실제 클라이언트 대체 가능
"""

from adapters.mock.cash_memo_api import MockApiState, MockCashMemoApi
from adapters.mock.party_api import MockPartyApi

__all__ = [
    "MockApiState",
    "MockCashMemoApi",
    "MockPartyApi",
]
