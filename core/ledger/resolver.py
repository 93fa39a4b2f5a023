"""
Previous-balance resolver

새 원장 하루치의 이월 잔액 결정.
직전(해당 날짜보다 엄격히 이전)의 가장 최근 날의 계산된 마감 잔액,
없으면 0 (거래가 없는 날은 메모가 없음).

결정은 날짜 생성 시 한 번만 수행.
이전 날짜를 나중에 수정해도 자동 전파되지 않으며
``CashBook.recompute_forward``로 명시적으로 재계산
"""

import logging
from datetime import date
from decimal import Decimal

from adapters.interfaces import IMemoStore
from core.ledger.entry import ZERO
from core.ledger.errors import ValidationError

logger = logging.getLogger(__name__)


class OpeningBalanceResolver:
    """메모 저장소 기반 이월 잔액 조회

    Args:
        store: 메모 저장소
    """

    def __init__(self, store: IMemoStore):
        self.store = store

    async def previous_balance(self, memo_date: date) -> Decimal:
        """``memo_date`` 이전 가장 최근 날의 마감 잔액 (없으면 0)

        읽기 전용: 메모가 이미 있는 날짜도 응답
        """
        previous = await self.store.get_latest_before(memo_date)
        if previous is None:
            return ZERO
        return previous.closing_balance

    async def resolve_opening_balance(self, memo_date: date) -> Decimal:
        """생성할 날짜의 이월 잔액 스냅샷

        Raises:
            ValidationError: ``memo_date``에 이미 메모가 있음 (직접 조회할 것)
        """
        existing = await self.store.get_by_date(memo_date)
        if existing is not None:
            raise ValidationError(
                f"Daily cash memo for {memo_date} already exists; "
                "its opening balance is fixed",
                {"date": memo_date.isoformat()},
            )
        balance = await self.previous_balance(memo_date)
        logger.debug(f"이월 잔액 결정: {memo_date} → {balance}")
        return balance
