"""
표시용 포맷터

소수점 없는 루피 금액, 짧은 날짜, 0300-1234567 형식의 휴대폰 번호
"""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from core.utils.timezone import to_local

_PHONE_RE = re.compile(r"(\d{4})(\d{7})")


def format_currency(amount: Any) -> str:
    """Rs 1,234 (루피 단위 반올림, 음수는 부호 유지)"""
    value = Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}Rs {abs(value):,}"


def format_date(value: date | datetime | str | None) -> str:
    """1 Jan 2025 (값이 없으면 "-")"""
    if not value:
        return "-"
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = to_local(value).date()
    return f"{value.day} {value.strftime('%b %Y')}"


def format_datetime(value: datetime | None) -> str:
    """PKT 기준 1 Jan 2025, 14:30 (값이 없으면 "-")"""
    if value is None:
        return "-"
    local = to_local(value)
    return f"{local.day} {local.strftime('%b %Y, %H:%M')}"


def format_phone(phone: str | None) -> str:
    """03001234567 → 0300-1234567"""
    if not phone:
        return "-"
    return _PHONE_RE.sub(r"\1-\2", phone, count=1)
