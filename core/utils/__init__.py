"""
유틸리티 패키지

클라이언트와 웹 레이어가 공유하는 타임존 처리 및 표시 포맷
"""

from core.utils.formatters import format_currency, format_date, format_datetime, format_phone
from core.utils.timezone import (
    PKT,
    business_date,
    format_local,
    now_utc,
    to_local,
)

__all__ = [
    "PKT",
    "business_date",
    "format_local",
    "now_utc",
    "to_local",
    "format_currency",
    "format_date",
    "format_datetime",
    "format_phone",
]
