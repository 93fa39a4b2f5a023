"""
타임존 유틸리티

내부 저장: UTC | 영업일: 파키스탄 표준시(PKT, UTC+5, 서머타임 없음)의 달력 날짜
"""

from datetime import date, datetime, timedelta, timezone

# PKT 타임존 (UTC+5)
PKT = timezone(timedelta(hours=5))


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (timezone aware)

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def to_local(dt: datetime) -> datetime:
    """UTC datetime을 PKT로 변환

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        PKT 타임존의 datetime

    Example:
        >>> to_local(datetime(2025, 1, 1, 20, 0, tzinfo=timezone.utc)).day
        2  # 다음날 01:00
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(PKT)


def format_local(dt: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """UTC datetime을 PKT 문자열로 포맷"""
    return to_local(dt).strftime(fmt)


def business_date(dt: datetime | None = None) -> date:
    """시각이 속한 영업일 (기본: 현재)

    Returns:
        PKT 기준 달력 날짜
    """
    return to_local(dt or now_utc()).date()
