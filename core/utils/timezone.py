"""
타임존 유틸리티

내부 저장은 UTC, 분개일/기초일은 date로 다루기 위한 헬퍼 함수
"""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """DB 저장용 현재 UTC 시각 (ISO 8601)"""
    return now_utc().isoformat()


def parse_date(value: date | str) -> date:
    """분개일/기초일 파싱

    Args:
        value: date 객체 또는 'YYYY-MM-DD' (ISO datetime 허용, 날짜 부분만 사용)

    Returns:
        date 객체

    Raises:
        ValueError: 날짜 형식이 아닌 경우
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Date is required")
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value!r}") from e
