"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수
DB에는 고정 폭 ISO 문자열로 저장하여 문자열 비교 = 시간 비교가 되도록 함.
"""

from datetime import datetime, timezone

# DB 저장 포맷 (마이크로초 고정 6자리, UTC 오프셋 고정)
DB_TS_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC aware로 변환

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_ts(dt: datetime | None) -> str | None:
    """datetime을 DB 저장용 문자열로 변환

    Example:
        >>> to_db_ts(datetime(2026, 1, 31, tzinfo=timezone.utc))
        '2026-01-31T00:00:00.000000+00:00'
    """
    if dt is None:
        return None
    return ensure_utc(dt).strftime(DB_TS_FORMAT)


def from_db_ts(value: str | None) -> datetime | None:
    """DB 문자열을 UTC datetime으로 변환"""
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))
