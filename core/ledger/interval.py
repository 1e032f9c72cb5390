"""
반복 주기 계산

(timestamp, interval) → 다음 timestamp 순수 함수.
월/연 단위는 relativedelta의 말일 보정 규칙을 따름:
- 1/31 + 1개월 → 2월 말일 (28일 또는 29일)
- 2/29 + 1년 → 평년이면 2/28
"""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from core.types import RecurringInterval


def advance(ts: datetime, interval: RecurringInterval | str) -> datetime:
    """다음 반복 시각 계산

    타임존(또는 naive 여부)은 입력 그대로 유지.

    Args:
        ts: 기준 시각
        interval: 반복 주기 (Enum 또는 문자열 값)

    Returns:
        한 주기 뒤 시각

    Raises:
        ValueError: 알 수 없는 주기 (프로그래밍 오류)

    Example:
        >>> advance(datetime(2026, 1, 31), RecurringInterval.MONTHLY)
        datetime.datetime(2026, 2, 28, 0, 0)
    """
    interval = RecurringInterval(interval)

    if interval == RecurringInterval.DAILY:
        return ts + timedelta(days=1)
    if interval == RecurringInterval.WEEKLY:
        return ts + timedelta(weeks=1)
    if interval == RecurringInterval.MONTHLY:
        return ts + relativedelta(months=1)
    if interval == RecurringInterval.YEARLY:
        return ts + relativedelta(years=1)

    raise ValueError(f"Unsupported recurring interval: {interval}")
