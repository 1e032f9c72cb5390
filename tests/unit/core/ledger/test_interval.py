"""
core/ledger/interval.py 테스트

반복 주기 계산 (말일 보정, 윤년)
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.ledger.interval import advance
from core.types import RecurringInterval


class TestAdvance:
    """advance() 테스트"""

    def test_daily(self) -> None:
        """DAILY: +1일"""
        ts = datetime(2026, 1, 31, 8, 30, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.DAILY) == datetime(2026, 2, 1, 8, 30, tzinfo=timezone.utc)

    def test_weekly(self) -> None:
        """WEEKLY: +7일"""
        ts = datetime(2026, 12, 28, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.WEEKLY) == datetime(2027, 1, 4, tzinfo=timezone.utc)

    def test_monthly_clamps_to_month_end(self) -> None:
        """1/31 + 1개월 → 2/28 (평년)"""
        ts = datetime(2026, 1, 31, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.MONTHLY) == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_monthly_leap_year(self) -> None:
        """1/31 + 1개월 → 2/29 (윤년)"""
        ts = datetime(2024, 1, 31, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.MONTHLY) == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_monthly_regular_day(self) -> None:
        ts = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.MONTHLY) == datetime(2026, 2, 15, 10, 0, tzinfo=timezone.utc)

    def test_yearly_feb_29(self) -> None:
        """2/29 + 1년 → 2/28"""
        ts = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert advance(ts, RecurringInterval.YEARLY) == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_accepts_string_value(self) -> None:
        """문자열 주기 허용"""
        ts = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert advance(ts, "DAILY") == ts + timedelta(days=1)

    def test_preserves_naive(self) -> None:
        """naive 입력은 naive 그대로"""
        result = advance(datetime(2026, 1, 31), RecurringInterval.MONTHLY)
        assert result == datetime(2026, 2, 28)
        assert result.tzinfo is None

    def test_preserves_timezone(self) -> None:
        kst = timezone(timedelta(hours=9))
        result = advance(datetime(2026, 1, 1, tzinfo=kst), RecurringInterval.DAILY)
        assert result.tzinfo == kst

    def test_deterministic(self) -> None:
        """같은 입력 → 같은 출력"""
        ts = datetime(2026, 5, 31, tzinfo=timezone.utc)
        assert advance(ts, "MONTHLY") == advance(ts, "MONTHLY")

    def test_unknown_interval_raises(self) -> None:
        """알 수 없는 주기는 ValueError"""
        with pytest.raises(ValueError):
            advance(datetime(2026, 1, 1), "HOURLY")
