"""
core/utils/timezone.py 테스트
"""

from datetime import datetime, timedelta, timezone

from core.utils.timezone import ensure_utc, from_db_ts, now_utc, to_db_ts


class TestNowUtc:
    def test_is_aware_utc(self) -> None:
        """UTC aware datetime 반환"""
        assert now_utc().tzinfo == timezone.utc


class TestEnsureUtc:
    def test_naive_is_treated_as_utc(self) -> None:
        """naive → UTC로 간주"""
        result = ensure_utc(datetime(2026, 1, 1, 9, 0))
        assert result == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def test_other_offset_converted(self) -> None:
        """다른 오프셋 → UTC 변환"""
        kst = timezone(timedelta(hours=9))
        result = ensure_utc(datetime(2026, 1, 1, 9, 0, tzinfo=kst))
        assert result == datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestDbTimestamps:
    """DB 저장 포맷"""

    def test_fixed_width_format(self) -> None:
        value = to_db_ts(datetime(2026, 1, 31, tzinfo=timezone.utc))
        assert value == "2026-01-31T00:00:00.000000+00:00"

    def test_none_passthrough(self) -> None:
        assert to_db_ts(None) is None
        assert from_db_ts(None) is None

    def test_round_trip_preserves_instant(self) -> None:
        original = datetime(2026, 3, 15, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert from_db_ts(to_db_ts(original)) == original

    def test_string_order_matches_time_order(self) -> None:
        """문자열 비교 = 시간 비교"""
        earlier = datetime(2026, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc)
        later = datetime(2026, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert to_db_ts(earlier) < to_db_ts(later)
