"""
Sweep 스케줄

매일 정해진 UTC 시각("HH:MM")에 Sweep 실행.
마지막 실행 시각은 config_store("sweep_status")에서 복구하므로
Worker 재시작 후에도 같은 날 중복 실행하지 않음.
"""

import logging
from datetime import datetime, timedelta

from core.storage.config_store import ConfigStore
from core.utils.timezone import ensure_utc, now_utc
from worker.sweep.engine import RecurringSweepEngine, SweepResult

logger = logging.getLogger(__name__)


class DailySchedule:
    """하루 한 번 실행 스케줄 (UTC)

    Args:
        at: "HH:MM" 형식 시각

    Raises:
        ValueError: 형식 오류
    """

    def __init__(self, at: str):
        self.hour, self.minute = self.parse(at)

    @staticmethod
    def parse(at: str) -> tuple[int, int]:
        try:
            hour_str, minute_str = at.strip().split(":")
            hour, minute = int(hour_str), int(minute_str)
        except (AttributeError, ValueError) as e:
            raise ValueError(f"Invalid schedule time (expected HH:MM): {at!r}") from e

        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Invalid schedule time (expected HH:MM): {at!r}")
        return hour, minute

    def __repr__(self) -> str:
        return f"DailySchedule({self.hour:02d}:{self.minute:02d} UTC)"

    def latest_at_or_before(self, now: datetime) -> datetime:
        """now 이전(포함) 가장 최근 예정 시각"""
        now = ensure_utc(now)
        candidate = now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate > now:
            candidate -= timedelta(days=1)
        return candidate

    def next_after(self, now: datetime) -> datetime:
        """now 이후 다음 예정 시각"""
        return self.latest_at_or_before(now) + timedelta(days=1)

    def is_due(self, now: datetime, last_run: datetime | None) -> bool:
        """마지막 실행 이후 예정 시각이 지났는지"""
        if last_run is None:
            return True
        return self.latest_at_or_before(now) > ensure_utc(last_run)


class SweepScheduler:
    """Sweep 엔진 + 일일 스케줄

    Worker 메인 루프에서 매 틱마다 run_if_due() 호출.

    Args:
        engine: Sweep 엔진
        schedule: 실행 스케줄
        config_store: 마지막 실행 시각 복구용
    """

    def __init__(
        self,
        engine: RecurringSweepEngine,
        schedule: DailySchedule,
        config_store: ConfigStore,
    ):
        self.engine = engine
        self.schedule = schedule
        self.config_store = config_store

        self._last_run: datetime | None = None

    @property
    def last_run(self) -> datetime | None:
        return self._last_run

    async def initialize(
        self,
        first_run_immediately: bool = True,
        now: datetime | None = None,
    ) -> None:
        """마지막 실행 시각 복구

        Args:
            first_run_immediately: 실행 기록이 없을 때 첫 tick에서 바로 실행할지.
                False면 현재 시각을 기준점으로 삼아 다음 예정 시각까지 대기.
            now: 기준 시각 (기본: 현재 UTC)
        """
        self._last_run = await self.config_store.get_last_sweep_at()

        if self._last_run:
            logger.info(
                "Sweep 스케줄 초기화: 마지막 실행 시각 복구됨",
                extra={"last_run_at": self._last_run.isoformat()},
            )
        elif first_run_immediately:
            logger.info("Sweep 스케줄 초기화: 첫 실행")
        else:
            # 기준점은 메모리에만 유지 (실제 실행 시 sweep_status에 기록)
            self._last_run = ensure_utc(now or now_utc())
            logger.info(
                f"Sweep 스케줄 초기화: 실행 기록 없음, "
                f"다음 예정 {self.schedule.next_after(self._last_run).isoformat()}"
            )

    def should_run(self, now: datetime | None = None) -> bool:
        if self.engine.is_running:
            return False
        return self.schedule.is_due(now or now_utc(), self._last_run)

    async def run_if_due(self, now: datetime | None = None) -> SweepResult | None:
        """예정 시각이 지났으면 Sweep 실행

        Returns:
            실행 결과 (실행하지 않았으면 None)
        """
        if not self.should_run(now):
            return None
        return await self.run_now()

    async def run_now(self) -> SweepResult:
        """스케줄과 무관하게 즉시 실행"""
        result = await self.engine.run()
        if not result.was_skipped:
            self._last_run = result.started_at
            logger.info(f"다음 Sweep 예정: {self.schedule.next_after(result.started_at).isoformat()}")
        return result
