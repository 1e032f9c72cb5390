"""
Sweep 서비스

수동 Sweep 실행 및 Worker/Sweep 상태 조회
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.lifecycle import TransactionLifecycleManager
from core.storage.config_store import ConfigStore
from core.utils.timezone import now_utc
from worker.sweep.engine import RecurringSweepEngine, SweepResult
from worker.sweep.schedule import DailySchedule

logger = logging.getLogger(__name__)


class SweepService:
    """Sweep 서비스

    Web 요청마다 생성. 다른 프로세스(Worker)와의 중복 처리는
    템플릿 전진 클레임으로 방지됨.

    Args:
        db: SQLite 어댑터 (run_now는 쓰기 가능해야 함)
        settings: 설정 객체 (sweep/ledger 섹션)
    """

    def __init__(self, db: SQLiteAdapter, settings: Any):
        self.db = db
        self.settings = settings
        self.config_store = ConfigStore(db)

    async def run_now(self) -> SweepResult:
        """즉시 Sweep 실행 (결과는 sweep_status에 저장)"""
        lifecycle = TransactionLifecycleManager(
            self.db, max_retries=self.settings.ledger.max_retries
        )
        engine = RecurringSweepEngine(
            lifecycle,
            config_store=self.config_store,
            batch_limit=self.settings.sweep.batch_limit,
        )

        logger.info("수동 Sweep 실행 요청")
        return await engine.run()

    async def get_status(self) -> dict[str, Any]:
        """마지막 Sweep 결과 + Worker 상태 + 다음 예정 시각"""
        schedule = DailySchedule(self.settings.sweep.schedule)
        return {
            "sweep": await self.config_store.get_sweep_status(),
            "worker": await self.config_store.get("worker_status", use_cache=False),
            "schedule": self.settings.sweep.schedule,
            "next_run_at": schedule.next_after(now_utc()),
        }
