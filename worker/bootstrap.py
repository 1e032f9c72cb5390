"""
Worker Bootstrap

설정 로드, 의존성 주입, 메인 루프 관리.

매 tick마다:
- Sweep 스케줄 확인 → 예정 시각이 지났으면 반복 거래 실체화
- Heartbeat (config_store "worker_status")
"""

import asyncio
import contextlib
import logging
import signal
import sys
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from core.ledger.lifecycle import TransactionLifecycleManager
from core.logging import setup_logging
from core.storage.config_store import ConfigStore, init_default_configs
from core.utils.timezone import now_utc
from worker.sweep.engine import RecurringSweepEngine
from worker.sweep.schedule import DailySchedule, SweepScheduler

logger = logging.getLogger("worker")


class WorkerEngine:
    """Worker 엔진

    Sweep 스케줄러를 초기화하고 메인 루프 실행.

    Args:
        settings: 설정 객체 (sweep/worker/ledger 섹션)
        db: SQLite 어댑터
    """

    def __init__(self, settings: Any, db: SQLiteAdapter):
        self.settings = settings
        self.db = db

        self.config_store = ConfigStore(db)
        self.lifecycle = TransactionLifecycleManager(
            db, max_retries=settings.ledger.max_retries
        )
        self.sweep_engine = RecurringSweepEngine(
            self.lifecycle,
            config_store=self.config_store,
            batch_limit=settings.sweep.batch_limit,
        )
        self.scheduler = SweepScheduler(
            self.sweep_engine,
            DailySchedule(settings.sweep.schedule),
            self.config_store,
        )

        self.tick_interval = float(settings.worker.tick_interval_sec)

        # 통계
        self._tick_count = 0
        self._started_at: str | None = None

    @property
    def tick_count(self) -> int:
        return self._tick_count

    async def initialize(self) -> None:
        """기본 설정 생성 및 스케줄 상태 복구"""
        await init_default_configs(self.db)
        await self.scheduler.initialize(
            first_run_immediately=self.settings.sweep.run_on_startup,
        )
        logger.info(f"Sweep 스케줄: {self.scheduler.schedule!r}")

    async def start(self) -> None:
        """엔진 시작"""
        self._started_at = now_utc().isoformat()

        await self.config_store.update_worker_status(
            is_running=True,
            tick_count=0,
            started_at=self._started_at,
        )

        if self.settings.sweep.run_on_startup:
            logger.info("시작 시 Sweep 실행 (run_on_startup)")
            await self.scheduler.run_now()

        logger.info("Worker Engine RUNNING")

    async def stop(self) -> None:
        """엔진 종료"""
        logger.info("Worker Engine 종료 중...")
        await self.config_store.clear_worker_status()

    async def tick(self) -> None:
        """1회 tick: 스케줄 확인 + heartbeat"""
        self._tick_count += 1

        result = await self.scheduler.run_if_due()
        if result is not None and result.failure_count:
            logger.warning(
                f"Sweep 실패 {result.failure_count}건",
                extra={"failed_ids": result.failed_ids},
            )

        await self._heartbeat()

    async def run_main_loop(self, shutdown_event: asyncio.Event) -> None:
        """메인 루프 (shutdown_event가 설정될 때까지)"""
        logger.info("메인 루프 시작")

        while not shutdown_event.is_set():
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"메인 루프 에러: {e}", exc_info=True)

            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(shutdown_event.wait(), timeout=self.tick_interval)

        logger.info("메인 루프 종료")

    async def _heartbeat(self) -> None:
        """Heartbeat 상태 저장 (Web에서 조회 가능)"""
        logger.debug(f"Heartbeat: tick={self._tick_count}")
        await self.config_store.update_worker_status(
            is_running=True,
            tick_count=self._tick_count,
            started_at=self._started_at,
        )


def _install_signal_handlers(shutdown_event: asyncio.Event) -> None:
    """SIGINT/SIGTERM 수신 시 shutdown_event 설정"""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            # Windows: add_signal_handler 미지원 (KeyboardInterrupt로 종료)
            pass


async def main() -> None:
    """Worker 메인 함수"""
    # 1. 설정 로드
    try:
        settings = get_settings()
    except Exception as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"설정 로드 실패: {e}")
        sys.exit(1)

    setup_logging("worker", level=settings.log_level)

    logger.info("=" * 60)
    logger.info("Spendledger Worker 시작")
    logger.info("=" * 60)
    logger.info(f"Mode: {settings.mode.value}")
    logger.info(f"DB: {settings.db_path}")

    # 2. DB 연결 및 스키마 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

        # 3. Worker 엔진 생성 및 초기화
        engine = WorkerEngine(settings, db)
        await engine.initialize()

        # 4. 종료 이벤트 설정
        shutdown_event = asyncio.Event()
        _install_signal_handlers(shutdown_event)

        logger.info("Worker 메인 루프 시작 (종료: Ctrl+C)")

        try:
            await engine.start()
            await engine.run_main_loop(shutdown_event)
        except asyncio.CancelledError:
            logger.info("메인 루프 취소됨")
        except KeyboardInterrupt:
            logger.info("Ctrl+C 감지")
        finally:
            await engine.stop()

    logger.info("Spendledger Worker 정상 종료")


if __name__ == "__main__":
    asyncio.run(main())
