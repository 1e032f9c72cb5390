"""
WorkerEngine 통합 테스트

tick → Sweep 실행 + heartbeat, 시작/종료 상태 기록
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import AppConfig, SweepSettings, WorkerSettings
from core.domain.models import Account, TransactionFields, User
from core.ledger.lifecycle import TransactionLifecycleManager
from core.storage.account_store import AccountStore
from worker.bootstrap import WorkerEngine


def _config(run_on_startup: bool = False) -> AppConfig:
    return AppConfig(
        sweep=SweepSettings(schedule="02:00", run_on_startup=run_on_startup),
        worker=WorkerSettings(tick_interval_sec=0.01),
    )


async def _past_due_template(
    manager: TransactionLifecycleManager,
    user: User,
    account: Account,
) -> None:
    await manager.create(
        user.id,
        account.id,
        TransactionFields(
            type="INCOME",
            amount="100.00",
            category="salary",
            date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            is_recurring=True,
            recurring_interval="MONTHLY",
        ),
    )


class TestWorkerEngine:
    """WorkerEngine 테스트"""

    @pytest.mark.asyncio
    async def test_settings_wired(self, db: SQLiteAdapter) -> None:
        engine = WorkerEngine(_config(), db)

        assert engine.tick_interval == 0.01
        assert engine.lifecycle.max_retries == AppConfig().ledger.max_retries
        assert engine.scheduler.schedule.hour == 2

    @pytest.mark.asyncio
    async def test_first_tick_runs_sweep(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        """run_on_startup이고 이전 실행 기록이 없으면 첫 tick에서 Sweep 실행"""
        await _past_due_template(manager, user, account)
        engine = WorkerEngine(_config(run_on_startup=True), db)
        await engine.initialize()

        await engine.tick()

        saved = await AccountStore(db).get_by_id(account.id)
        assert saved.balance == Decimal("1200.00")
        status = await engine.config_store.get_sweep_status()
        assert status["success_count"] == 1
        assert engine.scheduler.last_run is not None

    @pytest.mark.asyncio
    async def test_first_tick_waits_for_schedule_by_default(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        """run_on_startup=false면 새 DB에서도 첫 tick에 Sweep하지 않음"""
        await _past_due_template(manager, user, account)
        engine = WorkerEngine(_config(), db)
        await engine.initialize()
        await engine.start()

        result = await engine.scheduler.run_if_due()
        await engine.tick()

        assert result is None
        saved = await AccountStore(db).get_by_id(account.id)
        assert saved.balance == Decimal("1100.00")
        assert await engine.config_store.get_last_sweep_at() is None

    @pytest.mark.asyncio
    async def test_second_tick_same_day_no_sweep(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        """같은 날 두 번째 tick은 Sweep 건너뜀 (밀린 주기는 다음 날 처리)"""
        await _past_due_template(manager, user, account)
        engine = WorkerEngine(_config(run_on_startup=True), db)
        await engine.initialize()

        await engine.tick()
        await engine.tick()

        saved = await AccountStore(db).get_by_id(account.id)
        assert saved.balance == Decimal("1200.00")
        assert engine.tick_count == 2

    @pytest.mark.asyncio
    async def test_heartbeat(self, db: SQLiteAdapter) -> None:
        engine = WorkerEngine(_config(), db)
        await engine.initialize()
        await engine.start()

        await engine.tick()

        status = await engine.config_store.get("worker_status", use_cache=False)
        assert status["is_running"] is True
        assert status["tick_count"] == 1
        assert status["started_at"] is not None

    @pytest.mark.asyncio
    async def test_run_on_startup(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        await _past_due_template(manager, user, account)
        engine = WorkerEngine(_config(run_on_startup=True), db)
        await engine.initialize()

        await engine.start()

        saved = await AccountStore(db).get_by_id(account.id)
        assert saved.balance == Decimal("1200.00")

    @pytest.mark.asyncio
    async def test_stop_clears_running(self, db: SQLiteAdapter) -> None:
        engine = WorkerEngine(_config(), db)
        await engine.initialize()
        await engine.start()

        await engine.stop()

        status = await engine.config_store.get("worker_status", use_cache=False)
        assert status["is_running"] is False

    @pytest.mark.asyncio
    async def test_restart_restores_last_run(
        self,
        db: SQLiteAdapter,
    ) -> None:
        """재시작 시 config_store의 마지막 실행 시각 복구"""
        first = WorkerEngine(_config(run_on_startup=True), db)
        await first.initialize()
        await first.tick()

        second = WorkerEngine(_config(), db)
        await second.initialize()

        assert second.scheduler.last_run == first.scheduler.last_run


class TestMainLoop:
    """run_main_loop 테스트"""

    @pytest.mark.asyncio
    async def test_loop_survives_tick_error(self, db: SQLiteAdapter) -> None:
        """tick 예외가 루프를 멈추지 않음"""
        engine = WorkerEngine(_config(), db)
        shutdown_event = asyncio.Event()
        calls = {"n": 0}

        async def flaky_tick():
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("tick failed")
            shutdown_event.set()

        with patch.object(engine, "tick", AsyncMock(side_effect=flaky_tick)):
            await asyncio.wait_for(engine.run_main_loop(shutdown_event), timeout=5)

        assert calls["n"] == 2

    @pytest.mark.asyncio
    async def test_loop_exits_when_shutdown_set(self, db: SQLiteAdapter) -> None:
        engine = WorkerEngine(_config(), db)
        shutdown_event = asyncio.Event()
        shutdown_event.set()

        with patch.object(engine, "tick", AsyncMock()) as tick:
            await engine.run_main_loop(shutdown_event)

        tick.assert_not_awaited()
