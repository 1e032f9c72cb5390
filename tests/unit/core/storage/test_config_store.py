"""
ConfigStore 테스트

config_store 테이블 CRUD 및 Sweep/Worker 상태
"""

import json
from datetime import datetime, timezone

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.storage.config_store import (
    DEFAULT_CONFIGS,
    ConfigStore,
    init_default_configs,
)


@pytest.fixture
def config_store(db: SQLiteAdapter) -> ConfigStore:
    """ConfigStore 인스턴스"""
    return ConfigStore(db)


class TestConfigStoreGet:
    """get() 메서드 테스트"""

    @pytest.mark.asyncio
    async def test_get_returns_default_when_not_exists(
        self,
        config_store: ConfigStore,
    ) -> None:
        """존재하지 않는 키는 기본값 반환"""
        result = await config_store.get("sweep_status")

        assert result == DEFAULT_CONFIGS["sweep_status"]

    @pytest.mark.asyncio
    async def test_default_is_a_copy(
        self,
        config_store: ConfigStore,
    ) -> None:
        """반환값 수정이 기본값에 영향 없음"""
        result = await config_store.get("sweep_status")
        result["failed_ids"].append("x")

        assert DEFAULT_CONFIGS["sweep_status"]["failed_ids"] == []

    @pytest.mark.asyncio
    async def test_get_uses_cache(
        self,
        config_store: ConfigStore,
    ) -> None:
        """캐시 사용 확인"""
        await config_store.set("test_key", {"test": "value"})

        assert await config_store.get("test_key") == {"test": "value"}
        assert "test_key" in config_store._cache

    @pytest.mark.asyncio
    async def test_get_bypass_cache(
        self,
        config_store: ConfigStore,
        db: SQLiteAdapter,
    ) -> None:
        """캐시 무시하고 DB에서 직접 읽기"""
        await config_store.set("test_key", {"test": "value"})
        await config_store.get("test_key")

        await db.execute(
            "UPDATE config_store SET value_json = ? WHERE config_key = ?",
            (json.dumps({"test": "modified"}), "test_key"),
        )
        await db.commit()

        assert await config_store.get("test_key", use_cache=False) == {"test": "modified"}


class TestConfigStoreSet:
    """set() 메서드 테스트"""

    @pytest.mark.asyncio
    async def test_upsert_increments_version(
        self,
        config_store: ConfigStore,
        db: SQLiteAdapter,
    ) -> None:
        """같은 키 재저장 시 version 증가"""
        assert await config_store.set("k", {"v": 1}) is True
        assert await config_store.set("k", {"v": 2}, updated_by="web:admin") is True

        row = await db.fetchone(
            "SELECT value_json, version, updated_by FROM config_store WHERE config_key = ?",
            ("k",),
        )
        assert json.loads(row[0]) == {"v": 2}
        assert row[1] == 2
        assert row[2] == "web:admin"


class TestEnsureDefaults:
    @pytest.mark.asyncio
    async def test_creates_missing_keys_only(
        self,
        db: SQLiteAdapter,
    ) -> None:
        """없는 키만 생성 (기존 값 유지)"""
        store = ConfigStore(db)
        await store.set("sweep_status", {"last_run_at": "2026-01-01T00:00:00+00:00"})

        await init_default_configs(db)

        rows = await db.fetchall("SELECT config_key FROM config_store")
        assert {r[0] for r in rows} == set(DEFAULT_CONFIGS)
        status = await store.get_sweep_status()
        assert status["last_run_at"] == "2026-01-01T00:00:00+00:00"


class TestSweepStatus:
    """Sweep 상태 저장/조회"""

    @pytest.mark.asyncio
    async def test_last_sweep_at_none_initially(
        self,
        config_store: ConfigStore,
    ) -> None:
        assert await config_store.get_last_sweep_at() is None

    @pytest.mark.asyncio
    async def test_save_and_restore_last_run(
        self,
        config_store: ConfigStore,
    ) -> None:
        run_at = datetime(2026, 3, 1, 2, 0, tzinfo=timezone.utc)
        await config_store.save_sweep_status(
            {"last_run_at": run_at.isoformat(), "success_count": 3, "failure_count": 0}
        )

        assert await config_store.get_last_sweep_at() == run_at
        status = await config_store.get_sweep_status()
        assert status["success_count"] == 3


class TestWorkerStatus:
    """Worker heartbeat 상태"""

    @pytest.mark.asyncio
    async def test_update_and_clear(
        self,
        config_store: ConfigStore,
    ) -> None:
        await config_store.update_worker_status(
            is_running=True, tick_count=5, started_at="2026-03-01T00:00:00+00:00"
        )
        status = await config_store.get("worker_status", use_cache=False)
        assert status["is_running"] is True
        assert status["tick_count"] == 5
        assert status["last_heartbeat"] is not None

        await config_store.clear_worker_status()
        status = await config_store.get("worker_status", use_cache=False)
        assert status["is_running"] is False
        assert status["tick_count"] == 5
