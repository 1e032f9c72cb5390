"""
ConfigStore - 런타임 상태/설정 저장소

config_store 테이블을 통해 런타임 값 관리.
Worker와 Web이 공유하는 값을 저장/조회.

설정 키 구조:
- "sweep_status": 마지막 Sweep 실행 결과 (last_run_at, 성공/실패 수)
- "worker_status": Worker 프로세스 상태 (heartbeat 등)
"""

import copy
import json
import logging
from datetime import datetime, timezone
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


# 기본 설정값
DEFAULT_CONFIGS: dict[str, dict[str, Any]] = {
    "sweep_status": {
        "last_run_at": None,  # 마지막 실행 시각 (ISO 형식)
        "success_count": 0,
        "failure_count": 0,
        "skipped_count": 0,
        "duration_ms": 0,
        "failed_ids": [],
    },
    "worker_status": {
        # Worker 프로세스 상태 (Web에서 조회용)
        "is_running": False,
        "last_heartbeat": None,  # 마지막 heartbeat 시간 (ISO 형식)
        "tick_count": 0,
        "started_at": None,
    },
}


class ConfigStore:
    """설정 저장소

    config_store 테이블을 읽고 쓰는 클래스.
    Ledger 트랜잭션 밖에서만 사용 (set()이 직접 커밋함).

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        config_store = ConfigStore(db)

        status = await config_store.get_sweep_status()
        last_run_at = status.get("last_run_at")
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._cache: dict[str, dict[str, Any]] = {}

    async def get(self, key: str, use_cache: bool = True) -> dict[str, Any]:
        """설정 조회

        Args:
            key: 설정 키
            use_cache: 캐시 사용 여부 (기본 True)

        Returns:
            설정 값 (dict). 없으면 기본값 사본 반환.
        """
        if use_cache and key in self._cache:
            return copy.deepcopy(self._cache[key])

        try:
            row = await self.db.fetchone(
                """
                SELECT value_json
                FROM config_store
                WHERE config_key = ?
                """,
                (key,),
            )

            if row:
                value = json.loads(row[0]) if isinstance(row[0], str) else row[0]
                self._cache[key] = value
                return copy.deepcopy(value)

        except Exception as e:
            logger.warning(f"Failed to get config '{key}': {e}")

        return copy.deepcopy(DEFAULT_CONFIGS.get(key, {}))

    async def set(
        self,
        key: str,
        value: dict[str, Any],
        updated_by: str = "worker:system",
    ) -> bool:
        """설정 저장 (UPSERT)

        Returns:
            성공 여부
        """
        now = datetime.now(timezone.utc).isoformat()
        value_json = json.dumps(value, ensure_ascii=False)

        try:
            await self.db.execute(
                """
                INSERT INTO config_store (config_key, value_json, version, updated_by, created_at, updated_at)
                VALUES (?, ?, 1, ?, ?, ?)
                ON CONFLICT(config_key) DO UPDATE SET
                    value_json = excluded.value_json,
                    version = config_store.version + 1,
                    updated_by = excluded.updated_by,
                    updated_at = excluded.updated_at
                """,
                (key, value_json, updated_by, now, now),
            )
            await self.db.commit()

            self._cache.pop(key, None)

            # heartbeat 로그는 너무 자주 발생하므로 표시하지 않음
            if updated_by != "worker:heartbeat":
                logger.info(f"Config '{key}' updated by {updated_by}")
            return True

        except Exception as e:
            logger.error(f"Failed to set config '{key}': {e}")
            return False

    async def ensure_defaults(self) -> None:
        """기본 설정이 없으면 생성

        Worker 시작 시 호출하여 필수 키가 존재하도록 보장.
        """
        for key, default_value in DEFAULT_CONFIGS.items():
            row = await self.db.fetchone(
                "SELECT 1 FROM config_store WHERE config_key = ?",
                (key,),
            )
            if not row:
                await self.set(key, default_value, updated_by="worker:init")

    def clear_cache(self) -> None:
        """캐시 초기화"""
        self._cache.clear()

    # =========================================================================
    # Sweep 상태
    # =========================================================================

    async def get_sweep_status(self) -> dict[str, Any]:
        return await self.get("sweep_status", use_cache=False)

    async def save_sweep_status(self, summary: dict[str, Any]) -> bool:
        """Sweep 실행 결과 저장

        Args:
            summary: SweepResult.to_dict() 결과
        """
        return await self.set("sweep_status", summary, updated_by="worker:sweep")

    async def get_last_sweep_at(self) -> datetime | None:
        status = await self.get_sweep_status()
        last_run = status.get("last_run_at")
        return datetime.fromisoformat(last_run) if last_run else None

    # =========================================================================
    # Worker 상태 (Web에서 실행 여부 확인용)
    # =========================================================================

    async def update_worker_status(
        self,
        is_running: bool,
        tick_count: int = 0,
        started_at: str | None = None,
    ) -> bool:
        """Worker 상태 업데이트 (heartbeat 포함)"""
        status = {
            "is_running": is_running,
            "last_heartbeat": datetime.now(timezone.utc).isoformat(),
            "tick_count": tick_count,
            "started_at": started_at,
        }
        return await self.set("worker_status", status, updated_by="worker:heartbeat")

    async def clear_worker_status(self) -> bool:
        """Worker 종료 시 is_running=False로 설정"""
        current = await self.get("worker_status", use_cache=False)
        current["is_running"] = False
        current["last_heartbeat"] = datetime.now(timezone.utc).isoformat()
        return await self.set("worker_status", current, updated_by="worker:shutdown")


async def init_default_configs(db: SQLiteAdapter) -> None:
    """기본 설정 초기화

    Worker/Web 시작 시 호출하여 기본 설정이 존재하도록 보장.
    """
    config_store = ConfigStore(db)
    await config_store.ensure_defaults()
