"""
RecurringSweepEngine

실행 시점이 지난 반복 템플릿을 찾아 일회성 거래로 실체화.

처리 흐름 (템플릿마다 독립된 DB 트랜잭션):
1. 템플릿 전진 클레임: next_recurring_date가 그대로일 때만 다음 주기로 이동
2. 인스턴스 생성 (type/amount/description/category/account/owner 복사, date=now)
3. 잔액 반영 + 인스턴스 저장 (TransactionLifecycleManager.record_posting)

한 템플릿의 실패는 롤백 후 기록만 하고 다음 템플릿을 계속 처리.
템플릿당 실행 1회에 한 주기만 처리 (밀린 주기는 다음 실행에서 이어서 처리).
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from core.domain.models import TransactionRecord
from core.errors import ConcurrentModificationError, NotFoundError
from core.ledger.interval import advance
from core.ledger.lifecycle import TransactionLifecycleManager
from core.storage.config_store import ConfigStore
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


class _ClaimLost(Exception):
    """다른 실행이 이미 템플릿을 전진시킴"""


@dataclass
class SweepResult:
    """Sweep 실행 결과"""

    started_at: datetime
    success_count: int = 0
    failure_count: int = 0
    skipped_count: int = 0
    duration_ms: float = 0.0
    processed_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)
    was_skipped: bool = False  # 이미 실행 중이라 건너뜀

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count + self.skipped_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_run_at": self.started_at.isoformat(),
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "skipped_count": self.skipped_count,
            "duration_ms": round(self.duration_ms, 2),
            "processed_ids": list(self.processed_ids),
            "failed_ids": list(self.failed_ids),
        }


class RecurringSweepEngine:
    """반복 거래 Sweep 엔진

    Args:
        lifecycle: 거래 생명주기 관리자 (DB/저장소 공유)
        config_store: 실행 결과 저장용 (None이면 저장 안 함)
        clock: 현재 시각 함수 (테스트에서 주입)
        batch_limit: 1회 실행 최대 템플릿 수 (0이면 제한 없음)

    사용 예시:
    ```python
    engine = RecurringSweepEngine(TransactionLifecycleManager(db), ConfigStore(db))
    result = await engine.run()
    print(result.success_count, result.failure_count)
    ```
    """

    def __init__(
        self,
        lifecycle: TransactionLifecycleManager,
        config_store: ConfigStore | None = None,
        clock: Callable[[], datetime] = now_utc,
        batch_limit: int = 0,
    ):
        self.lifecycle = lifecycle
        self.db = lifecycle.db
        self.config_store = config_store
        self.clock = clock
        self.batch_limit = batch_limit

        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def run(self) -> SweepResult:
        """Sweep 1회 실행

        Returns:
            SweepResult (이미 실행 중이면 was_skipped=True인 빈 결과)
        """
        now = self.clock()

        if self._is_running:
            logger.warning("Sweep이 이미 실행 중입니다")
            return SweepResult(started_at=now, was_skipped=True)

        self._is_running = True
        started = time.monotonic()
        result = SweepResult(started_at=now)

        try:
            templates = await self.lifecycle.transactions.find_due_templates(
                now, limit=self.batch_limit or None
            )
            logger.info(f"Sweep 시작: 대상 템플릿 {len(templates)}개")

            for template in templates:
                await self._process(template, now, result)

            result.duration_ms = (time.monotonic() - started) * 1000

            logger.info(
                "Sweep 완료",
                extra={
                    "success_count": result.success_count,
                    "failure_count": result.failure_count,
                    "skipped_count": result.skipped_count,
                    "duration_ms": result.duration_ms,
                },
            )

            if self.config_store is not None:
                await self.config_store.save_sweep_status(result.to_dict())

            return result

        finally:
            self._is_running = False

    async def _process(
        self,
        template: TransactionRecord,
        now: datetime,
        result: SweepResult,
    ) -> None:
        """템플릿 하나 처리 (실패는 result에 기록 후 로그, 다음 템플릿 계속)"""
        try:
            instance = await self._materialize_with_retry(template, now)
        except _ClaimLost:
            result.skipped_count += 1
            logger.info(
                f"템플릿이 이미 처리됨: {template.id}",
                extra={"template_id": template.id},
            )
        except Exception as e:
            result.failure_count += 1
            result.failed_ids.append(template.id)
            logger.error(
                f"반복 거래 처리 실패: {template.id}",
                extra={"template_id": template.id, "error": str(e)},
                exc_info=True,
            )
        else:
            result.success_count += 1
            result.processed_ids.append(template.id)
            logger.debug(
                f"반복 거래 생성: {instance.id}",
                extra={"template_id": template.id, "account_id": instance.account_id},
            )

    async def _materialize_with_retry(
        self,
        template: TransactionRecord,
        now: datetime,
    ) -> TransactionRecord:
        max_retries = self.lifecycle.max_retries
        for attempt in range(1, max_retries + 1):
            try:
                async with self.db.transaction():
                    return await self._materialize(template, now)
            except ConcurrentModificationError:
                if attempt >= max_retries:
                    raise
                logger.info(
                    f"Sweep 잔액 충돌, 재시도 ({attempt}/{max_retries})",
                    extra={"template_id": template.id},
                )
        raise RuntimeError("unreachable")

    async def _materialize(self, template: TransactionRecord, now: datetime) -> TransactionRecord:
        """클레임 → 인스턴스 생성 → 잔액 반영 (호출자 트랜잭션 안에서)"""
        if template.next_recurring_date is None or template.recurring_interval is None:
            raise _ClaimLost(template.id)

        claimed = await self.lifecycle.transactions.advance_template(
            template.id,
            expected_next=template.next_recurring_date,
            new_next=advance(template.next_recurring_date, template.recurring_interval),
            processed_at=now,
        )
        if not claimed:
            raise _ClaimLost(template.id)

        account = await self.lifecycle.accounts.get_by_id(template.account_id)
        if account is None:
            raise NotFoundError("Account", template.account_id)

        instance = template.materialize(now)
        await self.lifecycle.record_posting(account, instance)
        return instance
