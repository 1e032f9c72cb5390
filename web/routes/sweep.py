"""
Sweep 라우트

반복 거래 Sweep 수동 실행 및 상태 조회 API
"""

import logging

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from web.dependencies import get_app_settings, get_db, get_db_write, get_owner_id
from web.errors import internal_error
from web.models.responses import SweepResultResponse, SweepStatusResponse
from web.services.sweep_service import SweepService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sweep", tags=["Sweep"])


@router.post("/run", response_model=SweepResultResponse)
async def run_sweep(
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> SweepResultResponse:
    """Sweep 즉시 실행

    스케줄과 무관하게 실행 시점이 지난 템플릿을 처리 (X-User-Id 필수).
    개별 템플릿 실패는 결과의 failed_ids로 보고됨.
    """
    logger.info("수동 Sweep 요청", extra={"requested_by": owner_id})
    try:
        result = await SweepService(db, settings).run_now()
    except Exception as e:
        logger.error(f"Failed to run sweep: {e}", exc_info=True)
        raise internal_error() from e

    return SweepResultResponse(
        started_at=result.started_at,
        success_count=result.success_count,
        failure_count=result.failure_count,
        skipped_count=result.skipped_count,
        duration_ms=result.duration_ms,
        processed_ids=result.processed_ids,
        failed_ids=result.failed_ids,
        was_skipped=result.was_skipped,
    )


@router.get("/status", response_model=SweepStatusResponse)
async def get_sweep_status(
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> SweepStatusResponse:
    """마지막 Sweep 결과, Worker 상태, 다음 예정 시각"""
    status = await SweepService(db, settings).get_status()
    return SweepStatusResponse(**status)
