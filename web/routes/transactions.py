"""
Transactions 라우트

거래 생성/조회/수정/삭제 API.
모든 변경은 TransactionLifecycleManager를 거쳐 계좌 잔액과 함께 반영됨.
"""

import logging

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.constants import Defaults
from core.domain.models import TransactionFields, TransactionPatch
from core.errors import LedgerError
from core.ledger.lifecycle import TransactionLifecycleManager
from core.types import SortDirection
from web.dependencies import get_app_settings, get_db, get_db_write, get_owner_id
from web.errors import internal_error, to_http_exception
from web.models.requests import TransactionCreateRequest, TransactionUpdateRequest
from web.models.responses import TransactionListResponse, TransactionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Transactions"])


def _manager(db: SQLiteAdapter, settings: Settings) -> TransactionLifecycleManager:
    return TransactionLifecycleManager(db, max_retries=settings.ledger.max_retries)


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: TransactionCreateRequest,
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> TransactionResponse:
    """거래 생성

    계좌 잔액에 즉시 반영.
    is_recurring=true이면 다음 실행일(date + interval)이 설정되고
    이후 Sweep이 주기마다 일회성 거래를 생성.
    """
    fields = TransactionFields(
        type=request.type,
        amount=request.amount,
        category=request.category,
        date=request.date,
        description=request.description,
        receipt_url=request.receipt_url,
        is_recurring=request.is_recurring,
        recurring_interval=request.recurring_interval,
        status=request.status,
    )

    try:
        record = await _manager(db, settings).create(owner_id, request.account_id, fields)
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to create transaction: {e}", exc_info=True)
        raise internal_error() from e

    return TransactionResponse.from_domain(record)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    limit: int = Query(default=Defaults.PAGE_SIZE, ge=1, le=Defaults.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    direction: SortDirection = Query(default=SortDirection.DESC),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TransactionListResponse:
    """소유자 거래 목록 (거래일 정렬)"""
    items, total = await _manager(db, settings).list_for_owner(
        owner_id, limit=limit, offset=offset, direction=direction
    )
    return TransactionListResponse(
        items=[TransactionResponse.from_domain(r) for r in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/transactions/account/{account_id}", response_model=TransactionListResponse)
async def list_account_transactions(
    account_id: str = Path(..., description="계좌 ID"),
    limit: int = Query(default=Defaults.PAGE_SIZE, ge=1, le=Defaults.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    direction: SortDirection = Query(default=SortDirection.DESC),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TransactionListResponse:
    """계좌 거래 목록"""
    try:
        items, total = await _manager(db, settings).list_for_account(
            owner_id, account_id, limit=limit, offset=offset, direction=direction
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return TransactionListResponse(
        items=[TransactionResponse.from_domain(r) for r in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TransactionResponse:
    """거래 조회"""
    try:
        record = await _manager(db, settings).get(owner_id, transaction_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return TransactionResponse.from_domain(record)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    request: TransactionUpdateRequest,
    transaction_id: str = Path(..., description="거래 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> TransactionResponse:
    """거래 수정

    기존 효과를 되돌리고 새 값으로 다시 반영.
    같은 값으로 수정하면 잔액 변화 없음.
    """
    patch = TransactionPatch(**request.model_dump(exclude_unset=True))

    try:
        record = await _manager(db, settings).update(owner_id, transaction_id, patch)
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to update transaction: {e}", exc_info=True)
        raise internal_error() from e

    return TransactionResponse.from_domain(record)


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str = Path(..., description="거래 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """거래 삭제 (잔액에서 효과 제거)"""
    try:
        await _manager(db, settings).delete(owner_id, transaction_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to delete transaction: {e}", exc_info=True)
        raise internal_error() from e
