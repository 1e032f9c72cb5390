"""
Accounts 라우트

계좌 생성/조회/수정/삭제 API.
잔액은 거래를 통해서만 변경되므로 수정 API에 잔액 필드가 없음.
"""

import logging

from fastapi import APIRouter, Depends, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import LedgerError
from core.ledger.accounts import AccountService
from web.dependencies import get_db, get_db_write, get_owner_id
from web.errors import internal_error, to_http_exception
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import AccountResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Accounts"])


@router.post("/accounts", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계좌 생성 (잔액 = 기초 잔액)"""
    try:
        account = await AccountService(db).create(
            owner_id,
            name=request.name,
            account_type=request.account_type,
            opening_balance=request.opening_balance,
            is_default=request.is_default,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to create account: {e}", exc_info=True)
        raise internal_error() from e

    return AccountResponse.from_domain(account)


@router.get("/accounts", response_model=list[AccountResponse])
async def list_accounts(
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AccountResponse]:
    """소유자 계좌 목록 (기본 계좌 먼저)"""
    accounts = await AccountService(db).list(owner_id)
    return [AccountResponse.from_domain(a) for a in accounts]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., description="계좌 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
) -> AccountResponse:
    """계좌 조회"""
    try:
        account = await AccountService(db).get(owner_id, account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return AccountResponse.from_domain(account)


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    request: AccountUpdateRequest,
    account_id: str = Path(..., description="계좌 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계좌 정보 수정 (이름/유형/기본 여부)"""
    try:
        account = await AccountService(db).update(
            owner_id,
            account_id,
            name=request.name,
            account_type=request.account_type,
            is_default=request.is_default,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to update account: {e}", exc_info=True)
        raise internal_error() from e

    return AccountResponse.from_domain(account)


@router.delete("/accounts/{account_id}", status_code=204)
async def delete_account(
    account_id: str = Path(..., description="계좌 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> None:
    """계좌 삭제 (거래 함께 삭제)"""
    try:
        await AccountService(db).delete(owner_id, account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to delete account: {e}", exc_info=True)
        raise internal_error() from e
