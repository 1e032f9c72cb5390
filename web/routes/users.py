"""
Users 라우트

사용자 생성 및 조회 API
"""

import logging

from fastapi import APIRouter, Depends, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import LedgerError
from core.ledger.accounts import UserService
from web.dependencies import get_db, get_db_write
from web.errors import internal_error, to_http_exception
from web.models.requests import UserCreateRequest
from web.models.responses import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    request: UserCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> UserResponse:
    """사용자 생성"""
    try:
        user = await UserService(db).create(request.email, request.name)
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to create user: {e}", exc_info=True)
        raise internal_error() from e

    return UserResponse.from_domain(user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str = Path(..., description="사용자 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> UserResponse:
    """사용자 조회"""
    try:
        user = await UserService(db).get(user_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return UserResponse.from_domain(user)
