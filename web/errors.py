"""
도메인 예외 → HTTP 예외 변환
"""

from fastapi import HTTPException

from core.errors import (
    ConcurrentModificationError,
    InvalidRecurringTransactionError,
    LedgerError,
    NotFoundError,
    ValidationError,
)


def to_http_exception(error: LedgerError) -> HTTPException:
    """LedgerError를 상태 코드에 매핑

    - NotFoundError → 404
    - InvalidRecurringTransactionError / ValidationError → 400
    - ConcurrentModificationError → 409 (재시도 한도 초과)
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvalidRecurringTransactionError, ValidationError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConcurrentModificationError):
        return HTTPException(
            status_code=409,
            detail="Account was modified concurrently, please retry",
        )
    return HTTPException(status_code=400, detail=str(error))


def internal_error() -> HTTPException:
    """예상하지 못한 오류 (상세 내용은 로그에만)"""
    return HTTPException(status_code=500, detail="Internal server error")
