"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountUpdateRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
    UserCreateRequest,
)
from web.models.responses import (
    AccountResponse,
    HealthResponse,
    SweepResultResponse,
    SweepStatusResponse,
    TransactionListResponse,
    TransactionResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "UserCreateRequest",
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    # Responses
    "HealthResponse",
    "UserResponse",
    "AccountResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "SweepResultResponse",
    "SweepStatusResponse",
]
