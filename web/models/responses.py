"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 소수점 2자리 문자열.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from core.domain.models import Account, TransactionRecord, User
from core.utils.money import format_money


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (production/development)")
    version: str = Field(..., description="버전")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class UserResponse(BaseModel):
    """사용자 응답"""

    id: str
    email: str
    name: str
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name, created_at=user.created_at)


class AccountResponse(BaseModel):
    """계좌 응답"""

    id: str
    user_id: str
    name: str
    account_type: str
    balance: str = Field(..., description="현재 잔액")
    opening_balance: str = Field(..., description="기초 잔액")
    is_default: bool
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            user_id=account.user_id,
            name=account.name,
            account_type=account.account_type,
            balance=format_money(account.balance),
            opening_balance=format_money(account.opening_balance),
            is_default=account.is_default,
            version=account.version,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: str
    user_id: str
    account_id: str
    type: str
    amount: str
    description: str | None = None
    date: datetime
    category: str
    receipt_url: str | None = None
    is_recurring: bool
    recurring_interval: str | None = None
    next_recurring_date: datetime | None = None
    last_processed: datetime | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, record: TransactionRecord) -> "TransactionResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            account_id=record.account_id,
            type=record.type,
            amount=format_money(record.amount),
            description=record.description,
            date=record.date,
            category=record.category,
            receipt_url=record.receipt_url,
            is_recurring=record.is_recurring,
            recurring_interval=record.recurring_interval,
            next_recurring_date=record.next_recurring_date,
            last_processed=record.last_processed,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class TransactionListResponse(BaseModel):
    """거래 목록 응답"""

    items: list[TransactionResponse]
    total: int = Field(..., description="전체 개수")
    limit: int
    offset: int


class SweepResultResponse(BaseModel):
    """수동 Sweep 실행 결과"""

    started_at: datetime
    success_count: int
    failure_count: int
    skipped_count: int
    duration_ms: float
    processed_ids: list[str] = Field(default_factory=list)
    failed_ids: list[str] = Field(default_factory=list)
    was_skipped: bool = False


class SweepStatusResponse(BaseModel):
    """Sweep / Worker 상태"""

    sweep: dict[str, Any] = Field(..., description="마지막 Sweep 결과")
    worker: dict[str, Any] = Field(..., description="Worker heartbeat 상태")
    schedule: str = Field(..., description="실행 시각 (HH:MM UTC)")
    next_run_at: datetime = Field(..., description="다음 예정 시각")
