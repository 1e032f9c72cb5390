"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 문자열 또는 숫자로 받아 Decimal로 변환 (소수점 2자리 검증은 Ledger에서).
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from core.types import AccountType, RecurringInterval, TransactionStatus, TransactionType


class UserCreateRequest(BaseModel):
    """사용자 생성 요청"""

    email: str = Field(..., min_length=3, description="이메일 (고유)")
    name: str = Field(..., min_length=1, description="이름")


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    name: str = Field(..., min_length=1, description="계좌 이름")
    account_type: AccountType = Field(..., description="계좌 유형")
    opening_balance: Decimal = Field(default=Decimal("0.00"), description="기초 잔액 (0 이상)")
    is_default: bool = Field(default=False, description="기본 계좌 여부")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Main Checking",
                    "account_type": "CHECKING",
                    "opening_balance": "1000.00",
                    "is_default": True,
                },
            ]
        }
    }


class AccountUpdateRequest(BaseModel):
    """계좌 수정 요청 (잔액은 수정 불가)"""

    name: str | None = Field(default=None, min_length=1)
    account_type: AccountType | None = None
    is_default: bool | None = None


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청

    is_recurring=true이면 date와 recurring_interval 필수.
    """

    account_id: str = Field(..., description="계좌 ID")
    type: TransactionType = Field(..., description="INCOME 또는 EXPENSE")
    amount: Decimal = Field(..., description="금액 (양수, 소수점 2자리 이하)")
    category: str = Field(..., min_length=1, description="카테고리")
    description: str | None = Field(default=None, max_length=500)
    date: datetime | None = Field(default=None, description="거래 시각 (없으면 현재)")
    receipt_url: str | None = Field(default=None, max_length=2048)
    is_recurring: bool = Field(default=False)
    recurring_interval: RecurringInterval | None = None
    status: TransactionStatus = Field(default=TransactionStatus.COMPLETED)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": "3f6c8a1e-0000-0000-0000-000000000000",
                    "type": "INCOME",
                    "amount": "2000.00",
                    "category": "salary",
                    "date": "2026-01-01T00:00:00Z",
                    "is_recurring": True,
                    "recurring_interval": "MONTHLY",
                },
            ]
        }
    }


class TransactionUpdateRequest(BaseModel):
    """거래 수정 요청 (지정한 필드만 변경)"""

    type: TransactionType | None = None
    amount: Decimal | None = None
    description: str | None = Field(default=None, max_length=500)
    date: datetime | None = None
    category: str | None = Field(default=None, min_length=1)
    receipt_url: str | None = Field(default=None, max_length=2048)
    is_recurring: bool | None = None
    recurring_interval: RecurringInterval | None = None
    status: TransactionStatus | None = None
