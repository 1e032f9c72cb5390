"""
Ledger 도메인 모델

User / Account / TransactionRecord 데이터 구조.
TransactionRecord 하나가 두 역할을 가짐:
- 템플릿: is_recurring=True. 생성 시 자기 금액이 이미 잔액에 반영됨.
- 실체화 인스턴스: Sweep이 템플릿에서 복사해 만든 일회성 레코드.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from core.types import (
    AccountType,
    RecurrenceState,
    RecurringInterval,
    TransactionStatus,
    TransactionType,
)
from core.utils.money import format_money, signed_amount
from core.utils.timezone import now_utc


@dataclass
class User:
    """사용자 (소유자)"""

    id: str
    email: str
    name: str
    created_at: datetime

    @staticmethod
    def create(email: str, name: str) -> "User":
        return User(id=str(uuid4()), email=email, name=name, created_at=now_utc())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class Account:
    """계좌

    balance는 AccountBalanceStore를 통해서만 변경됨.
    version은 잔액 CAS용 (변경될 때마다 1 증가).
    """

    id: str
    user_id: str
    name: str
    account_type: str
    balance: Decimal
    opening_balance: Decimal
    is_default: bool = False
    version: int = 1
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)

    @staticmethod
    def create(
        user_id: str,
        name: str,
        account_type: AccountType | str,
        opening_balance: Decimal,
        is_default: bool = False,
    ) -> "Account":
        """새 계좌 생성 (잔액 = 기초 잔액)"""
        now = now_utc()
        return Account(
            id=str(uuid4()),
            user_id=user_id,
            name=name,
            account_type=AccountType(account_type).value,
            balance=opening_balance,
            opening_balance=opening_balance,
            is_default=is_default,
            version=1,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "account_type": self.account_type,
            "balance": format_money(self.balance),
            "opening_balance": format_money(self.opening_balance),
            "is_default": self.is_default,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class TransactionRecord:
    """거래 레코드

    불변식: is_recurring ⇔ (recurring_interval, next_recurring_date 모두 not None)
    amount는 항상 양수, 부호는 type에서 결정.
    """

    id: str
    user_id: str
    account_id: str
    type: str
    amount: Decimal
    date: datetime
    category: str
    description: str | None = None
    receipt_url: str | None = None
    is_recurring: bool = False
    recurring_interval: str | None = None
    next_recurring_date: datetime | None = None
    last_processed: datetime | None = None
    status: str = TransactionStatus.COMPLETED.value
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)

    @property
    def signed_amount(self) -> Decimal:
        """잔액에 반영되는 부호 있는 금액"""
        return signed_amount(self.amount, self.type)

    @property
    def recurrence_state(self) -> RecurrenceState:
        if self.is_recurring and self.next_recurring_date is not None:
            return RecurrenceState.ACTIVE
        return RecurrenceState.INACTIVE

    def clear_recurrence(self) -> None:
        """반복 해제 (INACTIVE 전이)"""
        self.is_recurring = False
        self.recurring_interval = None
        self.next_recurring_date = None

    def materialize(self, posted_at: datetime) -> "TransactionRecord":
        """템플릿에서 일회성 인스턴스 생성

        type/amount/description/category/account/owner만 복사.
        반복 필드는 모두 비움.

        Args:
            posted_at: 인스턴스 거래 시각 (Sweep 실행 시각)
        """
        return TransactionRecord(
            id=str(uuid4()),
            user_id=self.user_id,
            account_id=self.account_id,
            type=self.type,
            amount=self.amount,
            date=posted_at,
            category=self.category,
            description=self.description,
            is_recurring=False,
            recurring_interval=None,
            next_recurring_date=None,
            last_processed=None,
            status=TransactionStatus.COMPLETED.value,
            created_at=posted_at,
            updated_at=posted_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "account_id": self.account_id,
            "type": self.type,
            "amount": format_money(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
            "category": self.category,
            "receipt_url": self.receipt_url,
            "is_recurring": self.is_recurring,
            "recurring_interval": self.recurring_interval,
            "next_recurring_date": (
                self.next_recurring_date.isoformat() if self.next_recurring_date else None
            ),
            "last_processed": (
                self.last_processed.isoformat() if self.last_processed else None
            ),
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class TransactionFields:
    """거래 생성 입력값"""

    type: TransactionType | str
    amount: Decimal | str | int
    category: str
    date: datetime | None = None
    description: str | None = None
    receipt_url: str | None = None
    is_recurring: bool = False
    recurring_interval: RecurringInterval | str | None = None
    status: TransactionStatus | str = TransactionStatus.COMPLETED


@dataclass
class TransactionPatch:
    """거래 부분 수정 입력값

    None인 필드는 "변경 없음".
    """

    type: TransactionType | str | None = None
    amount: Decimal | str | int | None = None
    description: str | None = None
    date: datetime | None = None
    category: str | None = None
    receipt_url: str | None = None
    is_recurring: bool | None = None
    recurring_interval: RecurringInterval | str | None = None
    status: TransactionStatus | str | None = None
