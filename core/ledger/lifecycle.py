"""
Transaction Lifecycle Manager

거래 생성/수정/삭제의 진입점.
계좌 잔액을 살아있는 거래 집합과 항상 일치시킴:

    balance == opening_balance + Σ signed_amount(t)

- 생성: apply → insert
- 수정: revert(기존 효과) → 필드 변경 → apply(새 효과) → update
- 삭제: revert → delete

각 작업은 하나의 DB 트랜잭션. 잔액 CAS 충돌 시 작업 전체를 재시도.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable, TypeVar
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.domain.models import (
    Account,
    TransactionFields,
    TransactionPatch,
    TransactionRecord,
)
from core.errors import (
    ConcurrentModificationError,
    InvalidRecurringTransactionError,
    NotFoundError,
    ValidationError,
)
from core.ledger.balance import AccountBalanceStore
from core.ledger.interval import advance
from core.storage.account_store import AccountStore
from core.storage.transaction_store import TransactionStore
from core.storage.user_store import UserStore
from core.types import (
    RecurringInterval,
    SortDirection,
    TransactionStatus,
    TransactionType,
)
from core.utils.money import money_equals, to_positive_money
from core.utils.timezone import ensure_utc, now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BalanceCheck:
    """계좌 잔액 정합성 점검 결과"""

    account_id: str
    balance: Decimal
    expected: Decimal

    @property
    def is_consistent(self) -> bool:
        return money_equals(self.balance, self.expected)

    @property
    def drift(self) -> Decimal:
        return self.balance - self.expected


class TransactionLifecycleManager:
    """거래 생명주기 관리자

    Args:
        db: SQLite 어댑터 (쓰기 가능)
        max_retries: 잔액 CAS 충돌 시 최대 시도 횟수

    사용 예시:
    ```python
    manager = TransactionLifecycleManager(db)

    record = await manager.create(user_id, account_id, TransactionFields(
        type=TransactionType.EXPENSE,
        amount="150.00",
        category="groceries",
    ))

    await manager.update(user_id, record.id, TransactionPatch(amount="120.00"))
    await manager.delete(user_id, record.id)
    ```
    """

    def __init__(self, db: SQLiteAdapter, max_retries: int = Defaults.LEDGER_MAX_RETRIES):
        self.db = db
        self.max_retries = max(1, max_retries)
        self.users = UserStore(db)
        self.accounts = AccountStore(db)
        self.transactions = TransactionStore(db)
        self.balances = AccountBalanceStore(db)

    # =========================================================================
    # 쓰기 작업
    # =========================================================================

    async def create(
        self,
        owner_id: str,
        account_id: str,
        fields: TransactionFields,
    ) -> TransactionRecord:
        """거래 생성

        Raises:
            NotFoundError: 소유자 또는 계좌 없음 (타인 계좌 포함)
            InvalidRecurringTransactionError: 반복 거래에 날짜/주기 없음
            ValidationError: 금액/유형 등 입력 오류
        """

        async def _create() -> TransactionRecord:
            if not await self.users.exists(owner_id):
                raise NotFoundError("User", owner_id)
            account = await self._require_account(account_id, owner_id)

            record = self._build_record(owner_id, account.id, fields)
            await self.record_posting(account, record)
            return record

        record = await self._run_with_retry("create", _create)

        logger.info(
            f"Transaction created: {record.id}",
            extra={
                "account_id": record.account_id,
                "type": record.type,
                "amount": str(record.amount),
                "is_recurring": record.is_recurring,
            },
        )
        return record

    async def update(
        self,
        owner_id: str,
        transaction_id: str,
        patch: TransactionPatch,
    ) -> TransactionRecord:
        """거래 수정 (revert → 변경 → re-apply)

        동일한 값으로 수정하면 잔액 변화 없음.

        Raises:
            NotFoundError: 거래 없음 또는 타인 거래
            InvalidRecurringTransactionError: 반복 설정에 날짜/주기 없음
            ValidationError: 입력 오류
        """

        async def _update() -> TransactionRecord:
            record = await self._require_transaction(transaction_id, owner_id)
            account = await self._require_account(record.account_id, owner_id)

            await self.balances.revert(account, record.amount, record.type)
            self._apply_patch(record, patch)
            await self.balances.apply(account, record.amount, record.type)

            await self.transactions.update(record)
            return record

        record = await self._run_with_retry("update", _update)

        logger.info(
            f"Transaction updated: {record.id}",
            extra={"account_id": record.account_id, "amount": str(record.amount)},
        )
        return record

    async def delete(self, owner_id: str, transaction_id: str) -> None:
        """거래 삭제 (효과 취소 후 삭제)

        Raises:
            NotFoundError: 거래 없음 또는 타인 거래
        """

        async def _delete() -> TransactionRecord:
            record = await self._require_transaction(transaction_id, owner_id)
            account = await self._require_account(record.account_id, owner_id)

            await self.balances.revert(account, record.amount, record.type)
            await self.transactions.delete(record.id)
            return record

        record = await self._run_with_retry("delete", _delete)

        logger.info(
            f"Transaction deleted: {record.id}",
            extra={"account_id": record.account_id},
        )

    async def record_posting(self, account: Account, record: TransactionRecord) -> None:
        """잔액 반영 + 레코드 저장 (생성과 Sweep 공용 경로)

        트랜잭션 관리는 호출자 책임.
        """
        await self.balances.apply(account, record.amount, record.type)
        await self.transactions.insert(record)

    # =========================================================================
    # 조회 (잔액 부수효과 없음)
    # =========================================================================

    async def get(self, owner_id: str, transaction_id: str) -> TransactionRecord:
        return await self._require_transaction(transaction_id, owner_id)

    async def list_for_owner(
        self,
        owner_id: str,
        limit: int = Defaults.PAGE_SIZE,
        offset: int = 0,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> tuple[list[TransactionRecord], int]:
        """소유자 거래 목록

        Returns:
            (거래 목록, 전체 개수)
        """
        items = await self.transactions.list_by_owner(owner_id, limit, offset, direction)
        total = await self.transactions.count_by_owner(owner_id)
        return items, total

    async def list_for_account(
        self,
        owner_id: str,
        account_id: str,
        limit: int = Defaults.PAGE_SIZE,
        offset: int = 0,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> tuple[list[TransactionRecord], int]:
        """계좌 거래 목록

        Raises:
            NotFoundError: 계좌 없음 또는 타인 계좌
        """
        await self._require_account(account_id, owner_id)
        items = await self.transactions.list_by_account(
            account_id, owner_id, limit, offset, direction
        )
        total = await self.transactions.count_by_account(account_id, owner_id)
        return items, total

    async def check_balance(self, owner_id: str, account_id: str) -> BalanceCheck:
        """캐시된 잔액과 거래 합계 비교"""
        account = await self._require_account(account_id, owner_id)
        total = await self.transactions.sum_signed_amounts(account.id)
        return BalanceCheck(
            account_id=account.id,
            balance=account.balance,
            expected=account.opening_balance + total,
        )

    # =========================================================================
    # 내부 헬퍼
    # =========================================================================

    async def _run_with_retry(
        self,
        op_name: str,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        """작업을 DB 트랜잭션 안에서 실행, CAS 충돌 시 처음부터 재시도"""
        for attempt in range(1, self.max_retries + 1):
            try:
                async with self.db.transaction():
                    return await operation()
            except ConcurrentModificationError as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"{op_name} 재시도 한도 초과",
                        extra={"account_id": e.account_id, "attempts": attempt},
                    )
                    raise
                logger.info(
                    f"{op_name} 잔액 충돌, 재시도 ({attempt}/{self.max_retries})",
                    extra={"account_id": e.account_id},
                )
        raise RuntimeError("unreachable")

    async def _require_account(self, account_id: str, owner_id: str) -> Account:
        account = await self.accounts.get_by_id_and_owner(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def _require_transaction(
        self,
        transaction_id: str,
        owner_id: str,
    ) -> TransactionRecord:
        record = await self.transactions.get_by_id_and_owner(transaction_id, owner_id)
        if record is None:
            raise NotFoundError("Transaction", transaction_id)
        return record

    def _build_record(
        self,
        owner_id: str,
        account_id: str,
        fields: TransactionFields,
    ) -> TransactionRecord:
        now = now_utc()
        tx_type = _coerce_type(fields.type)
        amount = to_positive_money(fields.amount)
        category = _require_category(fields.category)
        status = _coerce_status(fields.status)

        if fields.is_recurring:
            if fields.date is None or fields.recurring_interval is None:
                raise InvalidRecurringTransactionError(
                    "Recurring transaction requires date and recurring_interval"
                )
            date = ensure_utc(fields.date)
            interval = _coerce_interval(fields.recurring_interval)
            next_date: datetime | None = advance(date, interval)
            interval_value: str | None = interval.value
        else:
            date = ensure_utc(fields.date) if fields.date else now
            next_date = None
            interval_value = None

        return TransactionRecord(
            id=str(uuid4()),
            user_id=owner_id,
            account_id=account_id,
            type=tx_type.value,
            amount=amount,
            date=date,
            category=category,
            description=fields.description,
            receipt_url=fields.receipt_url,
            is_recurring=bool(fields.is_recurring),
            recurring_interval=interval_value,
            next_recurring_date=next_date,
            last_processed=None,
            status=status.value,
            created_at=now,
            updated_at=now,
        )

    def _apply_patch(self, record: TransactionRecord, patch: TransactionPatch) -> None:
        """지정된 필드만 변경하고 반복 불변식 유지"""
        if patch.type is not None:
            record.type = _coerce_type(patch.type).value
        if patch.amount is not None:
            record.amount = to_positive_money(patch.amount)
        if patch.description is not None:
            record.description = patch.description
        if patch.date is not None:
            record.date = ensure_utc(patch.date)
        if patch.category is not None:
            record.category = _require_category(patch.category)
        if patch.receipt_url is not None:
            record.receipt_url = patch.receipt_url
        if patch.status is not None:
            record.status = _coerce_status(patch.status).value

        if patch.is_recurring is True:
            interval = patch.recurring_interval or record.recurring_interval
            if interval is None:
                raise InvalidRecurringTransactionError(
                    "Recurring transaction requires date and recurring_interval"
                )
            self._schedule(record, _coerce_interval(interval))
        elif patch.is_recurring is False:
            record.clear_recurrence()
        elif patch.recurring_interval is not None:
            if not record.is_recurring:
                raise InvalidRecurringTransactionError(
                    "recurring_interval requires is_recurring=true"
                )
            # 다음 실행일은 유지, 이후 전진부터 새 주기 적용
            record.recurring_interval = _coerce_interval(patch.recurring_interval).value

        record.updated_at = now_utc()

    @staticmethod
    def _schedule(record: TransactionRecord, interval: RecurringInterval) -> None:
        """반복 설정: next_recurring_date = advance(date, interval)"""
        record.is_recurring = True
        record.recurring_interval = interval.value
        record.next_recurring_date = advance(record.date, interval)


def _coerce_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError as e:
        raise ValidationError(f"Invalid transaction type: {value!r}") from e


def _coerce_interval(value: Any) -> RecurringInterval:
    try:
        return RecurringInterval(value)
    except ValueError as e:
        raise InvalidRecurringTransactionError(f"Invalid recurring interval: {value!r}") from e


def _coerce_status(value: Any) -> TransactionStatus:
    try:
        return TransactionStatus(value)
    except ValueError as e:
        raise ValidationError(f"Invalid transaction status: {value!r}") from e


def _require_category(value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError("Category is required")
    return value.strip()
