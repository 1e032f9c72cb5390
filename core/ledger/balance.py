"""
Account Balance Store

계좌 잔액에 부호 있는 금액을 반영/취소.
잔액을 바꾸는 유일한 경로.

- apply: INCOME +amount, EXPENSE -amount
- revert: apply의 정확한 역연산

거래 이력은 보지 않음. 정합성은 호출자가 게시/취소를
논리적 게시당 정확히 한 번씩 호출하는 데 달려 있음.
"""

import logging
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import Account
from core.errors import ConcurrentModificationError
from core.types import TransactionType
from core.utils.money import format_money, signed_amount
from core.utils.timezone import now_utc, to_db_ts

logger = logging.getLogger(__name__)


class AccountBalanceStore:
    """계좌 잔액 저장소

    version 기반 CAS로 갱신:
    UPDATE ... WHERE id = ? AND version = ?
    0행이면 다른 작업이 먼저 잔액을 바꾼 것 → ConcurrentModificationError.

    커밋하지 않음. 호출자의 트랜잭션(거래 레코드 쓰기)과 함께 커밋/롤백됨.

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def apply(
        self,
        account: Account,
        amount: Decimal,
        tx_type: TransactionType | str,
    ) -> Decimal:
        """거래 효과 반영

        Args:
            account: 대상 계좌 (성공 시 balance/version 갱신됨)
            amount: 양수 금액
            tx_type: INCOME 또는 EXPENSE

        Returns:
            새 잔액

        Raises:
            ConcurrentModificationError: version 불일치
        """
        return await self._write(account, signed_amount(amount, tx_type))

    async def revert(
        self,
        account: Account,
        amount: Decimal,
        tx_type: TransactionType | str,
    ) -> Decimal:
        """거래 효과 취소 (apply의 역연산)"""
        return await self._write(account, -signed_amount(amount, tx_type))

    async def _write(self, account: Account, delta: Decimal) -> Decimal:
        new_balance = account.balance + delta
        updated_at = now_utc()

        cursor = await self.db.execute(
            """
            UPDATE accounts
            SET balance = ?, version = version + 1, updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (format_money(new_balance), to_db_ts(updated_at), account.id, account.version),
        )

        if cursor.rowcount == 0:
            logger.warning(
                "잔액 CAS 충돌",
                extra={"account_id": account.id, "expected_version": account.version},
            )
            raise ConcurrentModificationError(account.id, account.version)

        logger.debug(
            f"Balance updated: {account.id} {format_money(account.balance)} -> {format_money(new_balance)}"
        )

        account.balance = new_balance
        account.version += 1
        account.updated_at = updated_at
        return new_balance
