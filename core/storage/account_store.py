"""
AccountStore - 계좌 저장소

계좌 CRUD. 잔액 컬럼은 이 클래스가 아니라
core.ledger.balance.AccountBalanceStore만 변경함.

모든 쓰기 메서드는 커밋하지 않음 (호출자가 트랜잭션 관리).
"""

import logging
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import Account
from core.utils.money import format_money
from core.utils.timezone import from_db_ts, now_utc, to_db_ts

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = """
    id, user_id, name, account_type, balance, opening_balance,
    is_default, version, created_at, updated_at
"""


class AccountStore:
    """계좌 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    store = AccountStore(db)

    async with db.transaction():
        await store.insert(account)

    account = await store.get_by_id_and_owner(account_id, user_id)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def insert(self, account: Account) -> None:
        """계좌 저장"""
        await self.db.execute(
            f"""
            INSERT INTO accounts ({_ACCOUNT_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.id,
                account.user_id,
                account.name,
                account.account_type,
                format_money(account.balance),
                format_money(account.opening_balance),
                1 if account.is_default else 0,
                account.version,
                to_db_ts(account.created_at),
                to_db_ts(account.updated_at),
            ),
        )

    async def get_by_id(self, account_id: str) -> Account | None:
        """ID로 계좌 조회 (소유자 무관, Sweep용)"""
        row = await self.db.fetchone(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ?",
            (account_id,),
        )
        return self._row_to_account(row) if row else None

    async def get_by_id_and_owner(self, account_id: str, user_id: str) -> Account | None:
        """ID + 소유자로 계좌 조회"""
        row = await self.db.fetchone(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? AND user_id = ?",
            (account_id, user_id),
        )
        return self._row_to_account(row) if row else None

    async def list_by_owner(self, user_id: str) -> list[Account]:
        """소유자의 전체 계좌 (기본 계좌 먼저, 생성 순)"""
        rows = await self.db.fetchall(
            f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE user_id = ?
            ORDER BY is_default DESC, created_at ASC
            """,
            (user_id,),
        )
        return [self._row_to_account(row) for row in rows]

    async def get_default(self, user_id: str) -> Account | None:
        row = await self.db.fetchone(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE user_id = ? AND is_default = 1",
            (user_id,),
        )
        return self._row_to_account(row) if row else None

    async def clear_default(self, user_id: str, except_account_id: str | None = None) -> int:
        """소유자의 기본 계좌 플래그 해제

        Returns:
            해제된 계좌 수
        """
        cursor = await self.db.execute(
            """
            UPDATE accounts SET is_default = 0, updated_at = ?
            WHERE user_id = ? AND is_default = 1 AND id != ?
            """,
            (to_db_ts(now_utc()), user_id, except_account_id or ""),
        )
        return cursor.rowcount

    async def update_details(self, account: Account) -> None:
        """이름/유형/기본 여부 갱신 (잔액은 변경하지 않음)"""
        account.updated_at = now_utc()
        await self.db.execute(
            """
            UPDATE accounts
            SET name = ?, account_type = ?, is_default = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                account.name,
                account.account_type,
                1 if account.is_default else 0,
                to_db_ts(account.updated_at),
                account.id,
            ),
        )

    async def delete(self, account_id: str) -> bool:
        """계좌 삭제 (거래는 FK CASCADE로 함께 삭제)"""
        cursor = await self.db.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_account(row: tuple) -> Account:
        return Account(
            id=row[0],
            user_id=row[1],
            name=row[2],
            account_type=row[3],
            balance=Decimal(row[4]),
            opening_balance=Decimal(row[5]),
            is_default=bool(row[6]),
            version=row[7],
            created_at=from_db_ts(row[8]),
            updated_at=from_db_ts(row[9]),
        )
